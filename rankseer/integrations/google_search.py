"""Google Custom Search JSON API client producing tagged search outcomes."""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote_plus

import httpx

from rankseer.constants import (
    GOOGLE_CUSTOM_SEARCH_URL,
    LIVE_PLATFORM,
    MAX_RESULTS,
    PLACEHOLDER_RESULT_COUNT,
)
from rankseer.models.ranking import (
    ConfigurationError,
    EmptyResult,
    ExecutionError,
    ProviderError,
    SearchOutcome,
    SearchRequest,
    SearchResultItem,
    SearchResults,
)

logger = logging.getLogger(__name__)

API_KEY_ENV = "GOOGLE_SEARCH_API_KEY"
ENGINE_ID_ENV = "GOOGLE_SEARCH_ENGINE_ID"

# Values shipped in .env.example and docs; treated the same as unset.
PLACEHOLDER_VALUES = frozenset({
    "your_api_key",
    "your_api_key_here",
    "your-api-key",
    "your_search_engine_id",
    "your_search_engine_id_here",
    "your-search-engine-id",
    "changeme",
    "xxx",
})


def is_placeholder(value: Optional[str]) -> bool:
    """Return True if *value* is empty, blank, or a known placeholder."""
    if value is None:
        return True
    cleaned = value.strip()
    return not cleaned or cleaned.lower() in PLACEHOLDER_VALUES


@dataclass(frozen=True)
class SearchConfig:
    """Credentials and limits for the live search platform."""

    api_key: Optional[str] = None
    engine_id: Optional[str] = None
    endpoint: str = GOOGLE_CUSTOM_SEARCH_URL
    num_results: int = MAX_RESULTS

    @classmethod
    def from_env(cls, **overrides: Any) -> "SearchConfig":
        """Build a config from ``GOOGLE_SEARCH_API_KEY`` / ``GOOGLE_SEARCH_ENGINE_ID``."""
        values: dict[str, Any] = {
            "api_key": os.getenv(API_KEY_ENV, ""),
            "engine_id": os.getenv(ENGINE_ID_ENV, ""),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def is_configured(self) -> bool:
        return not (is_placeholder(self.api_key) or is_placeholder(self.engine_id))

    def missing_settings(self) -> list[str]:
        """Names of the environment variables that still need a real value."""
        missing = []
        if is_placeholder(self.api_key):
            missing.append(API_KEY_ENV)
        if is_placeholder(self.engine_id):
            missing.append(ENGINE_ID_ENV)
        return missing


def placeholder_results(
    query: str,
    platform: str,
    count: int = PLACEHOLDER_RESULT_COUNT,
) -> SearchResults:
    """Deterministic stand-in results for platforms without a live backend."""
    encoded = quote_plus(query)
    items = [
        SearchResultItem(
            rank=idx,
            title=f"Placeholder result {idx} for {query} on {platform}",
            link=f"https://www.example.com/search?q={encoded}&platform={quote_plus(platform)}&result={idx}",
            snippet=f"Live search is not available for {platform}; this is a simulated result.",
        )
        for idx in range(1, count + 1)
    ]
    return SearchResults(items=tuple(items), result_count=len(items))


class GoogleSearchClient:
    """Single-attempt client for the Google Custom Search JSON API.

    Every call returns a :class:`SearchOutcome`; configuration, provider,
    and transport failures are reported as outcome values and never raised.

    Usage::

        client = GoogleSearchClient(SearchConfig.from_env())
        outcome = await client.search("best seo tools", country="GB")
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or SearchConfig()
        self._transport = transport

    @property
    def config(self) -> SearchConfig:
        return self._config

    async def search(
        self,
        query: str,
        platform: str = "google",
        country: str = "US",
    ) -> SearchOutcome:
        """Search *query* on *platform* for *country*."""
        request = SearchRequest(query=query, platform=platform, country=country)

        if request.normalized_platform != LIVE_PLATFORM:
            logger.info(
                "Platform %r has no live search; returning placeholder results for %r",
                request.platform, request.query,
            )
            return placeholder_results(request.query, request.normalized_platform)

        if not self._config.is_configured:
            missing = ", ".join(self._config.missing_settings())
            logger.warning("Google search not configured (missing %s)", missing)
            return ConfigurationError(
                "Google search is not configured. Set "
                + missing
                + " to real values to enable live results."
            )

        return await self._fetch(request)

    async def _fetch(self, request: SearchRequest) -> SearchOutcome:
        params = {
            "key": self._config.api_key,
            "cx": self._config.engine_id,
            "q": request.query,
            "gl": request.normalized_country,
            "num": self._config.num_results,
        }
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(self._config.endpoint, params=params)
                if not response.is_success:
                    logger.error(
                        "Search provider returned %d for %r",
                        response.status_code, request.query,
                    )
                    return ProviderError(
                        status_code=response.status_code, message=response.text
                    )
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Search request failed for %r: %s", request.query, exc)
            return ExecutionError(message=str(exc) or exc.__class__.__name__)

        return self._parse(request.query, data)

    @staticmethod
    def _parse(query: str, data: Any) -> SearchOutcome:
        """Turn a Custom Search JSON body into an outcome."""
        if not isinstance(data, dict):
            return ExecutionError(
                message=f"Unexpected response body type: {type(data).__name__}"
            )

        raw_items = data.get("items") or []
        items = []
        for item in raw_items:
            if not isinstance(item, dict):
                continue
            link = item.get("link")
            # a ranked item must carry a URL
            if not isinstance(link, str) or not link.strip():
                continue
            items.append(
                SearchResultItem(
                    rank=len(items) + 1,
                    title=item.get("title") or "",
                    link=link.strip(),
                    snippet=item.get("snippet") or "",
                )
            )

        if not items:
            logger.info("No results for %r", query)
            return EmptyResult()

        logger.info("Search for %r returned %d results", query, len(items))
        return SearchResults(items=tuple(items), result_count=len(items))
