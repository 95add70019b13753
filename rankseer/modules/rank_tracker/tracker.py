"""Rank Tracker: concurrent per-keyword lookups mapped onto ranking results."""

import asyncio
import logging
from typing import Iterable, Optional, Union

from rankseer.integrations.google_search import GoogleSearchClient
from rankseer.models.ranking import (
    AnalysisResult,
    ExecutionError,
    RankingResult,
    SearchOutcome,
)
from rankseer.modules.keyword_research.related import (
    NullRelatedKeywordEstimator,
    RelatedKeywordEstimator,
    suggest_related,
)
from rankseer.modules.rank_tracker.extraction import extract_ranking
from rankseer.utils.helpers import parse_keywords
from rankseer.utils.validators import validate_url

logger = logging.getLogger(__name__)

Keywords = Union[str, Iterable[str]]


class RankTracker:
    """Check keyword rankings and estimate related keywords.

    Usage::

        tracker = RankTracker(GoogleSearchClient(SearchConfig.from_env()))
        analysis = await tracker.check_keyword_ranking("seo tools, link building")
        rows = await tracker.check_rankings("seo tools", url="https://example.com/")
    """

    def __init__(
        self,
        search_client: Optional[GoogleSearchClient] = None,
        estimator: Optional[RelatedKeywordEstimator] = None,
        max_concurrency: int = 5,
    ):
        self._search = search_client or GoogleSearchClient()
        self._estimator = estimator or NullRelatedKeywordEstimator()
        self._max_concurrency = max(1, max_concurrency)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def check_keyword_ranking(
        self,
        keywords: Keywords,
        platform: str = "google",
        country: str = "US",
        url: Optional[str] = None,
        include_related: bool = True,
    ) -> AnalysisResult:
        """Rank every keyword and, optionally, suggest related keywords.

        Raises:
            ValueError: no keywords were given or *url* is not a valid URL.
        """
        kw_list = self._prepare(keywords, url)
        logger.info(
            "Checking %d keywords on %s/%s (target=%s)",
            len(kw_list), platform, country, url or "-",
        )

        try:
            outcomes = await self.search_all(kw_list, platform, country)
            rankings = [
                extract_ranking(kw, outcome, platform=platform, country=country,
                                target_url=url)
                for kw, outcome in zip(kw_list, outcomes)
            ]
            related = []
            if include_related:
                related = await suggest_related(
                    kw_list, outcomes, self._estimator, country=country
                )
        except Exception:
            logger.exception("Ranking analysis failed; returning an empty result")
            return AnalysisResult()

        found = sum(1 for r in rankings if r.found)
        logger.info("Ranking complete: %d/%d keywords ranked, %d related",
                    found, len(rankings), len(related))
        return AnalysisResult(
            original_keyword_rankings=rankings,
            related_keyword_suggestions=related,
        )

    async def check_rankings(
        self,
        keywords: Keywords,
        platform: str = "google",
        country: str = "US",
        url: Optional[str] = None,
    ) -> list[RankingResult]:
        """Rankings only, without related-keyword estimation."""
        analysis = await self.check_keyword_ranking(
            keywords, platform=platform, country=country, url=url,
            include_related=False,
        )
        return analysis.original_keyword_rankings

    async def search_all(
        self,
        keywords: list[str],
        platform: str = "google",
        country: str = "US",
    ) -> list[SearchOutcome]:
        """Search every keyword concurrently; results follow input order."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _one(kw: str) -> SearchOutcome:
            async with semaphore:
                return await self._search_one(kw, platform, country)

        return list(await asyncio.gather(*(_one(kw) for kw in keywords)))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _search_one(self, keyword: str, platform: str, country: str) -> SearchOutcome:
        try:
            return await self._search.search(keyword, platform=platform, country=country)
        except Exception as exc:
            logger.error("Search for %r raised: %s", keyword, exc)
            return ExecutionError(message=str(exc) or exc.__class__.__name__)

    @staticmethod
    def _prepare(keywords: Keywords, url: Optional[str]) -> list[str]:
        kw_list = parse_keywords(keywords)
        if not kw_list:
            raise ValueError("Please enter at least one keyword.")
        if url is not None:
            ok, err = validate_url(url)
            if not ok:
                raise ValueError(f"Invalid target URL: {err}")
        return kw_list
