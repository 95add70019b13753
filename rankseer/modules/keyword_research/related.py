"""Related-keyword suggestions with estimated competition and search volume."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from rankseer.constants import MAX_RELATED_KEYWORDS
from rankseer.models.ranking import (
    NOT_AVAILABLE,
    Competition,
    RelatedKeywordMetric,
    SearchOutcome,
    SearchResults,
)

logger = logging.getLogger(__name__)

RELATED_KEYWORDS_PROMPT = """You are an expert SEO analyst. Suggest {count} keywords closely related to the
keywords below and estimate their metrics from your general knowledge of search demand.

Keywords: {keywords}
Country: {country}
{context}
Return ONLY a JSON array. Each element must be an object with exactly these keys:
- "relatedKeyword": the suggested keyword
- "competition": one of "High", "Medium", "Low", "N/A"
- "searchVolume": estimated monthly search volume as a short string (e.g. "10K-100K")
- "last30DaysSearches": estimated searches over the last 30 days as a string
- "last24HoursSearches": estimated searches over the last 24 hours as a string
Use the string "N/A" for any value you cannot estimate."""


def _metric_text(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    text = str(value).strip()
    return text or NOT_AVAILABLE


def coerce_metric(raw: Any) -> Optional[RelatedKeywordMetric]:
    """Build a fully populated metric from one model row, or None if unusable.

    Accepts camelCase or snake_case keys.
    """
    if not isinstance(raw, dict):
        return None
    keyword = raw.get("relatedKeyword") or raw.get("related_keyword") or raw.get("keyword")
    keyword = str(keyword or "").strip()
    if not keyword:
        return None
    return RelatedKeywordMetric(
        related_keyword=keyword,
        competition=Competition.parse(raw.get("competition")),
        search_volume=_metric_text(raw.get("searchVolume", raw.get("search_volume"))),
        last_30_days_searches=_metric_text(
            raw.get("last30DaysSearches", raw.get("last_30_days_searches"))
        ),
        last_24_hours_searches=_metric_text(
            raw.get("last24HoursSearches", raw.get("last_24_hours_searches"))
        ),
    )


def fallback_metrics(keywords: Sequence[str], limit: int) -> list[RelatedKeywordMetric]:
    """``N/A``-filled rows, one per input keyword, capped at *limit*."""
    return [RelatedKeywordMetric(related_keyword=kw) for kw in list(keywords)[:limit]]


class RelatedKeywordEstimator(ABC):
    """Produces related-keyword estimates for a batch of searched keywords."""

    @abstractmethod
    async def estimate(
        self,
        keywords: Sequence[str],
        outcomes: Sequence[SearchOutcome],
        country: str = "US",
    ) -> list[RelatedKeywordMetric]:
        """Return between 0 and 6 fully populated metrics."""


class NullRelatedKeywordEstimator(RelatedKeywordEstimator):
    """Estimator used when related suggestions are turned off."""

    async def estimate(self, keywords, outcomes, country="US"):
        return []


class LLMRelatedKeywordEstimator(RelatedKeywordEstimator):
    """Ask an LLM for related keywords, grounded on the top result titles.

    Any LLM failure (no provider, invalid JSON, API error) yields
    ``N/A``-filled rows instead of an exception.
    """

    def __init__(self, llm_client, batch_size: int = 5, context_titles: int = 3):
        self._llm = llm_client
        self._batch_size = max(0, min(batch_size, MAX_RELATED_KEYWORDS))
        self._context_titles = context_titles

    def build_prompt(
        self,
        keywords: Sequence[str],
        outcomes: Sequence[SearchOutcome],
        country: str = "US",
    ) -> str:
        context_lines = []
        for keyword, outcome in zip(keywords, outcomes):
            if isinstance(outcome, SearchResults):
                titles = [i.title for i in outcome.items[: self._context_titles] if i.title]
                if titles:
                    context_lines.append(f"Top results for '{keyword}': " + "; ".join(titles))
        context = ""
        if context_lines:
            context = "\nSearch context:\n" + "\n".join(context_lines) + "\n"
        return RELATED_KEYWORDS_PROMPT.format(
            count=self._batch_size,
            keywords=", ".join(keywords),
            country=country,
            context=context,
        )

    async def estimate(self, keywords, outcomes, country="US"):
        if not keywords or self._batch_size == 0:
            return []

        prompt = self.build_prompt(keywords, outcomes, country)
        try:
            data = await self._llm.generate_json(prompt)
        except Exception as exc:
            logger.warning("Related keyword estimation failed: %s", exc)
            return fallback_metrics(keywords, self._batch_size)

        rows = data if isinstance(data, list) else []
        if isinstance(data, dict):
            rows = data.get("relatedKeywordSuggestions") or data.get("keywords") or []

        metrics = []
        for row in rows:
            metric = coerce_metric(row)
            if metric is not None:
                metrics.append(metric)
            if len(metrics) >= MAX_RELATED_KEYWORDS:
                break

        logger.info("Estimated %d related keywords for %d inputs",
                    len(metrics), len(keywords))
        return metrics


async def suggest_related(
    keywords: Sequence[str],
    outcomes: Sequence[SearchOutcome],
    estimator: RelatedKeywordEstimator,
    country: str = "US",
) -> list[RelatedKeywordMetric]:
    """Run *estimator* once and enforce the 0..6 fully-populated contract."""
    try:
        metrics = await estimator.estimate(keywords, outcomes, country=country)
    except Exception as exc:
        logger.error("Related keyword estimator raised: %s", exc)
        metrics = fallback_metrics(keywords, MAX_RELATED_KEYWORDS)
    return [m for m in metrics or [] if isinstance(m, RelatedKeywordMetric)][:MAX_RELATED_KEYWORDS]
