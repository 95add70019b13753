"""Map search outcomes onto per-keyword ranking results.

Everything here is a pure function of its arguments: the same outcome
always yields the same :class:`RankingResult`.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from rankseer.constants import LIVE_PLATFORM, REGION_PARAM, SEARCH_PAGE_BASES
from rankseer.models.ranking import RankingResult, SearchOutcome, SearchResults
from rankseer.utils.helpers import normalize_link

logger = logging.getLogger(__name__)


def build_search_result_page(
    keyword: str,
    platform: str = "google",
    country: str = "US",
) -> str:
    """Canonical, URL-encoded search results page for *keyword*.

    Unknown platforms use the Google search page.

    Examples:
        >>> build_search_result_page("best seo tools", country="GB")
        'https://www.google.com/search?q=best+seo+tools&gl=gb'
    """
    key = (platform or LIVE_PLATFORM).strip().lower()
    base, query_param = SEARCH_PAGE_BASES.get(key, SEARCH_PAGE_BASES[LIVE_PLATFORM])
    query = urlencode({
        query_param: keyword or "",
        REGION_PARAM: (country or "US").strip().lower(),
    })
    return f"{base}?{query}"


def extract_ranking(
    keyword: str,
    outcome: SearchOutcome,
    platform: str = "google",
    country: str = "US",
    target_url: Optional[str] = None,
) -> RankingResult:
    """Derive the ranking for *keyword* from a search outcome.

    Without *target_url* the top result is the best match (ranking 1).
    With *target_url* the first result whose link matches it supplies the
    ranking and link; no match means no ranking. Non-result outcomes
    always produce ``ranking=None`` and ``ranked_url=None``.
    """
    page = build_search_result_page(keyword, platform, country)

    if not isinstance(outcome, SearchResults) or not outcome.items:
        return RankingResult(keyword=keyword, ranking=None, ranked_url=None,
                             search_result_page=page)

    if target_url is None:
        top = outcome.items[0]
        return RankingResult(keyword=keyword, ranking=1, ranked_url=top.link,
                             search_result_page=page)

    wanted = normalize_link(target_url)
    for item in outcome.items:
        if wanted and normalize_link(item.link) == wanted:
            return RankingResult(keyword=keyword, ranking=item.rank,
                                 ranked_url=item.link, search_result_page=page)

    logger.debug("Target %r not found in %d results for %r",
                 target_url, len(outcome.items), keyword)
    return RankingResult(keyword=keyword, ranking=None, ranked_url=None,
                         search_result_page=page)
