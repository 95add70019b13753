"""Request-scoped search, ranking, and related-keyword models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class SearchRequest:
    """One keyword lookup on a platform for a country."""

    query: str
    platform: str = "google"
    country: str = "US"

    def __post_init__(self) -> None:
        if not self.query or not self.query.strip():
            raise ValueError("Search query must not be empty.")

    @property
    def normalized_platform(self) -> str:
        return (self.platform or "google").strip().lower()

    @property
    def normalized_country(self) -> str:
        return (self.country or "US").strip().lower()


@dataclass(frozen=True)
class SearchResultItem:
    """A single organic result, in provider order."""

    rank: int  # 1-based position in the provider sequence
    title: str
    link: str
    snippet: str = ""


# ----------------------------------------------------------------------
# Search outcomes: exactly one variant per search invocation
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class SearchOutcome:
    """Base class for the tagged result of one search attempt."""

    kind = "outcome"
    is_error = False


@dataclass(frozen=True)
class SearchResults(SearchOutcome):
    """Successful search with at least one item."""

    items: tuple[SearchResultItem, ...] = ()
    result_count: int = 0

    kind = "results"

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class EmptyResult(SearchOutcome):
    """Successful search that returned nothing."""

    kind = "empty"


@dataclass(frozen=True)
class ConfigurationError(SearchOutcome):
    """Credentials are missing or still set to a placeholder."""

    message: str = ""

    kind = "configuration_error"
    is_error = True


@dataclass(frozen=True)
class ProviderError(SearchOutcome):
    """The search provider answered with a non-success status."""

    status_code: int = 0
    message: str = ""

    kind = "provider_error"
    is_error = True


@dataclass(frozen=True)
class ExecutionError(SearchOutcome):
    """The request could not be sent or its response could not be parsed."""

    message: str = ""

    kind = "execution_error"
    is_error = True


# ----------------------------------------------------------------------
# Ranking and related-keyword results
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class RankingResult:
    """Best-matching rank for a keyword plus the canonical SERP URL.

    ``ranking`` and ``ranked_url`` are either both set or both ``None``.
    """

    keyword: str
    ranking: Optional[int]
    ranked_url: Optional[str]
    search_result_page: str

    def __post_init__(self) -> None:
        if (self.ranking is None) != (self.ranked_url is None):
            raise ValueError(
                "ranking and ranked_url must both be set or both be None "
                f"(keyword={self.keyword!r})"
            )

    @property
    def found(self) -> bool:
        return self.ranking is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "ranking": self.ranking,
            "rankedUrl": self.ranked_url,
            "searchResultPage": self.search_result_page,
        }


class Competition(str, Enum):
    """Estimated competition level for a related keyword."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NOT_AVAILABLE = NOT_AVAILABLE

    @classmethod
    def parse(cls, value: Any) -> "Competition":
        """Map free-form model output onto a competition level."""
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.NOT_AVAILABLE


@dataclass(frozen=True)
class RelatedKeywordMetric:
    """Estimated metrics for a suggested keyword. Unknown values are ``"N/A"``."""

    related_keyword: str
    competition: Competition = Competition.NOT_AVAILABLE
    search_volume: str = NOT_AVAILABLE
    last_30_days_searches: str = NOT_AVAILABLE
    last_24_hours_searches: str = NOT_AVAILABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "relatedKeyword": self.related_keyword,
            "competition": self.competition.value,
            "searchVolume": self.search_volume,
            "last30DaysSearches": self.last_30_days_searches,
            "last24HoursSearches": self.last_24_hours_searches,
        }


@dataclass
class AnalysisResult:
    """Rankings in input order plus up to six related-keyword estimates."""

    original_keyword_rankings: list[RankingResult] = field(default_factory=list)
    related_keyword_suggestions: list[RelatedKeywordMetric] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.original_keyword_rankings and not self.related_keyword_suggestions

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalKeywordRankings": [
                r.to_dict() for r in self.original_keyword_rankings
            ],
            "relatedKeywordSuggestions": [
                m.to_dict() for m in self.related_keyword_suggestions
            ],
        }
