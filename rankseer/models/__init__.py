"""Data models for search outcomes, rankings, and related-keyword estimates."""

from rankseer.models.ranking import (
    NOT_AVAILABLE,
    AnalysisResult,
    Competition,
    ConfigurationError,
    EmptyResult,
    ExecutionError,
    ProviderError,
    RankingResult,
    RelatedKeywordMetric,
    SearchOutcome,
    SearchRequest,
    SearchResultItem,
    SearchResults,
)

__all__ = [
    "NOT_AVAILABLE",
    "AnalysisResult",
    "Competition",
    "ConfigurationError",
    "EmptyResult",
    "ExecutionError",
    "ProviderError",
    "RankingResult",
    "RelatedKeywordMetric",
    "SearchOutcome",
    "SearchRequest",
    "SearchResultItem",
    "SearchResults",
]
