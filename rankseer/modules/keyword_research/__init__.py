"""Keyword Research module: related-keyword estimation."""

from rankseer.modules.keyword_research.related import (
    LLMRelatedKeywordEstimator,
    NullRelatedKeywordEstimator,
    RelatedKeywordEstimator,
    suggest_related,
)

__all__ = [
    "LLMRelatedKeywordEstimator",
    "NullRelatedKeywordEstimator",
    "RelatedKeywordEstimator",
    "suggest_related",
]
