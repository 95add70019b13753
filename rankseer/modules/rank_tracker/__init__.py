"""Rank Tracker module: search outcome mapping and keyword ranking."""

from rankseer.modules.rank_tracker.extraction import build_search_result_page, extract_ranking
from rankseer.modules.rank_tracker.tracker import RankTracker

__all__ = ["RankTracker", "build_search_result_page", "extract_ranking"]
