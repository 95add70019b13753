"""Rankseer: keyword rank checking with related-keyword estimates."""

__version__ = "1.0.0"
