"""Small helpers shared by the tracker, CLI, and settings code."""

from typing import Iterable, Union
from urllib.parse import urlparse, urlunparse


def parse_keywords(keywords: Union[str, Iterable[str]]) -> list[str]:
    """Split a comma-separated string (or clean a list) into keywords.

    Blank entries are dropped; order and duplicates are preserved.

    Examples:
        >>> parse_keywords("seo tools, , keyword research")
        ['seo tools', 'keyword research']
    """
    if isinstance(keywords, str):
        parts: Iterable[str] = keywords.split(",")
    else:
        parts = keywords
    return [p.strip() for p in parts if p and p.strip()]


def normalize_link(url: str) -> str:
    """Canonical form of a result link for equality checks.

    Lower-cases the scheme and host and drops surrounding whitespace and a
    trailing slash; path, query, and fragment are kept as-is.
    """
    url = (url or "").strip()
    if not url:
        return ""
    parsed = urlparse(url)
    normalized = urlunparse((
        parsed.scheme.lower(),
        parsed.netloc.lower(),
        parsed.path,
        parsed.params,
        parsed.query,
        parsed.fragment,
    ))
    return normalized.rstrip("/")


def mask_value(value: str) -> str:
    """Mask a secret for display (first 4 and last 4 chars visible)."""
    if not value:
        return ""
    if len(value) <= 10:
        return "*" * len(value)
    return value[:4] + "*" * (len(value) - 8) + value[-4:]
