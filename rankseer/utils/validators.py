"""Input validation for target URLs and country codes."""

import re
from urllib.parse import urlparse

from rankseer.constants import COUNTRIES

_COUNTRY_CODE_RE = re.compile(r"^[A-Za-z]{2}$")


def validate_url(url: str) -> tuple[bool, str]:
    """Validate a URL string.

    Args:
        url: The URL to validate.

    Returns:
        Tuple of (is_valid, error_message).  error_message is empty on success.
    """
    if not url or not isinstance(url, str):
        return False, "URL is empty or not a string."
    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        return False, f"URL parse error: {exc}"
    if parsed.scheme not in ("http", "https"):
        return False, f"Invalid scheme: {parsed.scheme!r}. Must be http or https."
    if not parsed.netloc:
        return False, "URL has no network location (domain)."
    hostname = parsed.hostname or ""
    if not hostname or len(hostname) > 253:
        return False, "Invalid hostname length."
    return True, ""


def validate_country(country: str) -> tuple[bool, str]:
    """Check that *country* looks like an ISO 3166-1 alpha-2 code."""
    if not country or not isinstance(country, str):
        return False, "Country is empty or not a string."
    if not _COUNTRY_CODE_RE.match(country.strip()):
        return False, f"Country {country!r} is not a two-letter ISO code."
    return True, ""


def is_known_country(country: str) -> bool:
    """True if *country* is one of the countries offered to users."""
    code = (country or "").strip().upper()
    return any(c["value"] == code for c in COUNTRIES)
