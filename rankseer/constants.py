"""Supported platforms, countries, and search-page bases."""

LIVE_PLATFORM = "google"

PLATFORMS = [
    {"value": "google", "label": "Google"},
    {"value": "youtube", "label": "YouTube"},
    {"value": "facebook", "label": "Facebook"},
    {"value": "instagram", "label": "Instagram"},
]

COUNTRIES = [
    {"value": "US", "label": "United States"},
    {"value": "GB", "label": "United Kingdom"},
    {"value": "CA", "label": "Canada"},
    {"value": "AU", "label": "Australia"},
    {"value": "IN", "label": "India"},
    {"value": "DE", "label": "Germany"},
    {"value": "FR", "label": "France"},
    {"value": "BR", "label": "Brazil"},
    {"value": "JP", "label": "Japan"},
    {"value": "KR", "label": "South Korea"},
]

# platform -> (search page base, query parameter name)
SEARCH_PAGE_BASES = {
    "google": ("https://www.google.com/search", "q"),
    "youtube": ("https://www.youtube.com/results", "search_query"),
    "facebook": ("https://www.facebook.com/search/top", "q"),
    "instagram": ("https://www.instagram.com/explore/search/keyword/", "q"),
}

REGION_PARAM = "gl"

GOOGLE_CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
MAX_RESULTS = 20
PLACEHOLDER_RESULT_COUNT = 3
MAX_RELATED_KEYWORDS = 6
