"""Shared pytest fixtures for Rankseer tests."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Ensure project root is on sys.path so 'rankseer' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep real credentials from the developer's shell out of every test."""
    for key in (
        "GOOGLE_SEARCH_API_KEY",
        "GOOGLE_SEARCH_ENGINE_ID",
        "OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "LOG_LEVEL",
    ):
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture()
def search_config():
    """A SearchConfig with real-looking credentials."""
    from rankseer.integrations.google_search import SearchConfig
    return SearchConfig(api_key="AIzaTestKey123456", engine_id="0123456789abcdef")


@pytest.fixture()
def google_items():
    """Custom Search ``items`` payload with two results."""
    return [
        {
            "title": "Result A",
            "link": "https://a.example/x",
            "snippet": "First snippet.",
        },
        {
            "title": "Result B",
            "link": "https://b.example/y",
            "snippet": "Second snippet.",
        },
    ]


class RecordingTransport:
    """Builds an httpx.MockTransport and remembers every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture()
def make_transport():
    """Factory: ``make_transport(handler)`` -> RecordingTransport."""
    return RecordingTransport


@pytest.fixture()
def mock_llm_client():
    """Return a mock LLMClient that returns canned related-keyword rows."""
    client = MagicMock()
    client.generate_json = AsyncMock(return_value=[
        {
            "relatedKeyword": "cheap travel destinations",
            "competition": "High",
            "searchVolume": "10K-100K",
            "last30DaysSearches": "45,000",
            "last24HoursSearches": "1,500",
        },
        {
            "relatedKeyword": "budget travel europe",
            "competition": "medium",
            "searchVolume": "1K-10K",
            "last30DaysSearches": "8,000",
            "last24HoursSearches": "N/A",
        },
    ])
    client.generate_text = AsyncMock(return_value="Mock LLM response text.")
    client.providers = ["OpenAI"]
    return client


@pytest.fixture()
def mock_search_client():
    """Return a mock GoogleSearchClient whose search() returns canned outcomes."""
    from rankseer.models.ranking import SearchResultItem, SearchResults

    client = MagicMock()
    client.search = AsyncMock(return_value=SearchResults(
        items=(
            SearchResultItem(rank=1, title="Mock 1", link="https://example.com/page1"),
            SearchResultItem(rank=2, title="Mock 2", link="https://example.com/page2"),
        ),
        result_count=2,
    ))
    return client
