"""Tests for the LLM client: provider fallback, JSON parsing, cache, budget."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from rankseer.integrations.llm_client import LLMClient, ResponseCache, strip_code_fences
from rankseer.utils.rate_limiter import RateLimiter


class TestStripCodeFences:

    def test_json_fence(self):
        assert strip_code_fences('```json\n[{"a": 1}]\n```') == '[{"a": 1}]'

    def test_plain_text_untouched(self):
        assert strip_code_fences('  [1, 2]  ') == "[1, 2]"


class TestResponseCache:

    def test_least_recently_used_is_evicted(self):
        cache = ResponseCache(max_size=2)
        cache.put(("p1",), "one")
        cache.put(("p2",), "two")
        assert cache.get(("p1",)) == "one"
        cache.put(("p3",), "three")
        assert len(cache) == 2
        assert cache.get(("p2",)) is None
        assert cache.get(("p1",)) == "one"

    def test_expired_entry(self):
        now = [0.0]
        cache = ResponseCache(ttl_hours=1, clock=lambda: now[0])
        cache.put(("p",), "v")
        now[0] = 3599.0
        assert cache.get(("p",)) == "v"
        now[0] = 3600.0
        assert cache.get(("p",)) is None
        assert len(cache) == 0


class TestLLMClient:

    @pytest.mark.asyncio
    async def test_no_provider(self):
        client = LLMClient()
        assert client.providers == []
        with pytest.raises(RuntimeError, match="No LLM provider configured"):
            await client.generate_text("hello")

    @pytest.mark.asyncio
    async def test_generate_json_parses_fenced_output(self):
        client = LLMClient(openai_api_key="sk-test")
        client._call_openai = AsyncMock(return_value='```json\n[{"relatedKeyword": "a"}]\n```')

        data = await client.generate_json("prompt")

        assert data == [{"relatedKeyword": "a"}]

    @pytest.mark.asyncio
    async def test_generate_json_invalid(self):
        client = LLMClient(openai_api_key="sk-test")
        client._call_openai = AsyncMock(return_value="not json at all")

        with pytest.raises(ValueError, match="invalid JSON"):
            await client.generate_json("prompt")

    @pytest.mark.asyncio
    async def test_cache_avoids_second_call(self):
        client = LLMClient(openai_api_key="sk-test")
        client._call_openai = AsyncMock(return_value="answer")

        assert await client.generate_text("same prompt") == "answer"
        assert await client.generate_text("same prompt") == "answer"

        assert client._call_openai.await_count == 1

    @pytest.mark.asyncio
    async def test_cache_disabled(self):
        client = LLMClient(openai_api_key="sk-test", cache_enabled=False)
        client._call_openai = AsyncMock(return_value="answer")

        await client.generate_text("same prompt")
        await client.generate_text("same prompt")

        assert client._call_openai.await_count == 2

    @pytest.mark.asyncio
    async def test_falls_back_to_gemini(self):
        client = LLMClient(openai_api_key="sk-test", gemini_api_key="gm-test")
        client._call_openai = AsyncMock(side_effect=RuntimeError("rate limited"))
        client._call_gemini = AsyncMock(return_value="from gemini")

        assert await client.generate_text("prompt") == "from gemini"
        assert client.providers == ["OpenAI", "Gemini"]

    @pytest.mark.asyncio
    async def test_openai_error_without_fallback_propagates(self):
        client = LLMClient(openai_api_key="sk-test")
        client._call_openai = AsyncMock(side_effect=RuntimeError("rate limited"))

        with pytest.raises(RuntimeError, match="rate limited"):
            await client.generate_text("prompt")

    def test_spend_is_recorded(self):
        client = LLMClient()
        cost = client._record_spend(1000, 1000)
        assert cost == pytest.approx(0.00075)
        assert client.spent_usd == pytest.approx(0.00075)

    def test_budget_exceeded(self):
        client = LLMClient(max_monthly_budget=1.0)
        client.spent_usd = 1.5
        with pytest.raises(RuntimeError, match="budget exceeded"):
            client._check_budget()

    def test_budget_below_limit(self):
        client = LLMClient(max_monthly_budget=1.0)
        client.spent_usd = 0.9
        client._check_budget()


class TestRateLimiter:

    def test_rejects_zero_rpm(self):
        with pytest.raises(ValueError):
            RateLimiter(requests_per_minute=0)

    @pytest.mark.asyncio
    async def test_within_limit_does_not_wait(self):
        now = [100.0]
        limiter = RateLimiter(requests_per_minute=3, name="test", clock=lambda: now[0])
        for _ in range(2):
            await limiter.acquire()
        assert limiter.wait_time() == 0.0

    def test_wait_time_when_full(self):
        now = [100.0]
        limiter = RateLimiter(requests_per_minute=1, clock=lambda: now[0])
        asyncio.run(limiter.acquire())
        now[0] = 110.0
        assert limiter.wait_time() == pytest.approx(50.0)
        now[0] = 161.0
        assert limiter.wait_time() == 0.0
