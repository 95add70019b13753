"""LLM access for related-keyword estimates.

OpenAI is tried first; Google Gemini is used when OpenAI is unavailable or
fails. Responses are cached in memory and every provider call is rate
limited and counted against a spend budget.
"""

import asyncio
import json
import logging
import os
import time
from collections import OrderedDict
from typing import Any, Callable, Optional

import google.generativeai as genai
import openai

from rankseer.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# USD per 1K tokens (input, output) for the default OpenAI model.
OPENAI_PRICE_PER_1K = (0.00015, 0.0006)


class ResponseCache:
    """Bounded LRU of prompt responses with a time-to-live."""

    def __init__(
        self,
        max_size: int = 1000,
        ttl_hours: float = 24,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._entries: "OrderedDict[tuple, tuple[float, str]]" = OrderedDict()
        self._max_size = max(1, max_size)
        self._ttl = ttl_hours * 3600
        self._clock = clock or time.monotonic

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: tuple) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self._ttl:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def put(self, key: tuple, value: str) -> None:
        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```) if present."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned.strip()


class LLMClient:
    """Async client with OpenAI primary and Gemini fallback.

    Usage::

        client = LLMClient()
        rows = await client.generate_json("Return 5 related keywords as a JSON list")
    """

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        gemini_api_key: Optional[str] = None,
        openai_model: str = "gpt-4o-mini",
        gemini_model: str = "gemini-2.0-flash",
        max_tokens: int = 2048,
        temperature: float = 0.3,
        timeout: int = 60,
        openai_rpm: int = 60,
        gemini_rpm: int = 15,
        cache_enabled: bool = True,
        cache_ttl_hours: float = 24,
        cache_max_size: int = 1000,
        max_monthly_budget: float = 20.0,
        budget_warning_pct: float = 80.0,
    ):
        self._openai_key = openai_api_key or os.getenv("OPENAI_API_KEY", "")
        self._gemini_key = gemini_api_key or os.getenv("GEMINI_API_KEY", "")
        self._openai_model = openai_model
        self._gemini_model = gemini_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout

        if self._gemini_key:
            genai.configure(api_key=self._gemini_key)

        self._limiters = {
            "openai": RateLimiter(openai_rpm, name="openai"),
            "gemini": RateLimiter(gemini_rpm, name="gemini"),
        }
        self._cache = ResponseCache(cache_max_size, cache_ttl_hours) if cache_enabled else None

        self.spent_usd = 0.0
        self._budget = max_monthly_budget
        self._warn_at = max_monthly_budget * budget_warning_pct / 100

    @property
    def providers(self) -> list[str]:
        names = []
        if self._openai_key:
            names.append("OpenAI")
        if self._gemini_key:
            names.append("Gemini")
        return names

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str = "You are an expert SEO analyst.",
    ) -> str:
        """Generate text, falling back to Gemini when OpenAI fails.

        Raises:
            RuntimeError: no provider is configured or the budget is spent.
        """
        key = (system_prompt, prompt, self._temperature)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for prompt (len=%d)", len(prompt))
                return cached

        if not self.providers:
            raise RuntimeError("No LLM provider configured. Set OPENAI_API_KEY or GEMINI_API_KEY.")

        result = None
        if self._openai_key:
            try:
                result = await self._call_openai(prompt, system_prompt)
            except Exception as exc:
                if not self._gemini_key:
                    logger.error("OpenAI call failed: %s", exc)
                    raise
                logger.warning("OpenAI call failed: %s; falling back to Gemini", exc)
        if result is None:
            result = await self._call_gemini(prompt, system_prompt)

        if self._cache is not None:
            self._cache.put(key, result)
        return result

    async def generate_json(
        self,
        prompt: str,
        system_prompt: str = "You are an expert SEO analyst. Respond ONLY with valid JSON.",
    ) -> Any:
        """Generate a response and parse it as JSON.

        Raises:
            ValueError: the response is not valid JSON.
        """
        raw = await self.generate_text(prompt, system_prompt)
        try:
            return json.loads(strip_code_fences(raw))
        except json.JSONDecodeError as exc:
            logger.debug("Unparseable LLM response: %s", raw[:500])
            raise ValueError(f"LLM returned invalid JSON: {exc}") from exc

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    async def _call_openai(self, prompt: str, system_prompt: str) -> str:
        self._check_budget()
        await self._limiters["openai"].acquire()

        # The client is bound to the running loop's connection pool.
        async with openai.AsyncOpenAI(api_key=self._openai_key, timeout=self._timeout) as client:
            response = await client.chat.completions.create(
                model=self._openai_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        if response.usage:
            self._record_spend(response.usage.prompt_tokens, response.usage.completion_tokens)
        return (response.choices[0].message.content or "").strip()

    async def _call_gemini(self, prompt: str, system_prompt: str) -> str:
        await self._limiters["gemini"].acquire()

        model = genai.GenerativeModel(
            model_name=self._gemini_model,
            system_instruction=system_prompt,
            generation_config=genai.types.GenerationConfig(
                max_output_tokens=self._max_tokens,
                temperature=self._temperature,
            ),
        )
        # generate_content is blocking
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, model.generate_content, prompt)
        text = (response.text or "").strip()
        logger.info("Gemini call completed (len=%d)", len(text))
        return text

    # ------------------------------------------------------------------
    # Budget
    # ------------------------------------------------------------------

    def _record_spend(self, input_tokens: int, output_tokens: int) -> float:
        in_price, out_price = OPENAI_PRICE_PER_1K
        cost = input_tokens / 1000 * in_price + output_tokens / 1000 * out_price
        self.spent_usd += cost
        logger.info("OpenAI call: %d in / %d out tokens, $%.6f",
                    input_tokens, output_tokens, cost)
        return cost

    def _check_budget(self) -> None:
        if self.spent_usd >= self._budget:
            raise RuntimeError(
                f"LLM budget exceeded: ${self.spent_usd:.2f} >= ${self._budget:.2f}"
            )
        if self.spent_usd >= self._warn_at:
            logger.warning("LLM budget warning: $%.2f / $%.2f", self.spent_usd, self._budget)
