"""Application wiring: configuration, credentials, and the rank tracker."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml
from dotenv import load_dotenv

from rankseer.integrations.google_search import GoogleSearchClient, SearchConfig
from rankseer.models.ranking import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/settings.yaml"


class RankseerApp:
    """Central application object that loads settings and builds clients.

    Usage::

        app = RankseerApp()
        app.initialize()
        result = app.check_keyword_ranking("seo tools, keyword research", country="GB")
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        env_path: str = ".env",
    ):
        self._config_path = config_path
        self._env_path = env_path
        self.config: dict[str, Any] = {}
        self.search_config: Optional[SearchConfig] = None
        self._initialized = False
        self._llm_client = None
        self._tracker = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load .env and YAML settings, then build the search configuration."""
        if self._initialized:
            return

        env_file = Path(self._env_path)
        if env_file.exists():
            load_dotenv(env_file)
            logger.info("Loaded environment from %s", self._env_path)

        self.config = self._load_config()

        search_cfg = self.config.get("search", {})
        self.search_config = SearchConfig.from_env(
            endpoint=search_cfg.get("endpoint"),
            num_results=search_cfg.get("num_results"),
        )
        if not self.search_config.is_configured:
            logger.warning(
                "Live Google search disabled: %s not set",
                ", ".join(self.search_config.missing_settings()),
            )

        self._initialized = True
        logger.info("Rankseer initialised.")

    def _load_config(self) -> dict[str, Any]:
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s; using defaults.", self._config_path)
            return {}
        with open(config_file, "r", encoding="utf-8") as fh:
            config = yaml.safe_load(fh) or {}
        logger.info("Configuration loaded from %s", self._config_path)
        return config

    @property
    def log_level(self) -> str:
        level = os.getenv("LOG_LEVEL") or self.config.get("app", {}).get("log_level", "INFO")
        return str(level).upper()

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def get_llm_client(self):
        """Lazily build the LLM client from the ``llm`` settings section."""
        if self._llm_client is None:
            from rankseer.integrations.llm_client import LLMClient

            llm_cfg = self.config.get("llm", {})
            primary = llm_cfg.get("primary", {})
            fallback = llm_cfg.get("fallback", {})
            cache_cfg = llm_cfg.get("cache", {})
            budget_cfg = llm_cfg.get("budget", {})
            rl_cfg = self.config.get("rate_limits", {})

            self._llm_client = LLMClient(
                openai_model=primary.get("model", "gpt-4o-mini"),
                gemini_model=fallback.get("model", "gemini-2.0-flash"),
                max_tokens=primary.get("max_tokens", 2048),
                temperature=primary.get("temperature", 0.3),
                timeout=primary.get("timeout", 60),
                openai_rpm=rl_cfg.get("openai", {}).get("requests_per_minute", 60),
                gemini_rpm=rl_cfg.get("gemini", {}).get("requests_per_minute", 15),
                cache_enabled=cache_cfg.get("enabled", True),
                cache_ttl_hours=cache_cfg.get("ttl_hours", 24),
                cache_max_size=cache_cfg.get("max_size", 1000),
                max_monthly_budget=budget_cfg.get("max_monthly_usd", 20.0),
                budget_warning_pct=budget_cfg.get("warning_threshold_pct", 80.0),
            )
        return self._llm_client

    def get_tracker(self):
        """Build the rank tracker with the configured estimator."""
        self._ensure_initialized()
        if self._tracker is None:
            from rankseer.modules.keyword_research.related import (
                LLMRelatedKeywordEstimator,
                NullRelatedKeywordEstimator,
            )
            from rankseer.modules.rank_tracker.tracker import RankTracker

            related_cfg = self.config.get("related_keywords", {})
            if related_cfg.get("enabled", True):
                estimator = LLMRelatedKeywordEstimator(
                    self.get_llm_client(),
                    batch_size=related_cfg.get("batch_size", 5),
                )
            else:
                estimator = NullRelatedKeywordEstimator()

            self._tracker = RankTracker(
                search_client=GoogleSearchClient(self.search_config),
                estimator=estimator,
                max_concurrency=self.config.get("search", {}).get("max_concurrency", 5),
            )
        return self._tracker

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def check_keyword_ranking(
        self,
        keywords: Union[str, Iterable[str]],
        platform: str = "google",
        country: str = "US",
        url: Optional[str] = None,
        include_related: bool = True,
    ) -> AnalysisResult:
        """Synchronous wrapper around :meth:`RankTracker.check_keyword_ranking`.

        Every call runs on the same event loop, so clients and locks created
        by an earlier call stay usable. Call :meth:`close` when finished.
        """
        tracker = self.get_tracker()
        return self._run(
            tracker.check_keyword_ranking(
                keywords,
                platform=platform,
                country=country,
                url=url,
                include_related=include_related,
            )
        )

    def _run(self, coro):
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    def close(self) -> None:
        """Shut down the event loop used by the synchronous wrappers."""
        if self._loop is not None and not self._loop.is_closed():
            self._loop.run_until_complete(self._loop.shutdown_asyncgens())
            self._loop.close()
        self._loop = None

    def get_status(self) -> dict[str, dict[str, Any]]:
        """Health of configuration, search credentials, and LLM providers."""
        self._ensure_initialized()
        status: dict[str, dict[str, Any]] = {}

        status["config"] = {
            "status": "ok" if self.config else "warning",
            "details": f"{len(self.config)} sections loaded" if self.config else "no config",
        }

        if self.search_config.is_configured:
            status["search"] = {"status": "ok", "details": "Google Custom Search configured"}
        else:
            status["search"] = {
                "status": "warning",
                "details": "missing " + ", ".join(self.search_config.missing_settings()),
            }

        providers = self.get_llm_client().providers
        status["llm"] = {
            "status": "ok" if providers else "warning",
            "details": f"providers: {', '.join(providers) or 'none configured'}",
        }
        return status

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Call initialize() before using the application.")
