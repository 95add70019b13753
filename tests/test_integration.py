"""Integration tests for Rankseer.

Covers package imports, configuration loading, syntax validation of
every Python file in the project, and availability of key packages.
"""

import ast
import importlib
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Project root (conftest.py already puts it on sys.path)
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ===========================================================================
# 1. Model imports
# ===========================================================================
class TestModelImports:
    """All data models should be importable from rankseer.models."""

    @pytest.mark.parametrize("model_name", [
        "SearchRequest",
        "SearchResultItem",
        "SearchOutcome",
        "SearchResults",
        "EmptyResult",
        "ConfigurationError",
        "ProviderError",
        "ExecutionError",
        "RankingResult",
        "Competition",
        "RelatedKeywordMetric",
        "AnalysisResult",
    ])
    def test_model_importable(self, model_name):
        import rankseer.models as models_pkg
        assert hasattr(models_pkg, model_name), (
            "Model not found in rankseer.models: " + model_name
        )


# ===========================================================================
# 2. Module imports
# ===========================================================================
class TestModuleImports:
    """All module packages should be importable."""

    @pytest.mark.parametrize("module_path,names", [
        ("rankseer.modules.rank_tracker", ["RankTracker", "extract_ranking", "build_search_result_page"]),
        ("rankseer.modules.keyword_research", ["LLMRelatedKeywordEstimator", "suggest_related"]),
        ("rankseer.integrations.google_search", ["GoogleSearchClient", "SearchConfig"]),
        ("rankseer.integrations.llm_client", ["LLMClient"]),
        ("rankseer.utils.rate_limiter", ["RateLimiter"]),
        ("rankseer.utils.env_manager", ["EnvManager"]),
        ("rankseer.app", ["RankseerApp"]),
        ("rankseer.cli", ["app", "main"]),
    ])
    def test_module_importable(self, module_path, names):
        mod = importlib.import_module(module_path)
        for name in names:
            assert hasattr(mod, name), (
                "Name " + name + " not found in " + module_path
            )

    def test_every_platform_has_search_page(self):
        from rankseer.constants import PLATFORMS, SEARCH_PAGE_BASES
        for platform in PLATFORMS:
            assert platform["value"] in SEARCH_PAGE_BASES


# ===========================================================================
# 3. Settings YAML
# ===========================================================================
class TestSettingsYaml:
    """Configuration file should be loadable."""

    def _load(self):
        import yaml
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        with open(settings_path) as fh:
            return yaml.safe_load(fh)

    def test_settings_file_exists(self):
        settings_path = PROJECT_ROOT / "config" / "settings.yaml"
        assert settings_path.exists(), "config/settings.yaml not found"

    def test_settings_parseable(self):
        assert isinstance(self._load(), dict)

    def test_settings_has_required_sections(self):
        config = self._load()
        for section in ("app", "search", "related_keywords", "llm"):
            assert section in config, (
                "Missing config section: " + section
            )

    def test_settings_app_name(self):
        assert self._load()["app"]["name"] == "Rankseer"

    def test_app_loads_shipped_settings(self, tmp_path):
        from rankseer.app import RankseerApp
        app = RankseerApp(
            config_path=str(PROJECT_ROOT / "config" / "settings.yaml"),
            env_path=str(tmp_path / ".env"),
        )
        app.initialize()
        assert app.search_config.num_results == 20
        assert app.get_tracker()._max_concurrency == 5


# ===========================================================================
# 4. All Python files syntax validation
# ===========================================================================
class TestAllPythonFilesSyntax:
    """Every .py file in rankseer/ and tests/ should pass ast.parse."""

    def _collect_python_files(self):
        files = []
        for directory in ("rankseer", "tests"):
            base = PROJECT_ROOT / directory
            if base.exists():
                for py_file in base.rglob("*.py"):
                    parts = py_file.parts
                    if "venv" in parts or "__pycache__" in parts:
                        continue
                    files.append(py_file)
        return sorted(files)

    def test_all_python_files_parse(self):
        py_files = self._collect_python_files()
        assert len(py_files) > 0, "No Python files found"
        errors = []
        for py_file in py_files:
            try:
                ast.parse(py_file.read_text(encoding="utf-8"))
            except SyntaxError as exc:
                rel = py_file.relative_to(PROJECT_ROOT)
                errors.append(str(rel) + ": " + str(exc))
        if errors:
            msg = "Python syntax errors found in " + str(len(errors)) + " files:\n"
            msg += "\n".join(errors[:20])
            pytest.fail(msg)


# ===========================================================================
# 5. Requirements / key packages importable
# ===========================================================================
class TestRequirementsInstallable:
    """Key packages from requirements.txt should be importable."""

    @pytest.mark.parametrize("package", [
        "typer",
        "rich",
        "yaml",    # PyYAML
        "httpx",
        "openai",
        "dotenv",  # python-dotenv
    ])
    def test_package_importable(self, package):
        try:
            importlib.import_module(package)
        except ImportError:
            pytest.skip("Package not installed: " + package)

    def test_gemini_importable(self):
        try:
            import google.generativeai  # noqa: F401
        except ImportError:
            pytest.skip("google-generativeai not installed")
