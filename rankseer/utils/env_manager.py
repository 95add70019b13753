"""Environment variable manager for search and LLM credentials.

Provides read/write access to the project's .env file and a masked
status view, used by ``rankseer status`` and ``rankseer config set``.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from rankseer.integrations.google_search import is_placeholder
from rankseer.utils.helpers import mask_value


class EnvManager:
    """Manages the .env file holding API keys and settings."""

    API_KEY_REGISTRY = {
        # Search
        "GOOGLE_SEARCH_API_KEY": {
            "category": "Search",
            "label": "Google Custom Search API Key",
            "description": "API key for the Custom Search JSON API (live Google rankings)",
            "required": True,
            "docs_url": "https://developers.google.com/custom-search/v1/introduction",
            "is_secret": True,
        },
        "GOOGLE_SEARCH_ENGINE_ID": {
            "category": "Search",
            "label": "Programmable Search Engine ID",
            "description": "The cx identifier of your Programmable Search Engine",
            "required": True,
            "docs_url": "https://programmablesearchengine.google.com/",
        },

        # AI / LLM
        "OPENAI_API_KEY": {
            "category": "AI / LLM",
            "label": "OpenAI API Key",
            "description": "Primary model for related-keyword estimates",
            "required": False,
            "docs_url": "https://platform.openai.com/api-keys",
            "is_secret": True,
        },
        "GEMINI_API_KEY": {
            "category": "AI / LLM",
            "label": "Google Gemini API Key",
            "description": "Fallback model for related-keyword estimates",
            "required": False,
            "docs_url": "https://aistudio.google.com/app/apikey",
            "is_secret": True,
        },

        # Application Settings
        "LOG_LEVEL": {
            "category": "App Settings",
            "label": "Log Level",
            "description": "Logging verbosity: DEBUG, INFO, WARNING, ERROR",
            "required": False,
            "docs_url": "",
        },
    }

    def __init__(self, env_path: Optional[str] = None):
        if env_path:
            self.env_path = Path(env_path)
        else:
            self.env_path = Path(__file__).parent.parent.parent / ".env"

    def load_env(self) -> dict[str, str]:
        """Load all variables from the .env file (empty dict if absent)."""
        env_vars: dict[str, str] = {}
        if not self.env_path.exists():
            return env_vars

        with open(self.env_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, _, value = line.partition("=")
                env_vars[key.strip()] = value.strip().strip('"').strip("'")
        return env_vars

    def save_env(self, env_vars: dict[str, str]) -> None:
        """Write variables grouped by category; unknown keys go last."""
        categories: dict[str, list[str]] = {}
        for key, meta in self.API_KEY_REGISTRY.items():
            categories.setdefault(meta["category"], []).append(key)

        lines = [
            "# Rankseer environment configuration",
            f"# Last updated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "# Keep this file private. Never commit it to version control.",
            "",
        ]
        for category, keys in categories.items():
            lines.append(f"# {'=' * 50}")
            lines.append(f"# {category}")
            lines.append(f"# {'=' * 50}")
            for key in keys:
                lines.append(f"# {self.API_KEY_REGISTRY[key]['description']}")
                value = env_vars.get(key, "")
                lines.append(f'{key}="{value}"' if value else f"{key}=")
                lines.append("")

        custom_keys = [k for k in env_vars if k not in self.API_KEY_REGISTRY]
        if custom_keys:
            lines.append("# Custom / Additional Keys")
            for key in custom_keys:
                lines.append(f'{key}="{env_vars[key]}"')

        self.env_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    def set_key(self, key_name: str, value: str) -> None:
        """Write one variable to the .env file, keeping the others."""
        env_vars = self.load_env()
        env_vars[key_name] = value
        self.save_env(env_vars)
        os.environ[key_name] = value

    def get_status(self) -> dict[str, dict]:
        """Configuration status for every registered key."""
        env_vars = self.load_env()
        status = {}
        for key, meta in self.API_KEY_REGISTRY.items():
            value = env_vars.get(key, "") or os.environ.get(key, "")
            status[key] = {
                **meta,
                "configured": not is_placeholder(value),
                "masked_value": mask_value(value) if meta.get("is_secret") else value,
            }
        return status
