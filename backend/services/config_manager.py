"""
Configuration Manager - Handle backend settings persistence
Holds the Gemini API key and review/chat settings for the reviewer backend
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "COPILOT_REVIEWER_CONFIG_DIR"

DEFAULT_SUPPORTED_LANGUAGES = [
    "javascript",
    "typescript",
    "python",
    "java",
    "cpp",
    "c",
    "go",
    "rust",
]


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self, config_dir: str | os.PathLike | None = None):
        try:
            # 1st: explicit argument, 2nd: environment variable
            config_dir = config_dir or os.environ.get(CONFIG_DIR_ENV)

            # 3rd: home directory ~/.copilot_reviewer
            if not config_dir:
                config_dir = os.path.expanduser("~/.copilot_reviewer")

            config_path = Path(config_dir)
            try:
                config_path.mkdir(parents=True, exist_ok=True)
                self._config_file = config_path / "config.json"
            except OSError as e:
                logger.warning("[ConfigManager] Cannot write to %s: %s", config_dir, e)
                self._config_file = None

            # Fallback: temp directory when the preferred path is unusable
            if not self._config_file:
                tmp_dir = Path(tempfile.gettempdir()) / "copilot_reviewer"
                tmp_dir.mkdir(parents=True, exist_ok=True)
                self._config_file = tmp_dir / "config.json"
                logger.info("[ConfigManager] Using temporary config path: %s", self._config_file)

        except OSError as e:
            logger.error("[ConfigManager] Critical error in init: %s", e)
            self._config_file = Path(tempfile.gettempdir()) / "copilot_reviewer_config_fallback.json"

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, filling gaps from the defaults"""
        if not self._config_file.exists():
            return self._default_config()

        try:
            with open(self._config_file) as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("[ConfigManager] Error loading config: %s", e)
            return self._default_config()

        if not isinstance(loaded, dict):
            logger.warning("[ConfigManager] Ignoring non-object config in %s", self._config_file)
            return self._default_config()
        return _deep_merge(self._default_config(), loaded)

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "gemini": {
                "apiKey": "",
                "model": "gemini-2.0-flash-exp",
                "baseUrl": "https://generativelanguage.googleapis.com/v1beta/models",
                "timeoutSeconds": 60,
            },
            "review": {
                "reviewOnSave": False,
                "supportedLanguages": list(DEFAULT_SUPPORTED_LANGUAGES),
                "quickReview": {
                    "minMessageLength": 10,
                    "lowValueKeywords": ["comment", "naming", "style"],
                },
            },
            "chat": {"contextTurns": 6},
            "server": {"host": "127.0.0.1", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return copy.deepcopy(self._config)

    def save_config(self, config: dict[str, Any]):
        """Merge `config` into the stored configuration and write it out"""
        self._config = _deep_merge(self._config, config)

        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get a config value by dotted path, e.g. "chat.contextTurns" """
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any):
        """Set a config value by dotted path and persist it"""
        update: dict[str, Any] = {}
        node = update
        parts = key.split(".")
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value
        self.save_config(update)

    # ========== Secrets ==========

    def get_secret(self, key: str) -> str | None:
        """Get a secret (e.g. "apiKey") from the gemini section; empty means absent"""
        value = self._config.get("gemini", {}).get(key)
        return value or None

    def set_secret(self, key: str, value: str):
        self.save_config({"gemini": {key: value}})


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def mask_key(key: str) -> str:
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]
