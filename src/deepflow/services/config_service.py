"""Configuration service for DeepFlow.

ConfigService is the single source of truth for the timer configuration. It
loads and saves ``config.json`` in the user config directory, validates every
change through the pydantic models and keeps the last valid configuration
when a change is rejected.
"""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel, ValidationError

from deepflow.models.config_models import AppConfig
from deepflow.utils.logger import get_logger

logger = get_logger("config")


def _drop_path(data: Any, loc: tuple) -> None:
    """Remove the value at *loc* from nested dicts, if present."""
    for key in loc[:-1]:
        if not isinstance(data, dict) or key not in data:
            return
        data = data[key]
    if loc and isinstance(data, dict):
        data.pop(loc[-1], None)


class ConfigService:
    """Service for loading, validating and saving the application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir("deepflow"))
        self.config_path = self.config_dir / "config.json"

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage.

        A missing file creates the defaults. Invalid values fall back to their
        defaults one field at a time; an unreadable file falls back entirely.
        """
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
            return self._config
        except (OSError, JSONDecodeError) as e:
            logger.warning("Unreadable config %s, using defaults: %s", self.config_path, e)
            self._config = AppConfig()
            return self._config

        self._config = self._validate_lenient(raw)
        return self._config

    @staticmethod
    def _validate_lenient(raw: Any) -> AppConfig:
        try:
            return AppConfig.model_validate(raw)
        except ValidationError as e:
            logger.warning("Invalid configuration values, using defaults for them: %s", e)
            cleaned = copy.deepcopy(raw) if isinstance(raw, dict) else {}
            for error in e.errors():
                _drop_path(cleaned, tuple(error["loc"]))
            try:
                return AppConfig.model_validate(cleaned)
            except ValidationError:
                return AppConfig()

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (e.g. timer.work_duration)."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                return None
        if isinstance(value, BaseModel):
            return value.model_dump()
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: The key does not name a setting
            ValueError: The value is invalid; the previous configuration is kept
        """
        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                raise KeyError(key)
            current = current[k]
        if keys[-1] not in current or isinstance(current[keys[-1]], dict):
            raise KeyError(key)

        current[keys[-1]] = value

        try:
            new_config = AppConfig.model_validate(config_dict)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            logger.warning("Rejected %s=%r: %s", key, value, messages)
            raise ValueError(f"Invalid value for '{key}': {messages}") from e

        self._config = new_config
        self.save_config()

    def reset(self, key: str | None = None) -> None:
        """Reset the whole configuration, or one key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        default_value = self.get_from_config(AppConfig(), key)
        if default_value is None:
            raise KeyError(key)
        self.set(key, default_value)

    @staticmethod
    def get_from_config(config: AppConfig, key: str) -> Any:
        """Get a value from a config object using dot notation."""
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        return value


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Shared ConfigService instance."""
    return ConfigService()
