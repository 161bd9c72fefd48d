"""Configuration service.

Single source of truth for application configuration: loads and saves
``config.json`` in the platform config directory, writes defaults on first
run and resolves the store location.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from todolist.adapters.sqlite.schema import STORE_FILENAME
from todolist.models.config_models import AppConfig


class ConfigService:
    """Service for loading, saving and querying the application configuration."""

    def __init__(self, config_dir: Path | str | None = None):
        self.config_dir = Path(config_dir) if config_dir else Path(user_config_dir("todolist"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("todolist"))

        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating defaults on first run.

        Raises:
            RuntimeError: If the config file exists but cannot be parsed
        """
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Write the current configuration to disk.

        The file is replaced atomically, so a crash mid-write leaves the
        previous configuration intact.
        """
        if self._config is None:
            raise RuntimeError("No configuration to save")

        staging = self.config_path.with_suffix(".json.tmp")
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            staging.write_text(self._config.model_dump_json(indent=4), encoding="utf-8")
            staging.chmod(0o600)
            os.replace(staging, self.config_path)
        except OSError as e:
            staging.unlink(missing_ok=True)
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> None:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (e.g. ``api.timeout``)."""
        value: Any = self.config
        for part in key.split("."):
            if not isinstance(value, BaseModel) or part not in type(value).model_fields:
                raise KeyError(key)
            value = getattr(value, part)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value does not validate
        """
        data = self.config.model_dump()
        *parents, leaf = key.split(".")
        node = data
        for part in parents:
            if not isinstance(node.get(part), dict):
                raise KeyError(key)
            node = node[part]
        if leaf not in node:
            raise KeyError(key)
        node[leaf] = value

        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {key}: {e}") from e
        self.save_config()

    def store_path(self) -> str:
        """Return the configured store path, or the default one."""
        return self.config.storage.db_path or str(self.data_dir / STORE_FILENAME)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
