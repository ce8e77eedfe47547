"""Configuration management.

Configuration comes from, in increasing precedence: the global config file
(``subkit.jsonc`` or ``subkit.json`` in the user config directory), an
explicit file passed to :meth:`ConfigManager.load`, and ``SUBKIT_LOG_*``
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config_loader import ConfigError, deep_merge, load_json_file
from .global_paths import GlobalPath
from ..util.log import Log

log = Log.create({"service": "config"})

CONFIG_FILES = ("subkit.json", "subkit.jsonc")

ENV_OVERRIDES = {
    "SUBKIT_LOG_LEVEL": "level",
    "SUBKIT_LOG_FORMAT": "format",
}

__all__ = ["Config", "ConfigError", "ConfigManager", "LoggingConfig"]


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[str] = None
    format: Optional[Literal["kv", "json", "pretty"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    dev_file: Optional[bool] = Field(None, alias="devFile")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class Config(BaseModel):
    """Top-level subkit configuration."""
    log_level: Optional[str] = Field(None, alias="logLevel")
    logging: Optional[LoggingConfig] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ConfigManager:
    """Loads and caches the process configuration."""

    _cached: Optional[Config] = None

    @classmethod
    def reset(cls) -> None:
        cls._cached = None

    @classmethod
    def get(cls) -> Config:
        """Return the cached configuration, loading it on first use."""
        if cls._cached is None:
            cls._cached = cls.load()
        return cls._cached

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Load, merge and validate configuration; the result is cached."""
        data: Dict[str, Any] = {}
        sources: list[str] = []

        for name in CONFIG_FILES:
            candidate = Path(GlobalPath.config()) / name
            if candidate.exists():
                data = deep_merge(data, load_json_file(candidate))
                sources.append(str(candidate))

        if path is not None:
            data = deep_merge(data, load_json_file(path))
            sources.append(str(path))

        env: Dict[str, Any] = {}
        for var, key in ENV_OVERRIDES.items():
            value = os.environ.get(var)
            if value:
                env[key] = value
        if env:
            data = deep_merge(data, {"logging": env})

        try:
            config = Config.model_validate(data)
        except ValidationError as e:
            raise ConfigError(sources[-1] if sources else "<env>", str(e)) from e

        log.debug("config loaded", {"sources": sources})
        cls._cached = config
        return config
