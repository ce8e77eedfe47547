"""Runtime logging bootstrap helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.config import ConfigManager
from ..util.log import Log, LogFormat, LogLevel


@dataclass(frozen=True)
class LogSettings:
    level: LogLevel
    format: LogFormat
    console: bool
    file: bool
    dev_file: bool


def _pick(explicit: Optional[bool], configured: Optional[bool], default: bool) -> bool:
    if explicit is not None:
        return explicit
    if configured is not None:
        return configured
    return default


def resolve_log_settings(
    *,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    """Merge explicit arguments over the loaded config over defaults."""
    cfg = ConfigManager.get()
    log = cfg.logging

    lv_text = level or (log.level if log else None) or cfg.log_level
    fm_text = format or (log.format if log else None)

    return LogSettings(
        level=LogLevel.parse(lv_text),
        format=LogFormat.parse(fm_text),
        console=_pick(console, log.console if log else None, True),
        file=_pick(file, log.file if log else None, False),
        dev_file=_pick(dev_file, log.dev_file if log else None, False),
    )


def bootstrap_logging(
    *,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    """Resolve config and initialize the process logger."""
    settings = resolve_log_settings(
        level=level,
        format=format,
        console=console,
        file=file,
        dev_file=dev_file,
    )
    Log.configure(
        level=settings.level,
        format=settings.format,
        console=settings.console,
        file=settings.file,
        dev=settings.dev_file,
    )
    return settings
