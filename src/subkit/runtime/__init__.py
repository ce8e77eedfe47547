"""Process-level runtime helpers."""

from .logging import LogSettings, bootstrap_logging, resolve_log_settings

__all__ = ["LogSettings", "bootstrap_logging", "resolve_log_settings"]
