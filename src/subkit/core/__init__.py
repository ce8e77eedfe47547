"""Core infrastructure modules."""

from .global_paths import GlobalPath

__all__ = ["GlobalPath"]

# Config is not re-exported here: it depends on util.log, which itself
# imports GlobalPath from this package.
# To use: from subkit.core.config import ConfigManager
