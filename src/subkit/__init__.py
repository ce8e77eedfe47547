"""subkit - one unsubscribe shape for emitters, event targets and timers."""

__version__ = "0.1.0"


# Lazy imports keep `import subkit` free of logging/config setup.
def __getattr__(name: str):
    """Lazy import module components."""
    if name in ("Subscribe", "Subs", "Unsubscribe", "noop"):
        from . import subscribe
        return getattr(subscribe, name)
    if name == "Log":
        from .util.log import Log
        return Log
    if name == "bootstrap_logging":
        from .runtime.logging import bootstrap_logging
        return bootstrap_logging
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "Subscribe",
    "Subs",
    "Unsubscribe",
    "noop",
    "Log",
    "bootstrap_logging",
]
