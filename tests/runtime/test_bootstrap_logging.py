from __future__ import annotations

from subkit.core.config import Config, LoggingConfig
from subkit.runtime.logging import bootstrap_logging
from subkit.util.log import LogFormat, LogLevel


def _capture_configure(monkeypatch) -> dict[str, object]:  # type: ignore[no-untyped-def]
    seen: dict[str, object] = {}

    def fake_configure(cls, *, level, format, console, file, dev) -> None:  # type: ignore[no-untyped-def]
        seen.update(level=level, format=format, console=console, file=file, dev=dev)

    monkeypatch.setattr("subkit.runtime.logging.Log.configure", classmethod(fake_configure))
    return seen


def test_bootstrap_logging_defaults(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr("subkit.runtime.logging.ConfigManager.get", classmethod(lambda cls: Config()))
    seen = _capture_configure(monkeypatch)

    settings = bootstrap_logging()

    assert settings.level is LogLevel.INFO
    assert settings.format is LogFormat.KV
    assert settings.console is True
    assert settings.file is False
    assert seen["dev"] is False


def test_bootstrap_logging_prefers_logging_config(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    def fake_get(cls):  # type: ignore[no-untyped-def]
        return Config(
            log_level="warn",
            logging=LoggingConfig(level="debug", format="json", console=False, file=True, dev_file=True),
        )

    monkeypatch.setattr("subkit.runtime.logging.ConfigManager.get", classmethod(fake_get))
    seen = _capture_configure(monkeypatch)

    settings = bootstrap_logging()

    assert settings.level is LogLevel.DEBUG
    assert settings.format is LogFormat.JSON
    assert seen["console"] is False
    assert seen["file"] is True
    assert seen["dev"] is True


def test_bootstrap_logging_explicit_arguments_win(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    def fake_get(cls):  # type: ignore[no-untyped-def]
        return Config(log_level="warn", logging=LoggingConfig(console=False))

    monkeypatch.setattr("subkit.runtime.logging.ConfigManager.get", classmethod(fake_get))
    seen = _capture_configure(monkeypatch)

    settings = bootstrap_logging(level="error", console=True)

    assert settings.level is LogLevel.ERROR
    assert seen["console"] is True


def test_bootstrap_logging_falls_back_to_log_level(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr(
        "subkit.runtime.logging.ConfigManager.get",
        classmethod(lambda cls: Config(log_level="warn")),
    )
    _capture_configure(monkeypatch)

    assert bootstrap_logging().level is LogLevel.WARN
