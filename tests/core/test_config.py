from __future__ import annotations

from pathlib import Path

import pytest

from subkit.core.config import ConfigError, ConfigManager


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_load_without_files_gives_empty_config() -> None:
    config = ConfigManager.load()

    assert config.logging is None
    assert config.log_level is None


def test_global_jsonc_file_is_loaded(tmp_path: Path) -> None:
    _write(
        tmp_path / "config" / "subkit.jsonc",
        """
        {
          // comments are allowed
          "logging": {"level": "debug", "devFile": true}
        }
        """,
    )

    config = ConfigManager.load()

    assert config.logging is not None
    assert config.logging.level == "debug"
    assert config.logging.dev_file is True


def test_explicit_file_overrides_global(tmp_path: Path) -> None:
    _write(tmp_path / "config" / "subkit.json", '{"logging": {"level": "debug", "console": false}}')
    explicit = _write(tmp_path / "project.json", '{"logging": {"level": "error"}}')

    config = ConfigManager.load(explicit)

    assert config.logging is not None
    assert config.logging.level == "error"
    assert config.logging.console is False


def test_env_vars_override_files(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _write(tmp_path / "config" / "subkit.json", '{"logging": {"level": "debug", "format": "kv"}}')
    monkeypatch.setenv("SUBKIT_LOG_LEVEL", "warn")
    monkeypatch.setenv("SUBKIT_LOG_FORMAT", "json")

    config = ConfigManager.load()

    assert config.logging is not None
    assert config.logging.level == "warn"
    assert config.logging.format == "json"


def test_env_substitution_in_files(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MY_LEVEL", "info")
    path = _write(tmp_path / "sub.json", '{"logLevel": "{env:MY_LEVEL}"}')

    assert ConfigManager.load(path).log_level == "info"


def test_unknown_keys_raise_config_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.json", '{"logging": {"colour": true}}')

    with pytest.raises(ConfigError) as excinfo:
        ConfigManager.load(path)

    assert excinfo.value.path == str(path)


def test_get_caches_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = ConfigManager.get()
    monkeypatch.setenv("SUBKIT_LOG_LEVEL", "error")

    assert ConfigManager.get() is first

    ConfigManager.reset()
    config = ConfigManager.get()
    assert config.logging is not None
    assert config.logging.level == "error"
