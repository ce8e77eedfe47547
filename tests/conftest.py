from collections.abc import Iterator
from pathlib import Path

import pytest

from subkit.core.config import ConfigManager
from subkit.util.log import Log


@pytest.fixture(autouse=True)
def isolated_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SUBKIT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SUBKIT_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("SUBKIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SUBKIT_LOG_FORMAT", raising=False)


@pytest.fixture(autouse=True)
def _logging_teardown() -> Iterator[None]:
    Log.reset()
    ConfigManager.reset()
    yield
    Log.reset()
    ConfigManager.reset()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
