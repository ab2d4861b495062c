"""Shared fixtures for Setlog tests."""

from pathlib import Path

import pytest

from setlog.db import Database
from setlog.surfacing import color_configured
from setlog.models import Setting
from setlog.repository import Repository


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and data directories at a temporary location."""
    home = tmp_path / "home"
    monkeypatch.setenv("SETLOG_HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("SETLOG_LOG_LEVEL", raising=False)
    color_configured.cache_clear()
    yield home
    color_configured.cache_clear()


@pytest.fixture
def db(tmp_path: Path) -> Database:
    """A Database backed by a temporary file."""
    return Database(tmp_path / "test.db")


@pytest.fixture
def repo(db: Database) -> Repository:
    """A Repository over the temporary database."""
    return Repository(db)


@pytest.fixture
def make_setting():
    """Factory for settings with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(**fields) -> Setting:
        fields.setdefault("id", f"s-{next(counter):04d}")
        fields.setdefault("title", "Untitled test")
        return Setting(**fields)

    return _make
