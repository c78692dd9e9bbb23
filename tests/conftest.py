"""
Pytest configuration for the Shift Schedule record manager.

Provides fixtures for:
- Per-test SQLite copies of the shift schedule database
- Settings isolated from the developer's environment
- Ready-made editors wired with the shift schedule overrides
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from scripts.create_sample_db import create_sample_database
from shift_schedule.config import Settings, get_settings
from shift_schedule.domain.overrides import SchemaOverrides, shift_schedule_overrides
from shift_schedule.editor import RecordEditor
from shift_schedule.infrastructure.db_factory import Database

_ENV_VARS = (
    "SHIFT_DB_PATH",
    "SHIFT_DB_ENGINE",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "SHIFT_CREDENTIALS_TABLE",
    "SHIFT_PASSWORD_SALT",
    "SHIFT_MIN_PASSWORD_LENGTH",
    "SHIFT_OVERRIDES_FILE",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Drop configuration coming from the environment and the settings cache.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_db_path(tmp_path: Path) -> Path:
    """
    A fresh SQLite shift schedule database with sample rows.
    """
    return create_sample_database(tmp_path / "shifts.db")


@pytest.fixture
def empty_db_path(tmp_path: Path) -> Path:
    """
    The shift schedule schema without any rows.
    """
    return create_sample_database(tmp_path / "empty.db", with_data=False)


@pytest.fixture
def database(sample_db_path: Path) -> Database:
    return Database(sample_db_path)


@pytest.fixture
def overrides() -> SchemaOverrides:
    return shift_schedule_overrides()


@pytest.fixture
def editor(database: Database, overrides: SchemaOverrides) -> RecordEditor:
    return RecordEditor(database, overrides)


@pytest.fixture
def test_settings(sample_db_path: Path) -> Settings:
    """
    Settings fixture pointing at the sample database.
    """
    return Settings(db_path=sample_db_path, log_level="DEBUG")
