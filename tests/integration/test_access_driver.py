"""
Tests for the Access driver.

The connection string and file checks need only the pyodbc module; opening a
real .accdb file also needs the Microsoft Access ODBC driver and a database,
supplied through SHIFT_TEST_ACCESS_DB.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

pyodbc = pytest.importorskip("pyodbc", exc_type=ImportError)

from shift_schedule.core.catalog import SchemaCatalog  # noqa: E402
from shift_schedule.drivers.access import ODBC_DRIVER, AccessDriver, build_connection_string  # noqa: E402
from shift_schedule.errors import DatabaseNotFoundError  # noqa: E402
from shift_schedule.infrastructure.db_factory import Database  # noqa: E402


def test_connection_string_names_driver_and_file() -> None:
    conn_str = build_connection_string(Path("C:/data/shifts.accdb"))
    assert conn_str.startswith(f"DRIVER={{{ODBC_DRIVER}}};")
    assert "DBQ=C:" in conn_str
    assert "shifts.accdb" in conn_str


def test_connection_string_rejects_other_files() -> None:
    with pytest.raises(ValueError, match="Unsupported file extension"):
        build_connection_string(Path("shifts.db"))


def test_access_database_uses_access_driver(tmp_path: Path) -> None:
    database = Database(tmp_path / "shifts.accdb")
    assert isinstance(database.driver, AccessDriver)
    assert database.errors == (pyodbc.Error,)


def test_missing_access_file(tmp_path: Path) -> None:
    with pytest.raises(DatabaseNotFoundError, match="Database not found"):
        with Database(tmp_path / "missing.mdb").connection():
            pass


@pytest.mark.skipif(
    not os.getenv("SHIFT_TEST_ACCESS_DB"),
    reason="Set SHIFT_TEST_ACCESS_DB to an .accdb file to run against the ODBC driver",
)
def test_real_access_catalog() -> None:
    catalog = SchemaCatalog(Database(os.environ["SHIFT_TEST_ACCESS_DB"]))
    tables = catalog.list_tables()
    assert tables
    assert not [name for name in tables if name.startswith("MSys")]
