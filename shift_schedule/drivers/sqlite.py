"""
SQLite driver for portable copies of the shift schedule database.

SQLite stores values by affinity rather than by declared type, so the
connection is opened with PARSE_DECLTYPES and converters keyed on the
declared column type: DECIMAL/CURRENCY columns come back as `Decimal`,
DATETIME columns as `datetime` and BIT/BOOLEAN columns as `bool`, the same
Python types pyodbc yields for the equivalent Access columns.

The `sqlite3` module keeps adapters and converters in process-wide
registries; there is no per-connection variant. They are registered when
the first `SqliteDriver` is created, not on import. From then on other
`sqlite3` users in the process write `Decimal` and `datetime` parameters as
text, and connections that opt into PARSE_DECLTYPES read the type names
above through these converters. Connections opened without
`detect_types` are unaffected on read.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import List, Tuple, Type

from shift_schedule.drivers.abstract import AbstractDatabaseDriver, ColumnInfo

_DECIMAL_TYPES = ("DECIMAL", "NUMERIC", "CURRENCY", "MONEY", "DOUBLE", "REAL", "FLOAT", "SINGLE")
_DATETIME_TYPES = ("DATETIME", "DATE", "TIMESTAMP")
_BOOLEAN_TYPES = ("BIT", "BOOLEAN", "YESNO")


def _adapt_datetime(value: datetime) -> str:
    return value.isoformat(sep=" ")


def _convert_decimal(raw: bytes) -> Decimal:
    return Decimal(raw.decode("ascii"))


def _convert_datetime(raw: bytes) -> datetime:
    return datetime.fromisoformat(raw.decode("ascii"))


def _convert_boolean(raw: bytes) -> bool:
    return raw not in (b"0", b"")


_registered = False


def _register_types() -> None:
    global _registered
    if _registered:
        return
    sqlite3.register_adapter(Decimal, str)
    sqlite3.register_adapter(datetime, _adapt_datetime)
    for type_name in _DECIMAL_TYPES:
        sqlite3.register_converter(type_name, _convert_decimal)
    for type_name in _DATETIME_TYPES:
        sqlite3.register_converter(type_name, _convert_datetime)
    for type_name in _BOOLEAN_TYPES:
        sqlite3.register_converter(type_name, _convert_boolean)
    _registered = True


class SqliteDriver(AbstractDatabaseDriver):
    """SQLite database files through the standard library `sqlite3` module."""

    name: str = "sqlite"
    suffixes: Tuple[str, ...] = (".db", ".sqlite", ".sqlite3")

    def __init__(self) -> None:
        _register_types()

    @property
    def errors(self) -> Tuple[Type[BaseException], ...]:
        return (sqlite3.Error,)

    def connect(self, db_path: Path) -> sqlite3.Connection:
        conn = sqlite3.connect(str(db_path), detect_types=sqlite3.PARSE_DECLTYPES)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def list_tables(self, conn: sqlite3.Connection) -> List[str]:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        return [row[0] for row in rows]

    def list_columns(self, conn: sqlite3.Connection, table_name: str) -> List[ColumnInfo]:
        rows = conn.execute(
            'SELECT name, type, "notnull", pk FROM pragma_table_info(?) ORDER BY cid',
            (table_name,),
        ).fetchall()
        return [
            ColumnInfo(
                table_name=table_name,
                name=name,
                type_name=type_name or "",
                nullable=not (notnull or pk),
            )
            for name, type_name, notnull, pk in rows
        ]


__all__ = ["SqliteDriver"]
