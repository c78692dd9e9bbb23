"""
Abstract driver interfaces and metadata contracts for the Shift Schedule
record manager.

A driver knows how to open a connection to one kind of database file and how
to ask the engine for its own table and column listings. Everything above the
driver talks plain DB-API 2.0 (`cursor()`, `execute`, `fetchall`, `commit`,
`rollback`, `close`) with `?` placeholders.
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any, List, Protocol, Tuple, Type, TypedDict, runtime_checkable


class ColumnInfo(TypedDict):
    """
    One row of an engine column listing.

    `table_name` is the table the engine attributes the column to; catalogs
    use it to drop rows belonging to system tables.
    """

    table_name: str
    name: str
    type_name: str
    nullable: bool


@runtime_checkable
class DatabaseDriver(Protocol):
    """
    Common interface all storage drivers implement.

    Attributes
    ----------
    name : str
        Short engine identifier used in configuration.
    suffixes : tuple[str, ...]
        Lower-case file suffixes the driver handles.
    """

    name: str
    suffixes: Tuple[str, ...]

    @property
    def errors(self) -> Tuple[Type[BaseException], ...]:
        """DB-API exception classes raised by this driver."""
        ...

    def connect(self, db_path: Path) -> Any:
        """Open a new connection to `db_path`."""
        ...

    def list_tables(self, conn: Any) -> List[str]:
        """Names of every base table, system tables included."""
        ...

    def list_columns(self, conn: Any, table_name: str) -> List[ColumnInfo]:
        """Columns of `table_name` in schema order."""
        ...


class AbstractDatabaseDriver(abc.ABC):
    """
    ABC helper for class-based drivers.

    Subclasses set `name` and `suffixes` and implement the abstract methods.
    """

    name: str
    suffixes: Tuple[str, ...]

    @property
    @abc.abstractmethod
    def errors(self) -> Tuple[Type[BaseException], ...]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def connect(self, db_path: Path) -> Any:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def list_tables(self, conn: Any) -> List[str]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def list_columns(
        self, conn: Any, table_name: str
    ) -> List[ColumnInfo]:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = [
    "ColumnInfo",
    "DatabaseDriver",
    "AbstractDatabaseDriver",
]
