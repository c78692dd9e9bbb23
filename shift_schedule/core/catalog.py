"""
Schema catalog: column metadata and table listings read live from the engine.

Nothing is cached. Every call opens a connection, asks the engine, and builds
fresh descriptors, so edits made to the database file by other tools are
always visible.
"""

from __future__ import annotations

from typing import List, Optional

from shift_schedule.core.type_mapper import classify_storage_type, to_semantic
from shift_schedule.domain.models import ColumnDescriptor
from shift_schedule.drivers.abstract import ColumnInfo
from shift_schedule.infrastructure.db_factory import Database
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)

SYSTEM_TABLE_PREFIXES = ("MSys", "~", "sqlite_")


def is_system_table(name: str) -> bool:
    return name.startswith(SYSTEM_TABLE_PREFIXES)


def to_descriptor(info: ColumnInfo) -> ColumnDescriptor:
    storage_type = classify_storage_type(info["type_name"])
    return ColumnDescriptor(
        name=info["name"],
        storage_type=storage_type,
        semantic_type=to_semantic(storage_type),
        required=not info["nullable"],
        declared_type=info["type_name"],
    )


class SchemaCatalog:
    """
    Read-only view of a database's tables and columns.

    Parameters
    ----------
    database : Database
        Database file to inspect.
    credentials_table : str
        Reserved table hidden from `get_visible_tables`.
    """

    def __init__(self, database: Database, credentials_table: str = "Users") -> None:
        self.database = database
        self.credentials_table = credentials_table

    def get_schema(self, table: str) -> List[ColumnDescriptor]:
        """Columns of `table` in schema order; empty when the table does not exist."""
        with self.database.connection() as conn:
            rows = self.database.driver.list_columns(conn, table)
        columns = [to_descriptor(row) for row in rows if not is_system_table(row["table_name"])]
        log.debug("Schema read", extra={"table": table, "columns": len(columns)})
        return columns

    def get_column(self, table: str, column: str) -> Optional[ColumnDescriptor]:
        wanted = column.casefold()
        for descriptor in self.get_schema(table):
            if descriptor.name.casefold() == wanted:
                return descriptor
        return None

    def is_field_required(self, table: str, column: str) -> bool:
        descriptor = self.get_column(table, column)
        return descriptor is not None and descriptor.required

    def list_tables(self) -> List[str]:
        """Base tables, excluding engine system tables."""
        with self.database.connection() as conn:
            names = self.database.driver.list_tables(conn)
        return sorted(name for name in names if not is_system_table(name))

    def get_visible_tables(self) -> List[str]:
        """Tables a user may browse: `list_tables` minus the credentials table."""
        hidden = self.credentials_table.casefold()
        return [name for name in self.list_tables() if name.casefold() != hidden]


__all__ = ["SYSTEM_TABLE_PREFIXES", "SchemaCatalog", "is_system_table", "to_descriptor"]
