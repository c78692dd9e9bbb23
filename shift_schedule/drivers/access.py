"""
Microsoft Access (.mdb/.accdb) driver.

Uses pyodbc with the Microsoft Access ODBC driver (available on Windows).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple, Type

import pyodbc

from shift_schedule.drivers.abstract import AbstractDatabaseDriver, ColumnInfo

ODBC_DRIVER = "Microsoft Access Driver (*.mdb, *.accdb)"


def build_connection_string(db_path: Path) -> str:
    """Build an ODBC connection string for an Access database."""
    suffix = db_path.suffix.lower()
    if suffix not in AccessDriver.suffixes:
        raise ValueError(f"Unsupported file extension: {suffix}")
    return f"DRIVER={{{ODBC_DRIVER}}};DBQ={db_path};"


class AccessDriver(AbstractDatabaseDriver):
    """
    Access database files through ODBC.

    Column metadata comes from the ODBC catalog functions
    (`SQLColumns`/`SQLTables`), so type names are the engine's own
    (COUNTER, INTEGER, CURRENCY, DATETIME, BIT, VARCHAR, ...).
    """

    name: str = "access"
    suffixes: Tuple[str, ...] = (".mdb", ".accdb")

    @property
    def errors(self) -> Tuple[Type[BaseException], ...]:
        return (pyodbc.Error,)

    def connect(self, db_path: Path) -> pyodbc.Connection:
        """
        Open a connection to an Access database.

        Parameters
        ----------
        db_path : Path
            Path to the .mdb or .accdb file.

        Returns
        -------
        pyodbc.Connection
            An open ODBC connection with autocommit disabled.
        """
        return pyodbc.connect(build_connection_string(db_path), autocommit=False)

    def list_tables(self, conn: pyodbc.Connection) -> List[str]:
        cursor = conn.cursor()
        try:
            return [row.table_name for row in cursor.tables(tableType="TABLE")]
        finally:
            cursor.close()

    def list_columns(self, conn: pyodbc.Connection, table_name: str) -> List[ColumnInfo]:
        cursor = conn.cursor()
        try:
            return [
                ColumnInfo(
                    table_name=row.table_name,
                    name=row.column_name,
                    type_name=row.type_name,
                    nullable=bool(row.nullable),
                )
                for row in cursor.columns(table=table_name)
            ]
        finally:
            cursor.close()


__all__ = ["AccessDriver", "build_connection_string", "ODBC_DRIVER"]
