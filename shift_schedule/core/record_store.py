"""
Record store: parameterized writes and ad-hoc reads against a database file.

Writes run inside a transaction on their own connection and are rolled back
on any storage error, which is then re-raised as a PersistenceError naming the
table. Reads run without a transaction. The store keeps no state between
calls and performs no optimistic concurrency checks: concurrent updates of
the same row are last-writer-wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from shift_schedule.errors import MissingRecordIdError, PersistenceError, QueryError
from shift_schedule.infrastructure.db_factory import Database, quote_identifier
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """Column names plus row tuples of a read query."""

    columns: List[str] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.columns, row, strict=True)) for row in self.rows]


def _execute(cursor: Any, sql: str, params: Sequence[Any]) -> None:
    if params:
        cursor.execute(sql, list(params))
    else:
        cursor.execute(sql)


def _find_key(values: Mapping[str, Any], column: str) -> Optional[str]:
    wanted = column.casefold()
    for key in values:
        if key.casefold() == wanted:
            return key
    return None


class RecordStore:
    """
    CRUD operations for any table of a database file.

    Parameters
    ----------
    database : Database
        Database file the store writes to; a connection is opened per call.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def _write(self, table: str, sql: str, params: Sequence[Any]) -> int:
        """Run one statement in a transaction and return the affected row count."""
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                _execute(cursor, sql, params)
                affected = cursor.rowcount
                conn.commit()
            except self.database.errors as exc:
                conn.rollback()
                log.error("Write rolled back", extra={"table": table, "error": str(exc)})
                raise PersistenceError(table, str(exc), exc) from exc
            finally:
                cursor.close()
        return affected

    def insert(self, table: str, values: Mapping[str, Any]) -> None:
        """
        Insert one row naming every supplied column.

        Raises
        ------
        PersistenceError
            If no values are supplied or the engine rejects the row.
        """
        if not values:
            raise PersistenceError(table, "no values supplied")
        columns = list(values)
        sql = "INSERT INTO {} ({}) VALUES ({})".format(
            quote_identifier(table),
            ", ".join(quote_identifier(column) for column in columns),
            ", ".join("?" for _ in columns),
        )
        self._write(table, sql, [values[column] for column in columns])
        log.info("Record inserted", extra={"table": table, "columns": len(columns)})

    def update(self, table: str, values: Mapping[str, Any], id_column: str) -> bool:
        """
        Update the row identified by `values[id_column]`.

        Every other supplied column is written. Returns False when no row
        matched, which callers report as a soft failure.

        Raises
        ------
        MissingRecordIdError
            If the identity value is absent from `values`.
        PersistenceError
            If the engine rejects the update.
        """
        id_key = _find_key(values, id_column)
        if id_key is None or values[id_key] is None:
            raise MissingRecordIdError(table, id_column)
        columns = [column for column in values if column != id_key]
        if not columns:
            raise PersistenceError(table, "no columns to update")
        sql = "UPDATE {} SET {} WHERE {} = ?".format(
            quote_identifier(table),
            ", ".join(f"{quote_identifier(column)} = ?" for column in columns),
            quote_identifier(id_column),
        )
        params = [values[column] for column in columns] + [values[id_key]]
        affected = self._write(table, sql, params)
        if affected > 0:
            log.info("Record updated", extra={"table": table, "id": values[id_key]})
        else:
            log.warning("Update matched no rows", extra={"table": table, "id": values[id_key]})
        return affected > 0

    def delete(self, table: str, id_column: str, id_value: Any) -> bool:
        """Delete the row whose identity column equals `id_value`."""
        sql = "DELETE FROM {} WHERE {} = ?".format(
            quote_identifier(table), quote_identifier(id_column)
        )
        affected = self._write(table, sql, [id_value])
        log.info("Record deleted", extra={"table": table, "id": id_value, "rows": affected})
        return affected > 0

    def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """
        Execute caller-supplied SQL verbatim and return its rows.

        The SQL is neither validated nor sanitized; pass user input through
        `params`. A statement that returns no rows is committed.
        """
        return self._read(sql, params)

    def read_table(self, table: str) -> QueryResult:
        """Every row of `table` in natural order."""
        return self._read(f"SELECT * FROM {quote_identifier(table)}", (), table=table)

    def scalar(self, sql: str, params: Sequence[Any] = (), table: Optional[str] = None) -> Any:
        """First column of the first row, or None when there are no rows."""
        result = self._read(sql, params, table=table)
        if not result.rows:
            return None
        return result.rows[0][0]

    def _read(self, sql: str, params: Sequence[Any], table: Optional[str] = None) -> QueryResult:
        log.debug("Running query", extra={"sql": sql, "params": len(params)})
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                _execute(cursor, sql, params)
                if cursor.description is None:
                    # No result set: an ad-hoc statement that changed data.
                    conn.commit()
                    return QueryResult()
                columns = [description[0] for description in cursor.description]
                rows = [tuple(row) for row in cursor.fetchall()]
            except self.database.errors as exc:
                raise QueryError(str(exc), table) from exc
            finally:
                cursor.close()
        return QueryResult(columns=columns, rows=rows)


__all__ = ["QueryResult", "RecordStore"]
