"""
Identity resolution: which column identifies a row, and the next free id.
"""

from __future__ import annotations

from typing import Optional

from shift_schedule.core.catalog import SchemaCatalog
from shift_schedule.core.record_store import RecordStore
from shift_schedule.domain.models import TableIdentity
from shift_schedule.domain.overrides import SchemaOverrides
from shift_schedule.errors import IdentityResolutionError
from shift_schedule.infrastructure.db_factory import quote_identifier
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)

ID_MARKER = "id"


class IdentityResolver:
    """
    Resolve identity columns from the declared id map, falling back to the
    first column whose name contains "ID".

    The fallback takes the first match in schema order and may pick the
    wrong column in tables with several "...ID..." columns; declare such
    tables in the overrides instead.

    `get_next_id` computes `MAX(id) + 1` without claiming it, so two writers
    working on the same file at once can be handed the same id.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        store: RecordStore,
        overrides: Optional[SchemaOverrides] = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.overrides = overrides or SchemaOverrides()

    def get_id_column(self, table: str) -> str:
        """
        Name of the identity column of `table`.

        Raises
        ------
        IdentityResolutionError
            If the table is not declared and no column name contains "ID".
        """
        declared = self.overrides.id_column_for(table)
        if declared is not None:
            return declared

        for column in self.catalog.get_schema(table):
            if ID_MARKER in column.name.casefold():
                log.debug(
                    "Identity column guessed from schema",
                    extra={"table": table, "id_column": column.name},
                )
                return column.name

        raise IdentityResolutionError(table)

    def resolve(self, table: str) -> TableIdentity:
        return TableIdentity(table_name=table, id_column=self.get_id_column(table))

    def get_next_id(self, table: str, id_column: Optional[str] = None) -> int:
        """`MAX(id) + 1`, or 1 for an empty table."""
        id_column = id_column or self.get_id_column(table)
        current = self.store.scalar(
            f"SELECT MAX({quote_identifier(id_column)}) FROM {quote_identifier(table)}",
            table=table,
        )
        return 1 if current is None else int(current) + 1


__all__ = ["ID_MARKER", "IdentityResolver"]
