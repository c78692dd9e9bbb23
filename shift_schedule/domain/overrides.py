"""
Table-specific overrides for the shift schedule database.

The record engine itself is generic; everything it knows about particular
tables (identity columns, lookup-backed foreign keys, time-only columns and
bounded integers) comes from a `SchemaOverrides` instance handed to it at
construction time. The default instance describes the shift schedule
database; another deployment can supply its own as a JSON document via the
SHIFT_OVERRIDES_FILE setting.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, TypeVar

from pydantic import BaseModel, Field

from shift_schedule.config import Settings
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)

SHIFTS_TABLE = "Смены"
DEPARTMENTS_TABLE = "Подразделения"
MANAGERS_TABLE = "Руководители"
SHIFT_DURATIONS_TABLE = "Длительности смен"
SUPERVISORS_TABLE = "Начальники смен"
WORKER_COUNTS_TABLE = "Количество рабочих"

SHIFT_START_COLUMN = "Начало смены"
SHIFT_END_COLUMN = "Окончание смены"
SHIFT_LENGTH_COLUMN = "Длительность смены"


def _key(name: str) -> str:
    return name.casefold()


class ColumnRef(BaseModel):
    table: str
    column: str

    model_config = {"frozen": True}


class BoundedColumn(ColumnRef):
    minimum: int
    maximum: int


class LookupBinding(ColumnRef):
    """A foreign key column resolved against a reference table."""

    lookup_table: str
    key_column: str
    label_column: str


RefT = TypeVar("RefT", bound=ColumnRef)


class SchemaOverrides(BaseModel):
    """
    Externally declared knowledge about specific tables.

    Table and column names are matched case-insensitively.
    """

    id_columns: Dict[str, str] = Field(default_factory=dict)
    lookups: List[LookupBinding] = Field(default_factory=list)
    time_of_day_columns: List[ColumnRef] = Field(default_factory=list)
    bounded_integer_columns: List[BoundedColumn] = Field(default_factory=list)

    model_config = {"frozen": True}

    def id_column_for(self, table: str) -> Optional[str]:
        wanted = _key(table)
        for name, column in self.id_columns.items():
            if _key(name) == wanted:
                return column
        return None

    def lookup_for(self, table: str, column: str) -> Optional[LookupBinding]:
        return _find(self.lookups, table, column)

    def bounds_for(self, table: str, column: str) -> Optional[BoundedColumn]:
        return _find(self.bounded_integer_columns, table, column)

    def is_time_of_day(self, table: str, column: str) -> bool:
        return _find(self.time_of_day_columns, table, column) is not None

    def time_of_day_columns_for(self, table: str) -> set[str]:
        """Casefolded names of the time-only columns of `table`."""
        return {
            _key(ref.column) for ref in self.time_of_day_columns if _key(ref.table) == _key(table)
        }

    @classmethod
    def from_file(cls, path: Path | str) -> "SchemaOverrides":
        """Load overrides from a JSON document with the same shape as this model."""
        text = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(text)


def _find(refs: Iterable[RefT], table: str, column: str) -> Optional[RefT]:
    table_key, column_key = _key(table), _key(column)
    for ref in refs:
        if _key(ref.table) == table_key and _key(ref.column) == column_key:
            return ref
    return None


def shift_schedule_overrides() -> SchemaOverrides:
    """Overrides for the shift schedule database."""
    return SchemaOverrides(
        id_columns={
            SHIFTS_TABLE: "Код смены",
            MANAGERS_TABLE: "ID_руководителя",
            DEPARTMENTS_TABLE: "ID_подразделения",
            SHIFT_DURATIONS_TABLE: "ID_длительности_смены",
            SUPERVISORS_TABLE: "ID_начальника_смены",
            WORKER_COUNTS_TABLE: "ID_количества_рабочих",
        },
        lookups=[
            LookupBinding(
                table=SHIFTS_TABLE,
                column="ID_подразделения",
                lookup_table=DEPARTMENTS_TABLE,
                key_column="ID_подразделения",
                label_column="Подразделение",
            ),
            LookupBinding(
                table=SHIFTS_TABLE,
                column="ID_руководителя",
                lookup_table=MANAGERS_TABLE,
                key_column="ID_руководителя",
                label_column="ФИО_руководителя",
            ),
            LookupBinding(
                table=SHIFTS_TABLE,
                column="ID_количества_рабочих",
                lookup_table=WORKER_COUNTS_TABLE,
                key_column="ID_количества_рабочих",
                label_column="Количество рабочих",
            ),
            LookupBinding(
                table=SHIFTS_TABLE,
                column="ID_длительности_смены",
                lookup_table=SHIFT_DURATIONS_TABLE,
                key_column="ID_длительности_смены",
                label_column=SHIFT_LENGTH_COLUMN,
            ),
            LookupBinding(
                table=SHIFTS_TABLE,
                column="ID_начальника_смены",
                lookup_table=SUPERVISORS_TABLE,
                key_column="ID_начальника_смены",
                label_column="ФИО_начальника_смены",
            ),
        ],
        time_of_day_columns=[
            ColumnRef(table=SHIFT_DURATIONS_TABLE, column=SHIFT_START_COLUMN),
            ColumnRef(table=SHIFT_DURATIONS_TABLE, column=SHIFT_END_COLUMN),
        ],
        bounded_integer_columns=[
            BoundedColumn(
                table=SHIFT_DURATIONS_TABLE, column=SHIFT_LENGTH_COLUMN, minimum=0, maximum=24
            ),
        ],
    )


def load_overrides(settings: Settings) -> SchemaOverrides:
    """Overrides from SHIFT_OVERRIDES_FILE when configured, else the built-in set."""
    if settings.overrides_file is not None:
        log.debug("Loading schema overrides", extra={"path": str(settings.overrides_file)})
        return SchemaOverrides.from_file(settings.overrides_file)
    return shift_schedule_overrides()


__all__ = [
    "SHIFTS_TABLE",
    "DEPARTMENTS_TABLE",
    "MANAGERS_TABLE",
    "SHIFT_DURATIONS_TABLE",
    "SUPERVISORS_TABLE",
    "WORKER_COUNTS_TABLE",
    "SHIFT_START_COLUMN",
    "SHIFT_END_COLUMN",
    "SHIFT_LENGTH_COLUMN",
    "ColumnRef",
    "BoundedColumn",
    "LookupBinding",
    "SchemaOverrides",
    "shift_schedule_overrides",
    "load_overrides",
]
