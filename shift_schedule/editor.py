"""
Record editor: the add/edit/delete flow on top of the core components.

Usage:
    from shift_schedule.editor import RecordEditor

    editor = RecordEditor.from_settings(db_path="shifts.accdb")
    form = editor.new_record_form("Смены")
    values = editor.parse_form_input(form, {"Дата": "2024-03-01", "ID_подразделения": "2"})
    editor.insert("Смены", values)

Every submission is checked in full (required fields, types, and for edits
negative integers) before any transaction is opened; all problems are raised
together as one RecordValidationError.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from shift_schedule.config import Settings, get_settings
from shift_schedule.core.catalog import SchemaCatalog
from shift_schedule.core.fields import FieldDescriptorBuilder, RecordForm, parse_raw
from shift_schedule.core.identity import IdentityResolver
from shift_schedule.core.record_store import QueryResult, RecordStore
from shift_schedule.core.validator import Validator, check_required
from shift_schedule.domain.models import ColumnDescriptor, SemanticType, ValidationIssue
from shift_schedule.domain.overrides import SchemaOverrides, load_overrides
from shift_schedule.errors import FieldValueError, RecordValidationError
from shift_schedule.infrastructure.db_factory import Database, get_database, quote_identifier
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)


def _get(values: Mapping[str, Any], column: str) -> Any:
    wanted = column.casefold()
    for key, value in values.items():
        if key.casefold() == wanted:
            return value
    return None


def negative_integer_issues(
    columns: Sequence[ColumnDescriptor], values: Mapping[str, Any]
) -> List[ValidationIssue]:
    """Issues for integer columns given a negative number."""
    schema = {column.name.casefold(): column for column in columns}
    issues: List[ValidationIssue] = []
    for key, value in values.items():
        column = schema.get(key.casefold())
        if column is None or column.semantic_type is not SemanticType.INTEGER:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
            continue
        if isinstance(value, Decimal) and not value.is_finite():
            continue
        if value < 0:
            issues.append(
                ValidationIssue(
                    column=column.name,
                    reason="negative_value",
                    message=f"{column.name} cannot be negative",
                    expected_type=SemanticType.INTEGER.value,
                )
            )
    return issues


class RecordEditor:
    """
    Generic editor for any table of a shift schedule database.

    Parameters
    ----------
    database : Database
        Database file to edit.
    overrides : SchemaOverrides, optional
        Table-specific knowledge (id columns, lookups, time-only columns).
        Defaults to an empty set, which leaves every id column to the name
        heuristic; for the shift schedule database pass
        `shift_schedule_overrides()` or use `from_settings`, otherwise
        ``Смены`` is keyed by ``ID_подразделения``.
    credentials_table : str
        Table hidden from `visible_tables`.
    """

    def __init__(
        self,
        database: Database,
        overrides: Optional[SchemaOverrides] = None,
        credentials_table: str = "Users",
    ) -> None:
        self.database = database
        self.overrides = overrides or SchemaOverrides()
        self.catalog = SchemaCatalog(database, credentials_table)
        self.store = RecordStore(database)
        self.identity = IdentityResolver(self.catalog, self.store, self.overrides)
        self.validator = Validator(self.catalog, self.overrides)
        self.fields = FieldDescriptorBuilder(self.catalog, self.store, self.identity, self.overrides)

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, db_path: Path | str | None = None
    ) -> "RecordEditor":
        settings = settings or get_settings()
        return cls(
            get_database(settings, db_path),
            overrides=load_overrides(settings),
            credentials_table=settings.credentials_table,
        )

    def visible_tables(self) -> List[str]:
        return self.catalog.get_visible_tables()

    def read_table(self, table: str) -> QueryResult:
        return self.store.read_table(table)

    def new_record_form(self, table: str) -> RecordForm:
        """Form for a new row, its id pre-filled with the next free id."""
        return self.fields.describe_table(table)

    def find_record(self, table: str, record_id: Any) -> Optional[Dict[str, Any]]:
        id_column = self.identity.get_id_column(table)
        result = self.store.query(
            "SELECT * FROM {} WHERE {} = ?".format(
                quote_identifier(table), quote_identifier(id_column)
            ),
            [record_id],
        )
        rows = result.as_dicts()
        return rows[0] if rows else None

    def edit_record_form(self, table: str, record_id: Any) -> Optional[RecordForm]:
        """Form pre-filled from the row `record_id`, or None if no such row exists."""
        record = self.find_record(table, record_id)
        if record is None:
            return None
        return self.fields.describe_table(table, record)

    def parse_form_input(self, form: RecordForm, raw_values: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Parse raw input for the fields of `form`.

        Raises
        ------
        RecordValidationError
            With an issue for every field that is unknown or cannot be parsed.
        """
        parsed: Dict[str, Any] = {}
        issues: List[ValidationIssue] = []
        for key, raw in raw_values.items():
            descriptor = form.field(key)
            if descriptor is None:
                issues.append(
                    ValidationIssue(
                        column=key,
                        reason="unknown_column",
                        message=f"{key} does not exist in table {form.table}",
                    )
                )
                continue
            try:
                parsed[descriptor.name] = parse_raw(descriptor.shape, raw, descriptor.name)
            except FieldValueError as exc:
                issues.append(
                    ValidationIssue(
                        column=descriptor.name,
                        reason="invalid_value",
                        message=str(exc),
                        expected_type=descriptor.semantic_type.value,
                    )
                )
        if issues:
            raise RecordValidationError(form.table, issues)
        return parsed

    def _check(
        self,
        table: str,
        columns: Sequence[ColumnDescriptor],
        values: Mapping[str, Any],
        issues: List[ValidationIssue],
    ) -> Dict[str, Any]:
        normalized: Dict[str, Any] = {}
        try:
            normalized = self.validator.validate(table, values, columns)
        except RecordValidationError as exc:
            issues.extend(exc.issues)
        if issues:
            raise RecordValidationError(table, issues)
        return normalized

    def insert(self, table: str, values: Mapping[str, Any]) -> Any:
        """
        Validate and insert a new row; returns its id.

        A missing id is filled with the next free id.
        """
        columns = self.catalog.get_schema(table)
        id_column = self.identity.get_id_column(table)
        candidate = dict(values)
        if _get(candidate, id_column) is None:
            candidate = {k: v for k, v in candidate.items() if k.casefold() != id_column.casefold()}
            candidate[id_column] = self.identity.get_next_id(table, id_column)
            log.debug("Next id assigned", extra={"table": table, "id": candidate[id_column]})

        issues = check_required(columns, candidate)
        normalized = self._check(table, columns, candidate, issues)
        self.store.insert(table, normalized)
        return _get(normalized, id_column)

    def update(self, table: str, values: Mapping[str, Any]) -> bool:
        """
        Validate and update the row identified by the id in `values`.

        Returns False when no row has that id.
        """
        columns = self.catalog.get_schema(table)
        id_column = self.identity.get_id_column(table)
        issues = check_required(columns, values, partial=True)
        issues.extend(negative_integer_issues(columns, values))
        normalized = self._check(table, columns, values, issues)
        return self.store.update(table, normalized, id_column)

    def delete(self, table: str, record_id: Any) -> bool:
        return self.store.delete(table, self.identity.get_id_column(table), record_id)


__all__ = ["RecordEditor", "negative_integer_issues"]
