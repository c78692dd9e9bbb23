"""
Type validation of candidate records against the live schema.

Validation never mutates the caller's mapping. It returns a new, normalized
mapping in which:

- time-of-day columns are pinned to the fixed calendar date,
- blank strings in non-text columns become None,
- Decimal values bound for integer columns are narrowed to int
  (half-to-even), because numeric inputs commonly produce decimal-shaped
  values for integer fields.

Every problem found is collected and raised together as a
RecordValidationError so a form can highlight all offending fields at once.
Presence of required values is checked separately by `check_required`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Sequence

from shift_schedule.core.catalog import SchemaCatalog
from shift_schedule.core.time_of_day import pin_to_fixed_date
from shift_schedule.core.type_mapper import describe_value_type, native_type
from shift_schedule.domain.models import ColumnDescriptor, SemanticType, ValidationIssue
from shift_schedule.domain.overrides import SchemaOverrides
from shift_schedule.errors import RecordValidationError
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_empty(value: Any) -> bool:
    """Whether a value counts as "not filled in" for a required column."""
    return is_blank(value) or (isinstance(value, datetime) and value == datetime.min)


def _index(columns: Sequence[ColumnDescriptor]) -> Dict[str, ColumnDescriptor]:
    return {column.name.casefold(): column for column in columns}


def check_required(
    columns: Sequence[ColumnDescriptor],
    values: Mapping[str, Any],
    partial: bool = False,
) -> List[ValidationIssue]:
    """
    Issues for required columns left empty.

    With `partial=True` (updates), only columns present in `values` are
    checked; otherwise a required column missing from `values` is an issue too.
    """
    supplied = {key.casefold(): value for key, value in values.items()}
    issues: List[ValidationIssue] = []
    for column in columns:
        if not column.required:
            continue
        key = column.name.casefold()
        if key not in supplied:
            if partial:
                continue
        elif not is_empty(supplied[key]):
            continue
        issues.append(
            ValidationIssue(
                column=column.name,
                reason="missing_required",
                message=f"{column.name} is required",
                expected_type=column.semantic_type.value,
                actual_type=describe_value_type(supplied.get(key)),
            )
        )
    return issues


def _mismatch(column: str, expected: str, value: Any) -> ValidationIssue:
    actual = describe_value_type(value)
    return ValidationIssue(
        column=column,
        reason="type_mismatch",
        message=f"{column}: expected {expected}, got {actual}",
        expected_type=expected,
        actual_type=actual,
    )


def validate_values(
    table: str,
    columns: Sequence[ColumnDescriptor],
    values: Mapping[str, Any],
    time_of_day_columns: AbstractSet[str] = frozenset(),
) -> Dict[str, Any]:
    """
    Check `values` against `columns` and return the normalized mapping.

    Parameters
    ----------
    table : str
        Table name, used in the raised error.
    columns : sequence of ColumnDescriptor
        Current schema of the table.
    values : mapping
        Candidate column → value pairs.
    time_of_day_columns : set of str
        Casefolded names of columns following the fixed-date convention.

    Raises
    ------
    RecordValidationError
        With one issue per rejected column.
    """
    schema = _index(columns)
    normalized: Dict[str, Any] = {}
    issues: List[ValidationIssue] = []

    for key, value in values.items():
        column = schema.get(key.casefold())
        if column is None:
            issues.append(
                ValidationIssue(
                    column=key,
                    reason="unknown_column",
                    message=f"{key} does not exist in table {table}",
                )
            )
            continue

        name = column.name
        if name.casefold() in time_of_day_columns:
            if type(value) is datetime:
                normalized[name] = pin_to_fixed_date(value)
            else:
                issues.append(_mismatch(name, SemanticType.TIMESTAMP.value, value))
            continue

        if is_blank(value):
            normalized[name] = value if column.semantic_type is SemanticType.TEXT else None
            continue

        if column.semantic_type is SemanticType.INTEGER and type(value) is Decimal:
            if not value.is_finite():
                issues.append(
                    ValidationIssue(
                        column=name,
                        reason="invalid_value",
                        message=f"{name}: {value} is not a number",
                        expected_type=SemanticType.INTEGER.value,
                        actual_type=SemanticType.DECIMAL.value,
                    )
                )
                continue
            normalized[name] = int(value.to_integral_value(rounding=ROUND_HALF_EVEN))
            continue

        if type(value) is not native_type(column.semantic_type):
            issues.append(_mismatch(name, column.semantic_type.value, value))
            continue

        normalized[name] = value

    if issues:
        log.info(
            "Record rejected",
            extra={"table": table, "columns": [issue.column for issue in issues]},
        )
        raise RecordValidationError(table, issues)
    return normalized


class Validator:
    """
    Validates candidate records against the schema read from the database.

    Parameters
    ----------
    catalog : SchemaCatalog
        Source of the current table schema.
    overrides : SchemaOverrides, optional
        Declares which columns follow the time-of-day convention.
    """

    def __init__(self, catalog: SchemaCatalog, overrides: Optional[SchemaOverrides] = None) -> None:
        self.catalog = catalog
        self.overrides = overrides or SchemaOverrides()

    def validate(
        self,
        table: str,
        values: Mapping[str, Any],
        columns: Optional[Sequence[ColumnDescriptor]] = None,
    ) -> Dict[str, Any]:
        """Validate `values` for `table`; see `validate_values`."""
        if columns is None:
            columns = self.catalog.get_schema(table)
        return validate_values(
            table, columns, values, self.overrides.time_of_day_columns_for(table)
        )


__all__ = [
    "Validator",
    "check_required",
    "is_blank",
    "is_empty",
    "validate_values",
]
