from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List

import pytest

from shift_schedule.core.validator import Validator, check_required, is_empty, validate_values
from shift_schedule.domain.models import ColumnDescriptor, SemanticType, StorageType
from shift_schedule.domain.overrides import ColumnRef, SchemaOverrides
from shift_schedule.errors import RecordValidationError

TABLE = "Длительности смен"


def _column(name: str, semantic: SemanticType, required: bool = False) -> ColumnDescriptor:
    storage = {
        SemanticType.INTEGER: StorageType.INTEGER,
        SemanticType.DECIMAL: StorageType.DECIMAL,
        SemanticType.BOOLEAN: StorageType.BOOLEAN,
        SemanticType.TIMESTAMP: StorageType.DATETIME,
        SemanticType.TEXT: StorageType.OTHER,
    }[semantic]
    return ColumnDescriptor(name=name, storage_type=storage, semantic_type=semantic, required=required)


COLUMNS: List[ColumnDescriptor] = [
    _column("ID", SemanticType.INTEGER, required=True),
    _column("Name", SemanticType.TEXT, required=True),
    _column("Rate", SemanticType.DECIMAL),
    _column("Active", SemanticType.BOOLEAN),
    _column("Created", SemanticType.TIMESTAMP),
    _column("Start", SemanticType.TIMESTAMP),
]
TIME_COLUMNS = frozenset({"start"})


class _FakeCatalog:
    def __init__(self, columns: List[ColumnDescriptor]) -> None:
        self.columns = columns
        self.calls = 0

    def get_schema(self, table: str) -> List[ColumnDescriptor]:
        self.calls += 1
        return self.columns


def test_valid_values_pass_unchanged() -> None:
    values = {
        "ID": 1,
        "Name": "Цех",
        "Rate": Decimal("1.25"),
        "Active": True,
        "Created": datetime(2024, 3, 1),
    }
    assert validate_values(TABLE, COLUMNS, values) == values


@pytest.mark.parametrize(
    ("given", "expected"),
    [(Decimal("5"), 5), (Decimal("5.5"), 6), (Decimal("4.5"), 4), (Decimal("-2.7"), -3)],
)
def test_decimal_for_integer_column_is_narrowed(given: Decimal, expected: int) -> None:
    result = validate_values(TABLE, COLUMNS, {"ID": given})
    assert result["ID"] == expected
    assert type(result["ID"]) is int


@pytest.mark.parametrize(
    ("column", "value", "actual"),
    [
        ("ID", "5", "Text"),
        ("ID", True, "Boolean"),
        ("ID", 5.0, "float"),
        ("Rate", 1.5, "float"),
        ("Rate", 2, "Integer"),
        ("Active", 1, "Integer"),
        ("Created", "2024-03-01", "Text"),
        ("Name", 42, "Integer"),
    ],
)
def test_mismatched_types_are_rejected(column: str, value, actual: str) -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate_values(TABLE, COLUMNS, {column: value})
    (issue,) = excinfo.value.issues
    assert issue.column == column
    assert issue.reason == "type_mismatch"
    assert issue.actual_type == actual


def test_unknown_column_is_reported() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate_values(TABLE, COLUMNS, {"Nope": 1})
    assert excinfo.value.issues[0].reason == "unknown_column"
    assert excinfo.value.table == TABLE


def test_all_issues_are_collected() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate_values(TABLE, COLUMNS, {"ID": "x", "Rate": 1.5, "Missing": 1, "Name": "ok"})
    assert sorted(excinfo.value.columns) == ["ID", "Missing", "Rate"]


def test_column_names_match_case_insensitively() -> None:
    result = validate_values(TABLE, COLUMNS, {"name": "Цех"})
    assert result == {"Name": "Цех"}


def test_input_mapping_is_not_mutated() -> None:
    values = {"ID": Decimal("3.0"), "Start": datetime(2024, 1, 1, 9, 15), "Rate": "  "}
    snapshot = dict(values)
    validate_values(TABLE, COLUMNS, values, TIME_COLUMNS)
    assert values == snapshot


def test_time_of_day_column_is_pinned() -> None:
    result = validate_values(TABLE, COLUMNS, {"Start": datetime(2024, 1, 1, 9, 15, 30)}, TIME_COLUMNS)
    assert result["Start"] == datetime(1999, 12, 30, 9, 15)


def test_time_of_day_column_requires_a_timestamp() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate_values(TABLE, COLUMNS, {"Start": None}, TIME_COLUMNS)
    assert excinfo.value.issues[0].expected_type == "Timestamp"


def test_blank_values_become_null_outside_text_columns() -> None:
    result = validate_values(TABLE, COLUMNS, {"Rate": "  ", "Created": None, "Name": " "})
    assert result == {"Rate": None, "Created": None, "Name": " "}


def test_non_finite_decimal_for_integer_column() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate_values(TABLE, COLUMNS, {"ID": Decimal("NaN")})
    assert excinfo.value.issues[0].reason == "invalid_value"


def test_check_required_reports_missing_and_blank() -> None:
    issues = check_required(COLUMNS, {"ID": 1, "Name": "   "})
    assert [issue.column for issue in issues] == ["Name"]

    issues = check_required(COLUMNS, {"Name": "x"})
    assert [issue.column for issue in issues] == ["ID"]
    assert issues[0].reason == "missing_required"


def test_check_required_partial_ignores_absent_columns() -> None:
    assert check_required(COLUMNS, {"Name": "x"}, partial=True) == []
    assert [i.column for i in check_required(COLUMNS, {"Name": None}, partial=True)] == ["Name"]


def test_minimum_datetime_counts_as_empty() -> None:
    assert is_empty(datetime.min)
    assert not is_empty(datetime(2024, 1, 1))
    assert not is_empty(0)


def test_validator_reads_schema_and_time_columns_from_overrides() -> None:
    catalog = _FakeCatalog(COLUMNS)
    overrides = SchemaOverrides(time_of_day_columns=[ColumnRef(table=TABLE, column="START")])
    validator = Validator(catalog, overrides)

    result = validator.validate(TABLE, {"Start": datetime(2030, 6, 1, 20, 0)})

    assert result["Start"] == datetime(1999, 12, 30, 20, 0)
    assert catalog.calls == 1


def test_validator_uses_supplied_columns() -> None:
    catalog = _FakeCatalog([])
    result = Validator(catalog).validate(TABLE, {"ID": 7}, columns=COLUMNS)
    assert result == {"ID": 7}
    assert catalog.calls == 0
