"""
Integration tests for the schema catalog, identity resolver and record store.

These tests run against a real SQLite copy of the shift schedule database
created per test, and verify that:
1. The live schema is read with the right types and required flags
2. Writes are committed, or rolled back and wrapped on failure
3. Values round-trip with their Python types
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from shift_schedule.core.catalog import SchemaCatalog
from shift_schedule.core.identity import IdentityResolver
from shift_schedule.core.record_store import RecordStore
from shift_schedule.domain.models import SemanticType
from shift_schedule.domain.overrides import SchemaOverrides
from shift_schedule.errors import MissingRecordIdError, PersistenceError, QueryError
from shift_schedule.infrastructure.db_factory import Database

DEPARTMENTS = "Подразделения"
SHIFTS = "Смены"
EXPECTED_TABLES = 7
SAMPLE_SHIFTS = 4


def _count(store: RecordStore, table: str) -> int:
    return store.scalar(f"SELECT COUNT(*) FROM [{table}]")


class TestSchemaCatalog:
    def test_list_tables_hides_engine_tables(self, database: Database) -> None:
        tables = SchemaCatalog(database).list_tables()
        assert len(tables) == EXPECTED_TABLES
        assert not [name for name in tables if name.startswith("sqlite_")]

    def test_visible_tables_exclude_credentials(self, database: Database) -> None:
        visible = SchemaCatalog(database).get_visible_tables()
        assert SHIFTS in visible
        assert "Users" not in visible
        assert "Users" not in SchemaCatalog(database, credentials_table="users").get_visible_tables()

    def test_schema_order_types_and_required_flags(self, database: Database) -> None:
        columns = SchemaCatalog(database).get_schema(SHIFTS)
        by_name = {column.name: column for column in columns}

        assert columns[0].name == "Код смены"
        assert columns[1].name == "Дата"
        assert by_name["Код смены"].required
        assert by_name["Дата"].required
        assert not by_name["Примечание"].required
        assert by_name["Дата"].semantic_type is SemanticType.TIMESTAMP
        assert by_name["Доплата"].semantic_type is SemanticType.DECIMAL
        assert by_name["Ночная смена"].semantic_type is SemanticType.BOOLEAN
        assert by_name["ID_подразделения"].semantic_type is SemanticType.INTEGER
        assert by_name["Примечание"].semantic_type is SemanticType.TEXT

    def test_unknown_table_has_no_columns(self, database: Database) -> None:
        assert SchemaCatalog(database).get_schema("Нет такой") == []

    def test_column_lookup_is_case_insensitive(self, database: Database) -> None:
        catalog = SchemaCatalog(database)
        column = catalog.get_column(DEPARTMENTS, "подразделение")
        assert column is not None and column.name == "Подразделение"
        assert catalog.is_field_required(DEPARTMENTS, "Подразделение")
        assert not catalog.is_field_required(DEPARTMENTS, "missing")


class TestIdentity:
    def test_next_id_is_idempotent(self, database: Database, overrides: SchemaOverrides) -> None:
        catalog = SchemaCatalog(database)
        resolver = IdentityResolver(catalog, RecordStore(database), overrides)
        assert resolver.get_next_id(SHIFTS) == resolver.get_next_id(SHIFTS) == SAMPLE_SHIFTS + 1

    def test_next_id_for_empty_table(self, empty_db_path: Path, overrides: SchemaOverrides) -> None:
        database = Database(empty_db_path)
        resolver = IdentityResolver(SchemaCatalog(database), RecordStore(database), overrides)
        assert resolver.get_next_id(SHIFTS) == 1

    def test_every_table_has_an_identity(self, database: Database, overrides: SchemaOverrides) -> None:
        catalog = SchemaCatalog(database)
        resolver = IdentityResolver(catalog, RecordStore(database), overrides)
        for table in catalog.list_tables():
            id_column = resolver.get_id_column(table)
            assert catalog.get_column(table, id_column) is not None


class TestRecordStore:
    def test_insert_then_read(self, database: Database) -> None:
        store = RecordStore(database)
        store.insert(DEPARTMENTS, {"ID_подразделения": 4, "Подразделение": "Цех 4"})

        result = store.query(
            "SELECT [Подразделение] FROM [Подразделения] WHERE [ID_подразделения] = ?", [4]
        )
        assert result.rows == [("Цех 4",)]
        assert _count(store, DEPARTMENTS) == 4

    def test_values_round_trip_with_types(self, database: Database) -> None:
        store = RecordStore(database)
        store.insert(
            SHIFTS,
            {
                "Код смены": 10,
                "Дата": datetime(2024, 5, 1),
                "ID_подразделения": 2,
                "Ночная смена": True,
                "Доплата": Decimal("250.50"),
            },
        )

        (row,) = store.query("SELECT * FROM [Смены] WHERE [Код смены] = ?", [10]).as_dicts()
        assert row["Дата"] == datetime(2024, 5, 1)
        assert row["Ночная смена"] is True
        assert row["Доплата"] == Decimal("250.50")
        assert row["Примечание"] is None

    def test_update_changes_only_the_target_row(self, database: Database) -> None:
        store = RecordStore(database)
        updated = store.update(
            DEPARTMENTS, {"ID_подразделения": 2, "Подразделение": "Цех 2А"}, "ID_подразделения"
        )

        assert updated is True
        labels = dict(store.read_table(DEPARTMENTS).rows)
        assert labels == {1: "Цех 1", 2: "Цех 2А", 3: "Склад"}

    def test_update_of_missing_row_returns_false(self, database: Database) -> None:
        store = RecordStore(database)
        assert not store.update(DEPARTMENTS, {"ID_подразделения": 99, "Подразделение": "x"}, "ID_подразделения")
        assert _count(store, DEPARTMENTS) == 3

    def test_update_requires_the_id_value(self, database: Database) -> None:
        store = RecordStore(database)
        with pytest.raises(MissingRecordIdError, match="ID_подразделения"):
            store.update(DEPARTMENTS, {"Подразделение": "x"}, "ID_подразделения")

    def test_update_finds_id_key_case_insensitively(self, database: Database) -> None:
        store = RecordStore(database)
        assert store.update(DEPARTMENTS, {"id_подразделения": 1, "Подразделение": "Цех 1Б"}, "ID_подразделения")

    def test_delete_removes_one_row(self, database: Database) -> None:
        store = RecordStore(database)
        assert store.delete(SHIFTS, "Код смены", 2)

        remaining = [row[0] for row in store.query("SELECT [Код смены] FROM [Смены] ORDER BY 1").rows]
        assert remaining == [1, 3, 4]
        assert not store.delete(SHIFTS, "Код смены", 2)

    def test_failed_insert_is_rolled_back(self, database: Database) -> None:
        store = RecordStore(database)
        with pytest.raises(PersistenceError, match="Failed to write to table 'Подразделения'") as excinfo:
            store.insert(DEPARTMENTS, {"ID_подразделения": 1, "Подразделение": "дубль"})

        assert excinfo.value.table == DEPARTMENTS
        assert excinfo.value.original is not None
        assert _count(store, DEPARTMENTS) == 3

    def test_foreign_key_violation_is_wrapped(self, database: Database) -> None:
        store = RecordStore(database)
        with pytest.raises(PersistenceError):
            store.insert(SHIFTS, {"Код смены": 11, "Дата": datetime(2024, 5, 1), "ID_подразделения": 42})
        assert _count(store, SHIFTS) == SAMPLE_SHIFTS

    def test_delete_of_referenced_row_is_refused(self, database: Database) -> None:
        store = RecordStore(database)
        with pytest.raises(PersistenceError):
            store.delete(DEPARTMENTS, "ID_подразделения", 1)
        assert _count(store, DEPARTMENTS) == 3

    def test_insert_without_values(self, database: Database) -> None:
        with pytest.raises(PersistenceError, match="no values supplied"):
            RecordStore(database).insert(DEPARTMENTS, {})

    def test_bad_query_raises_query_error(self, database: Database) -> None:
        with pytest.raises(QueryError):
            RecordStore(database).query("SELECT * FROM [Нет такой]")

    def test_statement_without_rows_returns_empty_result(self, database: Database) -> None:
        result = RecordStore(database).query("UPDATE [Подразделения] SET [Подразделение] = [Подразделение]")
        assert result.columns == []
        assert len(result) == 0
