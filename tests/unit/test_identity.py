from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from shift_schedule.core.identity import IdentityResolver
from shift_schedule.domain.models import ColumnDescriptor, SemanticType, StorageType
from shift_schedule.domain.overrides import SchemaOverrides
from shift_schedule.errors import IdentityResolutionError


def _columns(*names: str) -> List[ColumnDescriptor]:
    return [
        ColumnDescriptor(name=name, storage_type=StorageType.INTEGER, semantic_type=SemanticType.INTEGER)
        for name in names
    ]


class _FakeCatalog:
    def __init__(self, schemas: Dict[str, List[ColumnDescriptor]]) -> None:
        self.schemas = schemas

    def get_schema(self, table: str) -> List[ColumnDescriptor]:
        return self.schemas.get(table, [])


class _FakeStore:
    def __init__(self, current_max: Any) -> None:
        self.current_max = current_max
        self.queries: List[str] = []

    def scalar(self, sql: str, params: Any = (), table: Optional[str] = None) -> Any:
        self.queries.append(sql)
        return self.current_max


def _resolver(
    schemas: Dict[str, List[ColumnDescriptor]],
    current_max: Any = None,
    overrides: Optional[SchemaOverrides] = None,
) -> IdentityResolver:
    return IdentityResolver(_FakeCatalog(schemas), _FakeStore(current_max), overrides)


def test_declared_id_column_wins_over_schema() -> None:
    overrides = SchemaOverrides(id_columns={"Смены": "Код смены"})
    resolver = _resolver({"Смены": _columns("Код смены", "ID_подразделения")}, overrides=overrides)
    assert resolver.get_id_column("смены") == "Код смены"


def test_first_column_containing_id_is_used() -> None:
    resolver = _resolver({"Staff": _columns("Name", "staff_id", "OtherID")})
    assert resolver.get_id_column("Staff") == "staff_id"


def test_resolve_returns_table_identity() -> None:
    identity = _resolver({"Users": _columns("ID", "Username")}).resolve("Users")
    assert identity.table_name == "Users"
    assert identity.id_column == "ID"


def test_table_without_id_column_raises() -> None:
    resolver = _resolver({"Notes": _columns("Text", "Author")})
    with pytest.raises(IdentityResolutionError, match="Cannot determine identity column for table 'Notes'"):
        resolver.get_id_column("Notes")


@pytest.mark.parametrize(("current_max", "expected"), [(None, 1), (7, 8), (Decimal("41"), 42)])
def test_next_id(current_max: Any, expected: int) -> None:
    resolver = _resolver({"Users": _columns("ID")}, current_max=current_max)
    assert resolver.get_next_id("Users") == expected


def test_next_id_is_stable_without_writes() -> None:
    resolver = _resolver({"Users": _columns("ID")}, current_max=3)
    assert resolver.get_next_id("Users") == resolver.get_next_id("Users") == 4


def test_next_id_query_quotes_names() -> None:
    store = _FakeStore(None)
    resolver = IdentityResolver(_FakeCatalog({}), store)
    resolver.get_next_id("Начальники смен", "ID_начальника_смены")
    assert store.queries == ["SELECT MAX([ID_начальника_смены]) FROM [Начальники смен]"]
