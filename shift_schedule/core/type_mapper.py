"""
Mapping between storage engine column types and application value types.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from shift_schedule.domain.models import SemanticType, StorageType

_TYPE_NAMES: Dict[str, StorageType] = {
    "COUNTER": StorageType.INTEGER,
    "AUTOINCREMENT": StorageType.INTEGER,
    "INTEGER": StorageType.INTEGER,
    "INT": StorageType.INTEGER,
    "LONG": StorageType.INTEGER,
    "SMALLINT": StorageType.INTEGER,
    "BYTE": StorageType.INTEGER,
    "TINYINT": StorageType.INTEGER,
    "BIGINT": StorageType.INTEGER,
    "DECIMAL": StorageType.DECIMAL,
    "NUMERIC": StorageType.DECIMAL,
    "DOUBLE": StorageType.DECIMAL,
    "REAL": StorageType.DECIMAL,
    "FLOAT": StorageType.DECIMAL,
    "SINGLE": StorageType.DECIMAL,
    "CURRENCY": StorageType.CURRENCY,
    "MONEY": StorageType.CURRENCY,
    "DATETIME": StorageType.DATETIME,
    "DATE": StorageType.DATETIME,
    "TIMESTAMP": StorageType.DATETIME,
    "BIT": StorageType.BOOLEAN,
    "BOOLEAN": StorageType.BOOLEAN,
    "YESNO": StorageType.BOOLEAN,
}

_SEMANTIC_BY_STORAGE: Dict[StorageType, SemanticType] = {
    StorageType.INTEGER: SemanticType.INTEGER,
    StorageType.DECIMAL: SemanticType.DECIMAL,
    StorageType.CURRENCY: SemanticType.DECIMAL,
    StorageType.DATETIME: SemanticType.TIMESTAMP,
    StorageType.BOOLEAN: SemanticType.BOOLEAN,
}

_STORAGE_BY_SEMANTIC: Dict[SemanticType, StorageType] = {
    SemanticType.INTEGER: StorageType.INTEGER,
    SemanticType.DECIMAL: StorageType.DECIMAL,
    SemanticType.TIMESTAMP: StorageType.DATETIME,
    SemanticType.BOOLEAN: StorageType.BOOLEAN,
    SemanticType.TEXT: StorageType.OTHER,
}

_NATIVE_TYPES: Dict[SemanticType, type] = {
    SemanticType.INTEGER: int,
    SemanticType.DECIMAL: Decimal,
    SemanticType.BOOLEAN: bool,
    SemanticType.TIMESTAMP: datetime,
    SemanticType.TEXT: str,
}


def classify_storage_type(type_name: str) -> StorageType:
    """
    Classify an engine type name such as "COUNTER" or "DECIMAL(10,2)".

    Only the leading word is significant; unknown names fall back to OTHER.
    """
    match = re.match(r"\s*([A-Za-z]+)", type_name or "")
    if match is None:
        return StorageType.OTHER
    return _TYPE_NAMES.get(match.group(1).upper(), StorageType.OTHER)


def to_semantic(storage_type: StorageType) -> SemanticType:
    """Semantic type of a storage type; anything unrecognised is Text."""
    return _SEMANTIC_BY_STORAGE.get(storage_type, SemanticType.TEXT)


def to_storage(semantic_type: SemanticType) -> StorageType:
    """Canonical storage type for a semantic type."""
    return _STORAGE_BY_SEMANTIC[semantic_type]


def native_type(semantic_type: SemanticType) -> type:
    """Python type a value of `semantic_type` must have."""
    return _NATIVE_TYPES[semantic_type]


def describe_value_type(value: Any) -> str:
    """Name of a candidate value's runtime type, for error messages."""
    if value is None:
        return "null"
    for semantic, native in _NATIVE_TYPES.items():
        if type(value) is native:
            return semantic.value
    return type(value).__name__


__all__ = [
    "classify_storage_type",
    "describe_value_type",
    "native_type",
    "to_semantic",
    "to_storage",
]
