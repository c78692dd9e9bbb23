"""
Domain models for the Shift Schedule record manager.

Everything here is transient: descriptors are rebuilt from the live schema on
every operation and discarded once the operation completes.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StorageType(str, Enum):
    """Column type as reported by the storage engine."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    CURRENCY = "currency"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    OTHER = "other"


class SemanticType(str, Enum):
    """Value type the application works with."""

    INTEGER = "Integer"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    TIMESTAMP = "Timestamp"
    TEXT = "Text"


class ColumnDescriptor(BaseModel):
    """
    A single column discovered in a table's schema.
    """

    name: str = Field(..., description="Column name, unique within the table.")
    storage_type: StorageType = Field(..., description="Engine type classification.")
    semantic_type: SemanticType = Field(..., description="Application value type.")
    required: bool = Field(False, description="True when the column disallows NULL.")
    declared_type: str = Field("", description="Raw type name reported by the engine.")

    model_config = {"frozen": True}


class TableIdentity(BaseModel):
    table_name: str
    id_column: str

    model_config = {"frozen": True}


class LookupEntry(BaseModel):
    """One selectable row of a reference table."""

    key: int
    label: str

    model_config = {"frozen": True}


class ValidationIssue(BaseModel):
    """
    A problem with one column of a candidate record.

    `reason` is one of: unknown_column, type_mismatch, missing_required,
    invalid_value, negative_value.
    """

    column: str
    reason: str
    message: str
    expected_type: Optional[str] = None
    actual_type: Optional[str] = None

    model_config = {"frozen": True}


class LookupWarning(BaseModel):
    """A reference table could not be read while building a selector."""

    column: str
    lookup_table: str
    message: str

    model_config = {"frozen": True}


__all__ = [
    "StorageType",
    "SemanticType",
    "ColumnDescriptor",
    "TableIdentity",
    "LookupEntry",
    "ValidationIssue",
    "LookupWarning",
]
