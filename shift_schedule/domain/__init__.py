"""
Domain package for the Shift Schedule record manager.

Exports the descriptor models and the injected table overrides.
Keep this package focused on data definitions.
"""

from shift_schedule.domain.models import (
    ColumnDescriptor,
    LookupEntry,
    LookupWarning,
    SemanticType,
    StorageType,
    TableIdentity,
    ValidationIssue,
)
from shift_schedule.domain.overrides import (
    BoundedColumn,
    ColumnRef,
    LookupBinding,
    SchemaOverrides,
    load_overrides,
    shift_schedule_overrides,
)

__all__ = [
    "ColumnDescriptor",
    "LookupEntry",
    "LookupWarning",
    "SemanticType",
    "StorageType",
    "TableIdentity",
    "ValidationIssue",
    "BoundedColumn",
    "ColumnRef",
    "LookupBinding",
    "SchemaOverrides",
    "load_overrides",
    "shift_schedule_overrides",
]
