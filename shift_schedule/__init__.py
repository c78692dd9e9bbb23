"""
Shift Schedule - schema-driven record management for a shift schedule database.

This package edits any table of a small single-file database (Microsoft
Access through ODBC, or SQLite) without per-table code:

- Live schema discovery and identity resolution
- Field descriptors with lookup selectors for foreign keys
- Type validation and coercion before every write
- Transactional inserts and updates with rollback
- Fixed shift reports and user credentials

Table-specific knowledge is supplied as injected overrides rather than
hard-coded in the engine.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from shift_schedule.auth import CredentialStore
from shift_schedule.config import Settings, get_settings
from shift_schedule.core import (
    FieldDescriptor,
    FieldDescriptorBuilder,
    IdentityResolver,
    QueryResult,
    RecordForm,
    RecordStore,
    SchemaCatalog,
    Validator,
)
from shift_schedule.domain import SchemaOverrides, load_overrides, shift_schedule_overrides
from shift_schedule.editor import RecordEditor
from shift_schedule.infrastructure import Database, get_database
from shift_schedule.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Storage
    "Database",
    "get_database",
    # Core components
    "FieldDescriptor",
    "FieldDescriptorBuilder",
    "IdentityResolver",
    "QueryResult",
    "RecordForm",
    "RecordStore",
    "SchemaCatalog",
    "Validator",
    # Overrides
    "SchemaOverrides",
    "load_overrides",
    "shift_schedule_overrides",
    # Application services
    "CredentialStore",
    "RecordEditor",
    # Logging
    "configure_logging",
    "get_logger",
]
