"""
Exception hierarchy for the Shift Schedule record manager.

Storage errors are wrapped with table context at the record store boundary;
validation failures carry structured issues so a caller can point at the
offending column instead of parsing a message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from shift_schedule.domain.models import ValidationIssue


class ShiftScheduleError(Exception):
    """Base class for every error raised by this package."""


class ConnectivityError(ShiftScheduleError):
    """The storage engine could not be opened or stopped responding."""


class DatabaseNotFoundError(ConnectivityError, FileNotFoundError):
    """The database file does not exist."""


class UnsupportedDatabaseError(ShiftScheduleError, ValueError):
    """No driver is registered for the requested engine or file suffix."""


class IdentityResolutionError(ShiftScheduleError):
    """No identity column could be determined for a table."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Cannot determine identity column for table '{table}'")


class FieldValueError(ShiftScheduleError, ValueError):
    """A raw input value cannot be accepted by a field shape."""

    def __init__(self, column: str, message: str) -> None:
        self.column = column
        super().__init__(f"{column}: {message}")


class RecordValidationError(ShiftScheduleError, ValueError):
    """
    One or more columns of a candidate record were rejected.

    Attributes
    ----------
    table : str
        Target table of the submission.
    issues : list[ValidationIssue]
        Every problem found, in column order.
    """

    def __init__(self, table: str, issues: Iterable["ValidationIssue"]) -> None:
        self.table = table
        self.issues: List["ValidationIssue"] = list(issues)
        details = "; ".join(issue.message for issue in self.issues)
        super().__init__(f"Invalid record for table '{table}': {details}")

    @property
    def columns(self) -> List[str]:
        return [issue.column for issue in self.issues]


class PersistenceError(ShiftScheduleError):
    """A write against the storage engine failed and was rolled back."""

    def __init__(self, table: str, message: str, original: Optional[BaseException] = None) -> None:
        self.table = table
        self.original = original
        super().__init__(f"Failed to write to table '{table}': {message}")


class QueryError(ShiftScheduleError):
    """A read query was rejected by the storage engine."""

    def __init__(self, message: str, table: Optional[str] = None) -> None:
        self.table = table
        prefix = f"Failed to read table '{table}'" if table else "Query failed"
        super().__init__(f"{prefix}: {message}")


class MissingRecordIdError(PersistenceError):
    """An update was requested without the identity value of the row."""

    def __init__(self, table: str, id_column: str) -> None:
        self.id_column = id_column
        super().__init__(table, f"no value supplied for identity column '{id_column}'")


__all__ = [
    "ShiftScheduleError",
    "ConnectivityError",
    "DatabaseNotFoundError",
    "UnsupportedDatabaseError",
    "IdentityResolutionError",
    "FieldValueError",
    "RecordValidationError",
    "PersistenceError",
    "QueryError",
    "MissingRecordIdError",
]
