"""
Drivers package for the Shift Schedule record manager.

Only the abstract contracts are re-exported here; concrete drivers are loaded
on demand by `shift_schedule.infrastructure.db_factory` so that the ODBC
stack is imported only when an Access file is actually opened.
"""

from shift_schedule.drivers.abstract import (
    AbstractDatabaseDriver,
    ColumnInfo,
    DatabaseDriver,
)

__all__ = [
    "AbstractDatabaseDriver",
    "ColumnInfo",
    "DatabaseDriver",
]
