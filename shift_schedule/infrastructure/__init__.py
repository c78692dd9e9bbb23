"""
Infrastructure package for the Shift Schedule record manager.

Centralizes database connectivity concerns (driver selection, scoped
connections). Keep this layer focused on I/O and resource management,
decoupled from schema and validation logic.
"""

from shift_schedule.infrastructure.db_factory import (
    Database,
    available_engines,
    detect_engine,
    get_database,
    get_driver,
    open_connection,
    quote_identifier,
)

__all__ = [
    "Database",
    "available_engines",
    "detect_engine",
    "get_database",
    "get_driver",
    "open_connection",
    "quote_identifier",
]
