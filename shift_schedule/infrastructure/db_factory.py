"""
Database connection factory utilities for the Shift Schedule record manager.

Every public operation opens its own short-lived connection and closes it on
every exit path; there is no pool and nothing is shared between operations.
The driver for a database file is picked from the configured engine name or,
failing that, from the file suffix.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple, Type

from shift_schedule.config import Settings, get_settings
from shift_schedule.drivers.abstract import DatabaseDriver
from shift_schedule.errors import (
    ConnectivityError,
    DatabaseNotFoundError,
    UnsupportedDatabaseError,
)
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)


def _access_driver() -> DatabaseDriver:
    from shift_schedule.drivers.access import AccessDriver

    return AccessDriver()


def _sqlite_driver() -> DatabaseDriver:
    from shift_schedule.drivers.sqlite import SqliteDriver

    return SqliteDriver()


# Suffixes are listed here rather than read from the driver classes so that
# choosing a driver never imports another driver's dependencies.
_DRIVERS: Dict[str, Tuple[Tuple[str, ...], Callable[[], DatabaseDriver]]] = {
    "access": ((".mdb", ".accdb"), _access_driver),
    "sqlite": ((".db", ".sqlite", ".sqlite3"), _sqlite_driver),
}


def available_engines() -> List[str]:
    """List available engine names."""
    return sorted(_DRIVERS.keys())


def get_driver(engine: str) -> DatabaseDriver:
    """Instantiate the driver registered under `engine`."""
    key = engine.lower()
    if key not in _DRIVERS:
        raise UnsupportedDatabaseError(
            f"Unknown database engine '{engine}'. Available: {', '.join(available_engines())}"
        )
    _, factory = _DRIVERS[key]
    return factory()


def detect_engine(db_path: Path) -> str:
    """Pick an engine name from the database file suffix."""
    suffix = db_path.suffix.lower()
    for engine, (suffixes, _) in _DRIVERS.items():
        if suffix in suffixes:
            return engine
    raise UnsupportedDatabaseError(f"Unsupported file extension: {suffix or '<none>'}")


def quote_identifier(name: str) -> str:
    """Bracket-quote a table or column name so embedded spaces survive."""
    return "[" + name.replace("]", "]]") + "]"


class Database:
    """
    A database file plus the driver that opens it.

    Holds no connection; `connection()` opens a fresh one per call.
    """

    def __init__(self, path: Path | str, engine: Optional[str] = None) -> None:
        self.path = Path(path)
        self.engine = engine or detect_engine(self.path)
        self.driver = get_driver(self.engine)

    def __repr__(self) -> str:
        return f"Database(path={str(self.path)!r}, engine={self.engine!r})"

    @property
    def errors(self) -> Tuple[Type[BaseException], ...]:
        return self.driver.errors

    @contextmanager
    def connection(self) -> Generator[Any, None, None]:
        """
        Context manager yielding a new connection, closed on exit.

        Example
        -------
            database = Database("shifts.accdb")
            with database.connection() as conn:
                conn.cursor().execute("SELECT 1")

        Raises
        ------
        DatabaseNotFoundError
            If the database file does not exist.
        ConnectivityError
            If the driver cannot open the file.
        """
        if not self.path.exists():
            raise DatabaseNotFoundError(f"Database not found: {self.path}")
        try:
            conn = self.driver.connect(self.path)
        except self.errors as exc:
            raise ConnectivityError(f"Cannot open database {self.path}: {exc}") from exc
        log.debug("Connection opened", extra={"db_path": str(self.path), "engine": self.engine})
        try:
            yield conn
        finally:
            conn.close()
            log.debug("Connection closed", extra={"db_path": str(self.path)})


@contextmanager
def open_connection(
    db_path: Path | str, engine: Optional[str] = None
) -> Generator[Any, None, None]:
    """Open a single connection to `db_path` for the duration of the block."""
    with Database(db_path, engine).connection() as conn:
        yield conn


def get_database(settings: Optional[Settings] = None, db_path: Path | str | None = None) -> Database:
    """
    Build a Database from an explicit path or from SHIFT_DB_PATH.

    Raises
    ------
    ConnectivityError
        If neither an explicit path nor SHIFT_DB_PATH is available.
    """
    settings = settings or get_settings()
    path = db_path or settings.db_path
    if path is None:
        raise ConnectivityError("No database configured; pass --db or set SHIFT_DB_PATH")
    return Database(path, settings.db_engine)


__all__ = [
    "Database",
    "available_engines",
    "detect_engine",
    "get_database",
    "get_driver",
    "open_connection",
    "quote_identifier",
]
