"""
User credentials kept in a table of the database file.

Passwords are stored as the lowercase hex SHA-256 digest of the password
followed by a fixed salt; clear text is never written.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from shift_schedule.config import Settings, get_settings
from shift_schedule.core.record_store import RecordStore
from shift_schedule.infrastructure.db_factory import Database, quote_identifier
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)

USERNAME_COLUMN = "Username"
PASSWORD_HASH_COLUMN = "PasswordHash"


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt).encode("utf-8")).hexdigest()


class CredentialStore:
    """
    Register and authenticate users.

    Parameters
    ----------
    database : Database
        Database file holding the credentials table.
    settings : Settings, optional
        Supplies the credentials table name and the salt.
    """

    def __init__(self, database: Database, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.store = RecordStore(database)
        self.table = settings.credentials_table
        self.salt = settings.password_salt

    def _password_hash(self, username: str) -> Optional[str]:
        return self.store.scalar(
            "SELECT {} FROM {} WHERE {} = ?".format(
                quote_identifier(PASSWORD_HASH_COLUMN),
                quote_identifier(self.table),
                quote_identifier(USERNAME_COLUMN),
            ),
            [username],
            table=self.table,
        )

    def user_exists(self, username: str) -> bool:
        count = self.store.scalar(
            "SELECT COUNT(*) FROM {} WHERE {} = ?".format(
                quote_identifier(self.table), quote_identifier(USERNAME_COLUMN)
            ),
            [username],
            table=self.table,
        )
        return bool(count)

    def register(self, username: str, password: str) -> bool:
        """Store a new user; returns False if the username is taken."""
        if self.user_exists(username):
            log.info("Registration refused, user exists", extra={"username": username})
            return False
        self.store.insert(
            self.table,
            {USERNAME_COLUMN: username, PASSWORD_HASH_COLUMN: hash_password(password, self.salt)},
        )
        log.info("User registered", extra={"username": username})
        return True

    def authenticate(self, username: str, password: str) -> bool:
        stored = self._password_hash(username)
        if stored is None:
            log.info("Login failed", extra={"username": username, "reason": "unknown user"})
            return False
        ok = hmac.compare_digest(str(stored), hash_password(password, self.salt))
        if not ok:
            log.info("Login failed", extra={"username": username, "reason": "bad password"})
        return ok


__all__ = ["CredentialStore", "hash_password"]
