from __future__ import annotations

import hashlib

from shift_schedule.auth import CredentialStore, hash_password
from shift_schedule.config import Settings
from shift_schedule.core.record_store import RecordStore
from shift_schedule.infrastructure.db_factory import Database


def test_hash_is_salted_sha256_hex() -> None:
    expected = hashlib.sha256(b"secret1ShiftScheduleSalt").hexdigest()
    assert hash_password("secret1", "ShiftScheduleSalt") == expected
    assert expected == expected.lower()


def test_register_and_authenticate(database: Database) -> None:
    credentials = CredentialStore(database, Settings())

    assert not credentials.user_exists("alice")
    assert credentials.register("alice", "secret1")
    assert credentials.user_exists("alice")
    assert credentials.authenticate("alice", "secret1")
    assert not credentials.authenticate("alice", "wrong-password")
    assert not credentials.authenticate("bob", "secret1")


def test_register_refuses_existing_user(database: Database) -> None:
    credentials = CredentialStore(database, Settings())
    assert credentials.register("alice", "secret1")
    assert not credentials.register("alice", "another1")
    assert credentials.authenticate("alice", "secret1")


def test_clear_text_password_is_never_stored(database: Database) -> None:
    CredentialStore(database, Settings()).register("alice", "secret1")

    (row,) = RecordStore(database).read_table("Users").as_dicts()
    assert row["PasswordHash"] == hash_password("secret1", "ShiftScheduleSalt")
    assert "secret1" not in row["PasswordHash"]


def test_salt_comes_from_settings(database: Database) -> None:
    CredentialStore(database, Settings(password_salt="pepper")).register("alice", "secret1")

    assert not CredentialStore(database, Settings()).authenticate("alice", "secret1")
    assert CredentialStore(database, Settings(password_salt="pepper")).authenticate("alice", "secret1")
