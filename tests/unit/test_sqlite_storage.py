"""
Unit tests for SQLiteStorage.

Covers schema creation, constraint classification (unique vs. other
integrity failures), persistence across handles and startup failure.
"""

import sqlite3
from datetime import datetime
from pathlib import Path

import pytest

from alias_platform.errors import (
    AliasConflictError,
    SessionNotFoundError,
    StoreError,
    URLNotFoundError,
    UserNotFoundError,
    UsernameConflictError,
)
from alias_platform.models import Authenticated, AuthRejected
from alias_platform.storage.sqlite_storage import SQLiteStorage


def _query(storage, sql, params=()):
    con = sqlite3.connect(storage.path)
    try:
        return con.execute(sql, params).fetchall()
    finally:
        con.close()


def test_schema_created(sqlite_storage):
    tables = {row[0] for row in _query(sqlite_storage, "SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"url", "users", "sessions"} <= tables
    indexes = {row[0] for row in _query(sqlite_storage, "SELECT name FROM sqlite_master WHERE type='index'")}
    assert "idx_alias" in indexes


def test_schema_creation_is_idempotent(sqlite_storage, hasher):
    sqlite_storage.save_url("https://example.com", "keep")
    again = SQLiteStorage(sqlite_storage.path, hasher=hasher)
    assert again.get_url("keep") == "https://example.com"


def test_parent_directory_created(tmp_path, hasher):
    path = tmp_path / "nested" / "dir" / "storage.db"
    SQLiteStorage(str(path), hasher=hasher)
    assert path.exists()


def test_init_failure_is_store_error(tmp_path, hasher):
    # A directory cannot be opened as a database file
    with pytest.raises(StoreError):
        SQLiteStorage(str(tmp_path), hasher=hasher)


@pytest.mark.parametrize("path", ["", ":memory:"])
def test_requires_file_path(path, hasher):
    with pytest.raises(ValueError):
        SQLiteStorage(path, hasher=hasher)


def test_save_get_url(sqlite_storage):
    first = sqlite_storage.save_url("https://a.example", "a1")
    second = sqlite_storage.save_url("https://b.example", "b2")
    assert (first, second) == (1, 2)
    assert sqlite_storage.get_url("a1") == "https://a.example"


def test_alias_conflict(sqlite_storage):
    sqlite_storage.save_url("https://one.example", "clash")
    with pytest.raises(AliasConflictError) as excinfo:
        sqlite_storage.save_url("https://two.example", "clash")
    assert isinstance(excinfo.value.__cause__, sqlite3.IntegrityError)
    assert sqlite_storage.get_url("clash") == "https://one.example"
    assert _query(sqlite_storage, "SELECT COUNT(*) FROM url")[0][0] == 1


def test_get_url_not_found(sqlite_storage):
    with pytest.raises(URLNotFoundError):
        sqlite_storage.get_url("missing")


def test_delete_idempotent(sqlite_storage):
    sqlite_storage.save_url("https://example.com", "bye")
    sqlite_storage.delete_url("bye")
    sqlite_storage.delete_url("bye")
    with pytest.raises(URLNotFoundError):
        sqlite_storage.get_url("bye")


def test_users(sqlite_storage):
    user_id = sqlite_storage.create_user("alice", "pw")
    stored = _query(sqlite_storage, "SELECT password_hash, created_at FROM users WHERE id = ?", (user_id,))[0]
    assert stored[0] != "pw"
    assert stored[1] is not None

    with pytest.raises(UsernameConflictError):
        sqlite_storage.create_user("alice", "other")

    assert sqlite_storage.authenticate_user("alice", "pw") == Authenticated(user_id=user_id)
    assert sqlite_storage.authenticate_user("alice", "nope") == AuthRejected()
    with pytest.raises(UserNotFoundError):
        sqlite_storage.authenticate_user("bob", "pw")


def test_sessions(sqlite_storage):
    user_id = sqlite_storage.create_user("carol", "pw")
    session_id = sqlite_storage.create_session(user_id, "0123456789abcdef")
    session = sqlite_storage.get_session("0123456789abcdef")
    assert session.id == session_id
    assert session.user_id == user_id
    assert isinstance(session.created_at, datetime)

    with pytest.raises(StoreError):
        sqlite_storage.create_session(user_id, "0123456789abcdef")
    with pytest.raises(SessionNotFoundError):
        sqlite_storage.get_session("unknown")


def test_session_foreign_key_enforced(sqlite_storage):
    with pytest.raises(StoreError):
        sqlite_storage.create_session(12345, "orphan-token-000")


def test_unreadable_database_is_store_error(sqlite_storage):
    sqlite_storage.path = sqlite_storage.path + ".missing-dir/x.db"
    with pytest.raises(StoreError):
        sqlite_storage.get_url("anything")


def test_close_checkpoints_and_rejects_later_calls(sqlite_storage, hasher):
    sqlite_storage.save_url("https://example.com/kept", "kept")
    sqlite_storage.close()
    sqlite_storage.close()

    wal = Path(sqlite_storage.path + "-wal")
    assert not wal.exists() or wal.stat().st_size == 0
    with pytest.raises(StoreError, match="closed"):
        sqlite_storage.get_url("kept")
    with pytest.raises(StoreError, match="closed"):
        sqlite_storage.create_user("late", "pw")

    # A fresh handle on the same file still sees the data
    assert SQLiteStorage(sqlite_storage.path, hasher=hasher).get_url("kept") == "https://example.com/kept"
