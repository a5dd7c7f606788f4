"""
SQLiteStorage – file-backed storage for Alias Platform
=====================================================

Default backend. Implements the `BaseStorage` contract against a single SQLite
database file, so the same managers and routes run unchanged on top of it.

Key Design Points
-----------------
- **Uniqueness**: `url.alias`, `users.username` and `sessions.token` are UNIQUE
  columns. Writes insert directly and translate `SQLITE_CONSTRAINT_UNIQUE`
  into the matching conflict error; there is no SELECT-then-INSERT.
- **Connections**: one short-lived connection per call, so request threads never
  share a handle. WAL journal mode lets readers proceed while a writer commits;
  concurrent writers queue on the busy timeout.
- **Foreign keys**: enabled per connection (`PRAGMA foreign_keys = ON`), so a
  session for an unknown user id is rejected by the database.

Example
-------
>>> storage = SQLiteStorage("storage/storage.db")
>>> storage.save_url("https://example.com", "abc123")
1
>>> storage.get_url("abc123")
'https://example.com'
"""

import contextlib
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import settings
from ..errors import (
    AliasConflictError,
    SessionNotFoundError,
    StoreError,
    URLNotFoundError,
    UserNotFoundError,
    UsernameConflictError,
)
from ..models import Authenticated, AuthOutcome, AuthRejected, Session
from ..security.passwords import PasswordHasher
from .base import BaseStorage

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS url (
    id INTEGER PRIMARY KEY,
    url TEXT NOT NULL,
    alias TEXT NOT NULL UNIQUE
);
CREATE INDEX IF NOT EXISTS idx_alias ON url(alias);

CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    token TEXT NOT NULL UNIQUE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users(id)
);
"""


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    name = getattr(exc, "sqlite_errorname", None)
    if name is not None:
        return name == "SQLITE_CONSTRAINT_UNIQUE"
    return str(exc).startswith("UNIQUE constraint failed")


def _parse_ts(raw) -> Optional[datetime]:
    if raw is None:
        return None
    return datetime.fromisoformat(str(raw))


class SQLiteStorage(BaseStorage):
    """SQLite implementation of the storage contract.

    Parameters
    ----------
    path : str
        Database file. Parent directories are created if missing.
    hasher : PasswordHasher, optional
        Password hasher used by create_user / authenticate_user.
    timeout : float, optional
        Seconds to wait for a locked database (ALIAS_SQLITE_TIMEOUT).

    Raises
    ------
    StoreError
        If the schema cannot be created. Callers treat this as fatal.
    """

    def __init__(self, path: str, hasher: Optional[PasswordHasher] = None, timeout: Optional[float] = None) -> None:
        if not path or path == ":memory:":
            raise ValueError("SQLiteStorage needs a database file path; use the memory backend instead")
        self.path = path
        self.hasher = hasher or PasswordHasher()
        self.timeout = settings.SQLITE_TIMEOUT if timeout is None else timeout
        self._closed = False
        self._init_schema()

    # ---- Internal helpers -------------------------------------------------

    @contextlib.contextmanager
    def _conn(self):
        """Context manager creating a sqlite3 connection."""
        if self._closed:
            raise sqlite3.ProgrammingError("storage is closed")
        con = sqlite3.connect(self.path, timeout=self.timeout)
        try:
            con.execute("PRAGMA foreign_keys = ON")
            yield con
        finally:
            con.close()

    def _init_schema(self) -> None:
        try:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            with self._conn() as con:
                con.execute("PRAGMA journal_mode = WAL")
                con.executescript(SCHEMA)
        except (OSError, sqlite3.Error) as exc:
            log.error("failed to init storage at %s: %s", self.path, exc)
            raise StoreError(f"failed to init storage: {exc}") from exc
        log.debug("sqlite storage ready at %s", self.path)

    def close(self) -> None:
        """Fold the WAL back into the database file, then refuse further calls."""
        if self._closed:
            return
        try:
            with self._conn() as con:
                con.execute("PRAGMA wal_checkpoint(TRUNCATE)")
        except sqlite3.Error as exc:
            raise StoreError(f"failed to close storage: {exc}") from exc
        finally:
            self._closed = True
        log.debug("sqlite storage closed at %s", self.path)

    # ---- URLs -------------------------------------------------------------

    def save_url(self, target: str, alias: str) -> int:
        try:
            with self._conn() as con, con:
                cur = con.execute("INSERT INTO url(url, alias) VALUES(?, ?)", (target, alias))
                return cur.lastrowid
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise AliasConflictError(f"alias {alias!r} already exists") from exc
            raise StoreError(f"failed to save url: {exc}") from exc
        except sqlite3.Error as exc:
            raise StoreError(f"failed to save url: {exc}") from exc

    def get_url(self, alias: str) -> str:
        try:
            with self._conn() as con:
                row = con.execute("SELECT url FROM url WHERE alias = ?", (alias,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"failed to get url: {exc}") from exc
        if row is None:
            raise URLNotFoundError(f"alias {alias!r} not found")
        return row[0]

    def delete_url(self, alias: str) -> None:
        try:
            with self._conn() as con, con:
                con.execute("DELETE FROM url WHERE alias = ?", (alias,))
        except sqlite3.Error as exc:
            raise StoreError(f"failed to delete url: {exc}") from exc

    # ---- Users ------------------------------------------------------------

    def create_user(self, username: str, password: str) -> int:
        password_hash = self.hasher.hash(password)
        try:
            with self._conn() as con, con:
                cur = con.execute(
                    "INSERT INTO users(username, password_hash) VALUES(?, ?)",
                    (username, password_hash),
                )
                return cur.lastrowid
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise UsernameConflictError(f"username {username!r} already exists") from exc
            raise StoreError(f"failed to create user: {exc}") from exc
        except sqlite3.Error as exc:
            raise StoreError(f"failed to create user: {exc}") from exc

    def authenticate_user(self, username: str, password: str) -> AuthOutcome:
        try:
            with self._conn() as con:
                row = con.execute(
                    "SELECT id, password_hash FROM users WHERE username = ?", (username,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"failed to authenticate user: {exc}") from exc
        if row is None:
            raise UserNotFoundError(f"user {username!r} not found")
        user_id, password_hash = row
        if self.hasher.verify(password, password_hash):
            return Authenticated(user_id=user_id)
        return AuthRejected()

    # ---- Sessions ---------------------------------------------------------

    def create_session(self, user_id: int, token: str) -> int:
        try:
            with self._conn() as con, con:
                cur = con.execute(
                    "INSERT INTO sessions (user_id, token) VALUES (?, ?)", (user_id, token)
                )
                return cur.lastrowid
        except sqlite3.Error as exc:
            raise StoreError(f"failed to create session: {exc}") from exc

    def get_session(self, token: str) -> Session:
        try:
            with self._conn() as con:
                row = con.execute(
                    "SELECT id, user_id, token, created_at FROM sessions WHERE token = ?", (token,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"failed to get session: {exc}") from exc
        if row is None:
            raise SessionNotFoundError()
        return Session(id=row[0], user_id=row[1], token=row[2], created_at=_parse_ts(row[3]))
