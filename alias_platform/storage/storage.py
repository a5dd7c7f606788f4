"""
Storage module for Alias Platform (in-memory implementation).

Responsibilities:
    - Save alias → URL mappings, look them up, delete them
    - Create users with hashed passwords and authenticate them
    - Record session tokens

Design:
    - This is an in-memory reference implementation that satisfies the BaseStorage contract.
    - It is intentionally simple to keep unit/integration tests fast and deterministic.
    - A single lock makes every write an atomic check-and-insert, which is what a
      unique index gives the SQL backends. Reads take the lock too so they never
      observe a half-applied write.
    - For persistence, use SQLiteStorage or DBStorage (see storage_factory).
"""

import contextlib
import itertools
import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Set

from ..errors import (
    AliasConflictError,
    SessionNotFoundError,
    StoreError,
    URLNotFoundError,
    UserNotFoundError,
    UsernameConflictError,
)
from ..models import Authenticated, AuthOutcome, AuthRejected, Session, URLEntry, User
from ..security.passwords import PasswordHasher
from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self, hasher: Optional[PasswordHasher] = None):
        """
        Initialize empty tables.

        Internal schema:
            self.urls           = {alias: URLEntry}
            self.users          = {username: User}
            self.sessions       = {token: Session}
            self.known_user_ids = {id, ...}   (backs the sessions.user_id foreign key)
        """
        self.hasher = hasher or PasswordHasher()
        self.urls: Dict[str, URLEntry] = {}
        self.users: Dict[str, User] = {}
        self.sessions: Dict[str, Session] = {}
        self.known_user_ids: Set[int] = set()
        self._lock = threading.Lock()
        self._closed = False
        self._url_ids = itertools.count(1)
        self._user_ids = itertools.count(1)
        self._session_ids = itertools.count(1)

    @contextlib.contextmanager
    def _open(self):
        """Hold the lock for one operation; refuse to run once closed."""
        with self._lock:
            if self._closed:
                raise StoreError("storage is closed")
            yield

    def close(self) -> None:
        with self._lock:
            self._closed = True

    # ---- URLs --------------------------------------------------------------

    def save_url(self, target: str, alias: str) -> int:
        with self._open():
            if alias in self.urls:
                raise AliasConflictError(f"alias {alias!r} already exists")
            entry = URLEntry(id=next(self._url_ids), target=target, alias=alias)
            self.urls[alias] = entry
            return entry.id

    def get_url(self, alias: str) -> str:
        with self._open():
            entry = self.urls.get(alias)
        if entry is None:
            raise URLNotFoundError(f"alias {alias!r} not found")
        return entry.target

    def delete_url(self, alias: str) -> None:
        with self._open():
            self.urls.pop(alias, None)

    # ---- Users -------------------------------------------------------------

    def create_user(self, username: str, password: str) -> int:
        # Hash outside the lock
        password_hash = self.hasher.hash(password)
        with self._open():
            if username in self.users:
                raise UsernameConflictError(f"username {username!r} already exists")
            user = User(
                id=next(self._user_ids),
                username=username,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self.users[username] = user
            self.known_user_ids.add(user.id)
            return user.id

    def authenticate_user(self, username: str, password: str) -> AuthOutcome:
        with self._open():
            user = self.users.get(username)
        if user is None:
            raise UserNotFoundError(f"user {username!r} not found")
        if self.hasher.verify(password, user.password_hash):
            return Authenticated(user_id=user.id)
        return AuthRejected()

    # ---- Sessions ----------------------------------------------------------

    def create_session(self, user_id: int, token: str) -> int:
        with self._open():
            if token in self.sessions:
                raise StoreError("session token already exists")
            if user_id not in self.known_user_ids:
                raise StoreError(f"user id {user_id} does not exist")
            session = Session(
                id=next(self._session_ids),
                user_id=user_id,
                token=token,
                created_at=datetime.now(timezone.utc),
            )
            self.sessions[token] = session
            return session.id

    def get_session(self, token: str) -> Session:
        with self._open():
            session = self.sessions.get(token)
        if session is None:
            raise SessionNotFoundError()
        return session
