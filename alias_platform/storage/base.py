"""
Base storage interfaces for Alias Platform.

Purpose:
    Define small, stable contracts that multiple storage backends
    (in-memory, SQLite, PostgreSQL) implement without requiring changes to
    business logic. Each manager depends only on the capability it uses:
    LinkManager needs a URLStore, AccountManager a UserStore plus a
    SessionStore, so either can be tested against a fake that implements
    nothing else.

Uniqueness:
    Writes never pre-check for an existing alias, username or token. They
    insert and classify the backend's unique-constraint violation, so two
    concurrent writers of the same key cannot both succeed.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod

from ..models import AuthOutcome, Session


class URLStore(ABC):
    """Save, look up and delete alias → URL mappings."""

    @abstractmethod  # pragma: no cover
    def save_url(self, target: str, alias: str) -> int:
        """
        Insert a new mapping.

        Returns:
            int: Surrogate id of the new row.

        Raises:
            AliasConflictError: If the alias is already taken.
            StoreError: On any other backend failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_url(self, alias: str) -> str:
        """
        Return the target URL for `alias`.

        Raises:
            URLNotFoundError: If no row matches.
            StoreError: On backend failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_url(self, alias: str) -> None:
        """
        Delete the mapping for `alias`. Deleting a missing alias is not an error.

        Raises:
            StoreError: On backend failure.
        """
        raise NotImplementedError


class UserStore(ABC):
    """Create users and check their credentials."""

    @abstractmethod  # pragma: no cover
    def create_user(self, username: str, password: str) -> int:
        """
        Hash `password` and insert a new user.

        Raises:
            UsernameConflictError: If the username is taken.
            HashingError: If the password could not be hashed.
            StoreError: On any other backend failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def authenticate_user(self, username: str, password: str) -> AuthOutcome:
        """
        Check `password` against the stored hash.

        Returns:
            Authenticated(user_id) on match, AuthRejected() on mismatch.

        Raises:
            UserNotFoundError: If the username does not exist.
            StoreError: On backend failure.
        """
        raise NotImplementedError


class SessionStore(ABC):
    """Persist opaque session tokens."""

    @abstractmethod  # pragma: no cover
    def create_session(self, user_id: int, token: str) -> int:
        """
        Insert a session row.

        Raises:
            StoreError: On any failure, including a token collision.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_session(self, token: str) -> Session:
        """
        Raises:
            SessionNotFoundError: If no session has this token.
            StoreError: On backend failure.
        """
        raise NotImplementedError


class BaseStorage(URLStore, UserStore, SessionStore):
    """A full backend: every capability plus resource cleanup."""

    @abstractmethod  # pragma: no cover
    def close(self) -> None:
        """
        Release backend resources. Idempotent; every later call on the
        store raises StoreError.
        """
        raise NotImplementedError
