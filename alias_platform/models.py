"""
Records owned by the Persistence Store, and the outcome of a credential check.

Records are immutable snapshots of a row; stores build them on read and
never hand out live references to their internal state.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

__all__ = ["URLEntry", "User", "Session", "Authenticated", "AuthRejected", "AuthOutcome"]


@dataclass(frozen=True)
class URLEntry:
    id: int
    target: str
    alias: str


@dataclass(frozen=True)
class User:
    id: int
    username: str
    password_hash: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Session:
    id: int
    user_id: int
    token: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Authenticated:
    """Password matched the stored hash for `user_id`."""
    user_id: int


@dataclass(frozen=True)
class AuthRejected:
    """User exists but the password did not match."""


AuthOutcome = Union[Authenticated, AuthRejected]
