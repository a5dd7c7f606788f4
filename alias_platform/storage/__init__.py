"""
Persistence Store: contracts, backends and backend selection.
"""

from .base import BaseStorage, SessionStore, URLStore, UserStore
from .sqlite_storage import SQLiteStorage
from .storage import Storage
from .storage_factory import get_storage

__all__ = [
    "BaseStorage",
    "SessionStore",
    "URLStore",
    "UserStore",
    "SQLiteStorage",
    "Storage",
    "get_storage",
]
