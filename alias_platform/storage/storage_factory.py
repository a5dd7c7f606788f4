"""
Storage factory – switch storage backend from config
====================================================

This module centralizes selection of the storage backend so the rest of the
app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the PostgreSQL backend **only if** it is selected, so psycopg is
  never loaded for sqlite/memory deployments.

Environment variables
---------------------
- ALIAS_STORAGE_BACKEND: "sqlite" (default), "memory" or "postgres"
- ALIAS_STORAGE_PATH:    database file if backend=="sqlite"
- ALIAS_DB_DSN:          DSN string if backend=="postgres"
"""

import logging
import os
from typing import Optional

from ..security.passwords import PasswordHasher
from .base import BaseStorage
from .sqlite_storage import SQLiteStorage
from .storage import Storage

log = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = "storage/storage.db"


def get_storage(backend: Optional[str] = None, hasher: Optional[PasswordHasher] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "sqlite", "memory" or "postgres". If omitted, reads ALIAS_STORAGE_BACKEND.
    hasher : PasswordHasher, optional
        Password hasher handed to the backend.
    kwargs : dict
        path="..." for sqlite, dsn="..." for postgres.

    Raises
    ------
    ValueError
        Unknown backend, or missing path/DSN.
    StoreError
        The selected backend failed to create its schema.
    """
    be = (backend or os.getenv("ALIAS_STORAGE_BACKEND", "sqlite")).strip().lower()
    log.info("selected storage backend: %r", be)

    if be == "memory":
        return Storage(hasher=hasher)

    if be == "sqlite":
        path = kwargs.get("path") or os.getenv("ALIAS_STORAGE_PATH", DEFAULT_STORAGE_PATH)
        if not path:
            raise ValueError("ALIAS_STORAGE_PATH is required for sqlite backend")
        return SQLiteStorage(path, hasher=hasher, timeout=kwargs.get("timeout"))

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("ALIAS_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env ALIAS_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from .db_storage import DBStorage
        return DBStorage(dsn=dsn, hasher=hasher)

    raise ValueError(f"Unknown storage backend: {be!r}")
