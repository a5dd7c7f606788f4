"""
Global pytest fixtures for the Alias Platform test suite.

Responsibilities:
    - Provide isolated in-memory and SQLite storage fixtures for direct testing
    - Provide LinkManager / AccountManager fixtures wired to the in-memory storage
    - Provide a fresh FastAPI TestClient via the app factory for integration tests

Password hashing uses a cheap pbkdf2 setting here; the production default
(scrypt) is exercised explicitly in tests/unit/test_passwords.py.
"""

import os

# main.py builds a module-level app on import; keep it off the filesystem.
os.environ.setdefault("ALIAS_STORAGE_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from main import create_app
from alias_platform.manager.account_manager import AccountManager
from alias_platform.manager.link_manager import LinkManager
from alias_platform.security.passwords import PasswordHasher
from alias_platform.storage.sqlite_storage import SQLiteStorage
from alias_platform.storage.storage import Storage

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(method=FAST_HASH_METHOD)


@pytest.fixture
def storage(hasher: PasswordHasher) -> Storage:
    """Fresh in-memory Storage backend."""
    return Storage(hasher=hasher)


@pytest.fixture
def sqlite_storage(tmp_path, hasher: PasswordHasher) -> SQLiteStorage:
    """SQLite backend on a throwaway file under tmp_path."""
    return SQLiteStorage(str(tmp_path / "storage.db"), hasher=hasher)


@pytest.fixture
def link_manager(storage: Storage) -> LinkManager:
    return LinkManager(storage)


@pytest.fixture
def account_manager(storage: Storage) -> AccountManager:
    return AccountManager(storage, storage)


@pytest.fixture
def client(storage: Storage) -> TestClient:
    """
    Provide a fresh TestClient with a new app instance.

    Notes:
        - Uses the app factory with the in-memory storage fixture, so each test
          starts from empty tables and can inspect the storage directly.
    """
    return TestClient(create_app(storage=storage))
