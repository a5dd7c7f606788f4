"""
Concurrent writers racing on one unique key.

N threads are released together by a Barrier and all try to claim the same
alias (or username). The store's uniqueness constraint must let exactly one
through; every other caller sees the conflict error, never a StoreError.
"""

from concurrent.futures import ThreadPoolExecutor
import threading

import pytest

from alias_platform.errors import AliasConflictError, UsernameConflictError
from alias_platform.manager.account_manager import AccountManager
from alias_platform.manager.link_manager import LinkManager
from alias_platform.storage.sqlite_storage import SQLiteStorage
from alias_platform.storage.storage import Storage

N = 16


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path, hasher):
    if request.param == "memory":
        return Storage(hasher=hasher)
    return SQLiteStorage(str(tmp_path / "race.db"), hasher=hasher)


def _race(fn, expected_error):
    barrier = threading.Barrier(N)

    def attempt(i):
        barrier.wait()
        try:
            fn(i)
            return "ok"
        except expected_error:
            return "conflict"

    with ThreadPoolExecutor(max_workers=N) as pool:
        return list(pool.map(attempt, range(N)))


def test_parallel_save_same_alias(store):
    links = LinkManager(store)
    outcomes = _race(lambda i: links.save_url(f"https://example.com/{i}", "contested"), AliasConflictError)

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == N - 1
    assert links.resolve_url("contested").startswith("https://example.com/")


def test_parallel_save_distinct_aliases(store):
    links = LinkManager(store)
    outcomes = _race(lambda i: links.save_url(f"https://example.com/{i}", f"alias{i}"), AliasConflictError)

    assert outcomes == ["ok"] * N
    for i in range(N):
        assert links.resolve_url(f"alias{i}") == f"https://example.com/{i}"


def test_parallel_register_same_username(store):
    accounts = AccountManager(store, store)
    outcomes = _race(lambda i: accounts.register_user("racer", f"pw{i}"), UsernameConflictError)

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == N - 1
