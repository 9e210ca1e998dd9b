"""Fixtures for contract tests — one parameterized fixture per hook interface.

Each fixture yields a fresh implementation instance, once per registered
implementation. To test a new implementation against the contracts, add its
param string to the params list and an elif branch that yields it, then run:

    python -m pytest attendance_tracker/tests/contracts/ -v

If any test fails, the implementation doesn't satisfy the contract — the
failing test's docstring says what's expected.
"""

import pytest

from attendance_tracker.hooks.auth import PlaintextAuthService
from attendance_tracker.hooks.database import InMemoryKeyValueStore
from attendance_tracker.hooks.storage import JsonFileStore
from attendance_tracker.repository import EntityRepository
from attendance_tracker.seed import seed_defaults


@pytest.fixture(params=["memory", "file"])
def kv_store(request, tmp_path):
    """Yields a KeyValueStore implementation.

    The file store is rooted in an isolated temp directory.
    """
    if request.param == "memory":
        yield InMemoryKeyValueStore()
    elif request.param == "file":
        yield JsonFileStore(base_path=str(tmp_path / "store"))


@pytest.fixture(params=["plaintext"])
def auth_service(request, kv_store):
    """Yields an AuthService backed by a seeded store."""
    seed_defaults(kv_store)
    if request.param == "plaintext":
        yield PlaintextAuthService(EntityRepository(kv_store))


@pytest.fixture
def sample_records():
    """Flat records using strings, booleans and string lists."""
    return [
        {"id": "1", "name": "Harshi", "subjects": ["1", "2", "3"], "active": True},
        {"id": "2", "name": "Priya Sharma", "subjects": [], "active": False},
    ]
