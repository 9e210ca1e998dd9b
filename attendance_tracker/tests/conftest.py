"""Shared test fixtures for the attendance tracker.

Factory-pattern fixtures that return callables accepting **overrides, plus
ready-wired stores and services.

Fixtures:
    store: Fresh, unseeded InMemoryKeyValueStore
    repo: EntityRepository over an unseeded store
    seeded_repo: EntityRepository over a store holding the bootstrap dataset
    services: Fully wired Services over a seeded in-memory store
    make_record: Factory for AttendanceRecord instances
    make_student: Factory for Student instances
    make_user: Factory for User instances
"""

from datetime import date
from uuid import uuid4

import pytest

from attendance_tracker.config import Settings
from attendance_tracker.hooks.database import InMemoryKeyValueStore
from attendance_tracker.repository import EntityRepository
from attendance_tracker.schemas import AttendanceRecord, Student, User
from attendance_tracker.seed import seed_defaults
from attendance_tracker.services import build_services


# ---------------------------------------------------------------------------
# Stores and wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def store():
    """An empty in-memory store — nothing seeded."""
    return InMemoryKeyValueStore()


@pytest.fixture
def repo(store):
    """Repository over the empty store."""
    return EntityRepository(store)


@pytest.fixture
def seeded_repo(store):
    """Repository over a store holding the bootstrap dataset."""
    seed_defaults(store)
    return EntityRepository(store)


@pytest.fixture
def test_settings():
    """Settings with in-memory storage and the default alert policy."""
    return Settings(
        app_env="test",
        log_level="debug",
        storage_backend="memory",
        data_dir="unused",
        attendance_threshold=75.0,
        alert_window_hours=24.0,
        notification_poll_seconds=30,
    )


@pytest.fixture
def services(test_settings, store):
    """Services wired to the shared store fixture (seeded on build)."""
    return build_services(test_settings, store=store)


# ---------------------------------------------------------------------------
# Entity factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_record():
    """Returns a factory for AttendanceRecord instances.

    Defaults: 2026-03-02, student "1", subject "1", present.
    """

    def _make(**overrides) -> AttendanceRecord:
        defaults = {
            "date": date(2026, 3, 2),
            "student_id": "1",
            "subject_id": "1",
            "status": "present",
        }
        defaults.update(overrides)
        return AttendanceRecord(**defaults)

    return _make


@pytest.fixture
def make_student():
    """Returns a factory for Student instances with unique ids."""

    def _make(**overrides) -> Student:
        suffix = uuid4().hex[:8]
        defaults = {
            "id": f"student-{suffix}",
            "name": f"Student {suffix}",
            "roll_number": f"R{suffix}",
            "email": f"{suffix}@example.com",
            "course_id": "1",
            "subjects": {"1"},
        }
        defaults.update(overrides)
        return Student(**defaults)

    return _make


@pytest.fixture
def make_user():
    """Returns a factory for User instances with unique ids."""

    def _make(**overrides) -> User:
        suffix = uuid4().hex[:8]
        defaults = {
            "id": f"user-{suffix}",
            "username": f"user-{suffix}",
            "password": "secret",
            "role": "student",
            "profile_id": f"student-{suffix}",
        }
        defaults.update(overrides)
        return User(**defaults)

    return _make
