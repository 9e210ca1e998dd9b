"""Service wiring — builds the store, repository, auth, sessions and engine.

One ``Services`` bundle per process. UI collaborators get it from
``get_services()`` and never construct stores themselves. To plug in a
different store, add a branch to ``build_store``; everything downstream
takes the KeyValueStore interface and stays unchanged.

Tier 3 orchestration module: imports from config, hooks/*, repository,
notifications and seed.

Usage:
    from attendance_tracker.services import get_services

    services = get_services()
    user = services.sessions.login("admin", "admin123")
    stats = services.repository.dashboard_stats()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from attendance_tracker.config import Settings, get_settings
from attendance_tracker.hooks.auth import PlaintextAuthService
from attendance_tracker.hooks.database import InMemoryKeyValueStore
from attendance_tracker.hooks.interfaces import AuthService, KeyValueStore
from attendance_tracker.hooks.sessions import SessionManager
from attendance_tracker.hooks.storage import JsonFileStore
from attendance_tracker.notifications import NotificationEngine
from attendance_tracker.repository import EntityRepository
from attendance_tracker.seed import seed_defaults

logger = logging.getLogger("attendance_tracker")


@dataclass(frozen=True)
class Services:
    """Everything a UI collaborator needs, wired to one store."""

    settings: Settings
    store: KeyValueStore
    repository: EntityRepository
    auth: AuthService
    sessions: SessionManager
    notifications: NotificationEngine


def configure_logging(settings: Settings) -> None:
    """Applies the configured log level to the root logger."""
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))


def build_store(settings: Settings) -> KeyValueStore:
    """Returns the KeyValueStore selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileStore(base_path=settings.data_dir)


def build_services(
    settings: Settings | None = None, *, store: KeyValueStore | None = None
) -> Services:
    """Wires a complete Services bundle and seeds the store if it is fresh.

    Args:
        settings: Configuration to use; defaults to ``get_settings()``.
        store: An existing store to wrap instead of building one from
            settings (tests pass an InMemoryKeyValueStore here).

    Returns:
        The wired Services.
    """
    settings = settings or get_settings()
    store = store if store is not None else build_store(settings)
    seed_defaults(store)

    repository = EntityRepository(store)
    auth = PlaintextAuthService(repository)
    services = Services(
        settings=settings,
        store=store,
        repository=repository,
        auth=auth,
        sessions=SessionManager(store, auth),
        notifications=NotificationEngine(
            repository,
            threshold=settings.attendance_threshold,
            window=timedelta(hours=settings.alert_window_hours),
        ),
    )
    logger.info(
        "Services ready (env=%s, storage=%s)",
        settings.app_env,
        type(store).__name__,
    )
    return services


_services: Services | None = None


def get_services() -> Services:
    """Returns the process-wide Services, building them on first call."""
    global _services
    if _services is None:
        settings = get_settings()
        configure_logging(settings)
        _services = build_services(settings)
    return _services
