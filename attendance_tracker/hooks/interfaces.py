"""Hook interfaces — abstract base classes for the swappable infrastructure.

These ABCs define the contracts between the attendance core and the
persistence/identity layer. Each one has a development implementation in
this package; a production deployment subclasses them to plug in something
else (a database table per collection, an SSO provider, etc.).

Tier 1 leaf module: imports only from abc, typing (stdlib) and
attendance_tracker.schemas (also Tier 1).

To implement a real service, subclass the relevant ABC and implement every
abstract method. Python raises TypeError at instantiation if any method is
missing.

Usage:
    from attendance_tracker.hooks.interfaces import AuthService, KeyValueStore
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from attendance_tracker.schemas import User


# ---------------------------------------------------------------------------
# Key-value persistence
# ---------------------------------------------------------------------------


class KeyValueStore(ABC):
    """Durable mapping from a string key to a JSON document.

    Every entity collection is stored as one document: an ordered list of
    flat records. The session pointer lives under its own key in the same
    store. There are no transactions and no indexes beyond the key — a write
    replaces the whole value.

    Implementations must hand out copies: mutating a value returned by
    ``get`` must never change what the store holds. Single-threaded access
    is assumed; no locking is provided.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Returns the document stored under key.

        Args:
            key: The collection or pointer name.

        Returns:
            A deserialized copy of the stored value, or None if the key is
            absent.
        """
        ...

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Replaces the document stored under key.

        The write is durable before this method returns and is never
        partially visible to a later ``get``.

        Args:
            key: The collection or pointer name.
            value: A JSON-serializable document.
        """
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Deletes key entirely. No-op if absent (idempotent).

        Args:
            key: The collection or pointer name.
        """
        ...

    @abstractmethod
    def has(self, key: str) -> bool:
        """Returns True if key is present, even when its value is empty.

        Args:
            key: The collection or pointer name.
        """
        ...

    # -- Collection helpers (shared by every implementation) ---------------

    def read(self, collection: str) -> list[dict[str, Any]]:
        """Returns the records of a collection, or [] if it was never written."""
        value = self.get(collection)
        if value is None:
            return []
        return list(value)

    def write(self, collection: str, records: Iterable[dict[str, Any]]) -> None:
        """Replaces an entire collection with records, in the given order."""
        self.put(collection, list(records))


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class AuthService(ABC):
    """Checks credentials and resolves users.

    The session layer never compares passwords itself; it asks the
    AuthService and gets a User back.
    """

    @abstractmethod
    def authenticate(self, username: str, password: str) -> User | None:
        """Returns the user matching the credentials.

        Args:
            username: Login name, compared exactly.
            password: Password, compared exactly.

        Returns:
            The first matching User, or None if nothing matches.
        """
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        """Looks up a user by their ID.

        Args:
            user_id: The opaque user identifier.

        Returns:
            The User if found, None if the user doesn't exist.
        """
        ...
