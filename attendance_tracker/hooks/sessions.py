"""Session manager — the persisted "current user" pointer.

The logged-in user is stored as a single record under the ``currentUser``
key of the same KeyValueStore as the entity collections, so it survives a
restart just like the data does. There is exactly one session per store:
the last successful login wins, logout clears it, and nothing expires.

Views gate access by calling ``require_role``; the manager is passed to them
explicitly rather than living in module state.

Tier 2 service module: imports from attendance_tracker.hooks.interfaces
(Tier 1), attendance_tracker.repository (Tier 2) and attendance_tracker.schemas
(Tier 1).

Usage:
    from attendance_tracker.hooks.sessions import SessionManager

    sessions = SessionManager(store, auth)
    sessions.login("student1", "student123")
    sessions.require_role("student")  # the User, or None
"""

import logging

from attendance_tracker.hooks.interfaces import AuthService, KeyValueStore
from attendance_tracker.repository import CURRENT_USER
from attendance_tracker.schemas import Role, User

logger = logging.getLogger("attendance_tracker.hooks.sessions")


class SessionManager:
    """Logs users in and out and answers "who is logged in?".

    Args:
        store: Where the current-user record is persisted.
        auth: Credential checker used by ``login``.
    """

    def __init__(self, store: KeyValueStore, auth: AuthService) -> None:
        self._store = store
        self._auth = auth

    def login(self, username: str, password: str) -> User | None:
        """Checks credentials and, on success, makes that user current.

        A failed login returns None and leaves the current user unchanged.

        Args:
            username: Login name.
            password: Plain-text password.

        Returns:
            The logged-in User, or None if the credentials don't match.
        """
        user = self._auth.authenticate(username, password)
        if user is None:
            logger.info("Login failed for %r", username)
            return None
        self._store.put(CURRENT_USER, user.to_record())
        logger.info("User %s logged in as %s", user.id, user.role)
        return user

    def logout(self) -> None:
        """Clears the current user. No-op if nobody is logged in."""
        self._store.remove(CURRENT_USER)

    def get_current_user(self) -> User | None:
        """Returns the stored current user, or None if nobody is logged in."""
        raw = self._store.get(CURRENT_USER)
        if raw is None:
            return None
        return User.model_validate(raw)

    def require_role(self, role: Role) -> User | None:
        """Returns the current user only if they have the given role.

        Args:
            role: "admin", "staff" or "student".

        Returns:
            The current User when logged in with that role, None otherwise.
        """
        user = self.get_current_user()
        if user is None or user.role != role:
            return None
        return user
