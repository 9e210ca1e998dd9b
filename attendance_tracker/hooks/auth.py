"""Plain-text auth service — AuthService over the stored users collection.

Credentials are checked by exact string equality against the ``users``
collection: no hashing, case-sensitive, first match in stored order wins.
This mirrors how the accounts are stored; swap in a real provider by
subclassing AuthService.

Tier 2 service module: imports from attendance_tracker.hooks.interfaces
(Tier 1), attendance_tracker.repository (Tier 2) and attendance_tracker.schemas
(Tier 1).

Usage:
    from attendance_tracker.hooks.auth import PlaintextAuthService

    auth = PlaintextAuthService(repo)
    user = auth.authenticate("admin", "admin123")
"""

from attendance_tracker.hooks.interfaces import AuthService
from attendance_tracker.repository import EntityRepository
from attendance_tracker.schemas import User


class PlaintextAuthService(AuthService):
    """Matches username and password exactly against stored users."""

    def __init__(self, repository: EntityRepository) -> None:
        """Initialises the auth service.

        Args:
            repository: Source of the users collection. Users are re-read on
                every call, so accounts added after construction are visible.
        """
        self._repo = repository

    def authenticate(self, username: str, password: str) -> User | None:
        """Returns the first user whose username and password both match.

        Args:
            username: Login name, compared exactly.
            password: Plain-text password, compared case-sensitively.

        Returns:
            The matching User, or None.
        """
        return next(
            (
                u for u in self._repo.get_users()
                if u.username == username and u.password == password
            ),
            None,
        )

    def get_user(self, user_id: str) -> User | None:
        """Returns the user with the given ID.

        Args:
            user_id: The user identifier. Empty string → None.

        Returns:
            The User, or None if no user has that id.
        """
        if not user_id:
            return None
        return self._repo.find_user(user_id)
