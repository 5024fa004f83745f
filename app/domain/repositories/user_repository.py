"""
User Repository Interface.
Defines specific data access operations for Users.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from app.domain.repositories.base import BaseRepository
from app.domain.models.user import User
from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.schemas.query import ListQuery

USER_SORT_COLUMNS = ["userName", "resourceCount", "reservationCount"]


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_username(self, username: str) -> Optional[User]:
        ...

    def ensure(self, username: str, commit: bool = True) -> User:
        """Return the user with this username, creating it if absent."""
        ...

    def ensure_many(self, usernames: Iterable[str]) -> int:
        """Create every missing user; return how many were created."""
        ...

    def get_counts(self, id: str) -> Tuple[int, int]:
        """Get (resource count, reservation count) of a user."""
        ...

    def get_owned_resources(self, id: str, limit: int = 100) -> List[Tuple[Resource, int]]:
        """Get a user's resources with reservation counts, least reserved first."""
        ...

    def get_upcoming_reservations(self, id: str, now: datetime, limit: int = 100) -> List[Reservation]:
        """Get a user's reservations that have not ended, by start time."""
        ...

    def list_page(self, query: ListQuery) -> Tuple[List[Tuple[User, int, int]], int]:
        """Get one page of (user, resource count, reservation count) rows and the total."""
        ...
