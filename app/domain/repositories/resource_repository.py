"""
Resource Repository Interface.
Defines specific data access operations for Resources.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from app.domain.repositories.base import BaseRepository
from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.schemas.query import ListQuery

RESOURCE_SORT_COLUMNS = ["resourceName", "reservationCount"]


class ResourceRepository(BaseRepository[Resource]):
    """Interface for Resource-specific operations."""

    def get_for_update(self, id: str) -> Optional[Resource]:
        """Get a resource and lock its row until the transaction ends."""
        ...

    def get_with_count(self, id: str) -> Optional[Tuple[Resource, int]]:
        """Get a resource with its owner and reservation count."""
        ...

    def get_upcoming_reservations(self, id: str, now: datetime, limit: int = 100) -> List[Reservation]:
        """Get reservations of a resource that have not ended, by start time."""
        ...

    def list_page(self, query: ListQuery) -> Tuple[List[Tuple[Resource, int]], int]:
        """Get one page of (resource, reservation count) rows and the total match count."""
        ...
