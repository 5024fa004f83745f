"""
Reservation Repository Interface.
Defines specific data access operations for Reservations.
"""

from typing import List, Optional, Tuple

from app.domain.repositories.base import BaseRepository
from app.domain.models.reservation import Reservation
from app.domain.schemas.query import ListQuery

RESERVATION_SORT_COLUMNS = ["startTime", "endTime"]


class ReservationRepository(BaseRepository[Reservation]):
    """Interface for Reservation-specific operations."""

    def get_for_resource(self, resource_id: str, exclude_id: Optional[str] = None) -> List[Reservation]:
        """Get every reservation of a resource, optionally without one of them."""
        ...

    def list_page(self, query: ListQuery) -> Tuple[List[Reservation], int]:
        """Get one page of reservations and the total match count."""
        ...
