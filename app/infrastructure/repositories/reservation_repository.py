"""
SQLAlchemy Implementation of Reservation Repository.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import contains_eager

from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.models.user import User
from app.domain.repositories.reservation_repository import ReservationRepository
from app.domain.schemas.query import ListQuery
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository, contains


class SQLAlchemyReservationRepository(SQLAlchemyRepository[Reservation], ReservationRepository):
    """Reservation repository implementation using SQLAlchemy."""

    def get_for_resource(self, resource_id: str, exclude_id: Optional[str] = None) -> List[Reservation]:
        query = self.db.query(Reservation).filter(Reservation.resource_id == resource_id)
        if exclude_id:
            query = query.filter(Reservation.id != exclude_id)
        return query.all()

    def _conditions(self, query: ListQuery) -> list:
        conditions = []
        if query.resource_id:
            conditions.append(Reservation.resource_id == query.resource_id)
        if query.resource_name:
            conditions.append(contains(Resource.name, query.resource_name))
        if query.user_id:
            conditions.append(Reservation.user_id == query.user_id)
        if query.user_name:
            conditions.append(contains(User.username, query.user_name))
        # Time bounds are inclusive
        if query.starts_before:
            conditions.append(Reservation.start_time <= query.starts_before)
        if query.starts_after:
            conditions.append(Reservation.start_time >= query.starts_after)
        if query.ends_before:
            conditions.append(Reservation.end_time <= query.ends_before)
        if query.ends_after:
            conditions.append(Reservation.end_time >= query.ends_after)
        return conditions

    def list_page(self, query: ListQuery) -> Tuple[List[Reservation], int]:
        """Get reservations with filtering, sorting and pagination."""
        self._begin_snapshot()
        conditions = self._conditions(query)

        total = (
            self.db.query(func.count(Reservation.id))
            .join(Reservation.resource)
            .join(Reservation.reservee)
            .filter(*conditions)
            .scalar()
        ) or 0

        sort_columns = {
            "startTime": Reservation.start_time,
            "endTime": Reservation.end_time,
        }
        sort_column = sort_columns[query.sort_col]
        ordering = sort_column.desc() if query.sort_dir == "desc" else sort_column.asc()

        reservations = (
            self.db.query(Reservation)
            .join(Reservation.resource)
            .join(Reservation.reservee)
            .options(contains_eager(Reservation.resource), contains_eager(Reservation.reservee))
            .filter(*conditions)
            .order_by(ordering, Reservation.id.asc())
            .offset(query.skip)
            .limit(query.page_size)
            .all()
        )
        return reservations, total
