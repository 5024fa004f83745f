"""
SQLAlchemy Implementation of Resource Repository.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import contains_eager, joinedload

from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.models.user import User
from app.domain.repositories.resource_repository import ResourceRepository
from app.domain.schemas.query import ListQuery
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository, contains


def reservation_count_of_resource():
    return (
        select(func.count(Reservation.id))
        .where(Reservation.resource_id == Resource.id)
        .correlate(Resource)
        .scalar_subquery()
    )


class SQLAlchemyResourceRepository(SQLAlchemyRepository[Resource], ResourceRepository):
    """Resource repository implementation using SQLAlchemy."""

    def get_for_update(self, id: str) -> Optional[Resource]:
        # SQLite ignores FOR UPDATE; writers there are serialized in-process
        return (
            self.db.query(Resource)
            .filter(Resource.id == id)
            .with_for_update()
            .first()
        )

    def get_with_count(self, id: str) -> Optional[Tuple[Resource, int]]:
        row = (
            self.db.query(Resource, reservation_count_of_resource().label("reservation_count"))
            .options(joinedload(Resource.owner))
            .filter(Resource.id == id)
            .first()
        )
        if row is None:
            return None
        return row[0], row[1]

    def get_upcoming_reservations(self, id: str, now: datetime, limit: int = 100) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .options(joinedload(Reservation.reservee))
            .filter(Reservation.resource_id == id, Reservation.end_time >= now)
            .order_by(Reservation.start_time.asc(), Reservation.id.asc())
            .limit(limit)
            .all()
        )

    def _conditions(self, query: ListQuery) -> list:
        conditions = []
        if query.resource_id:
            conditions.append(Resource.id == query.resource_id)
        if query.resource_name:
            conditions.append(contains(Resource.name, query.resource_name))
        if query.description:
            conditions.append(contains(Resource.description, query.description))
        if query.user_id:
            conditions.append(Resource.owner_id == query.user_id)
        if query.user_name:
            conditions.append(contains(User.username, query.user_name))
        return conditions

    def list_page(self, query: ListQuery) -> Tuple[List[Tuple[Resource, int]], int]:
        """Get resources with filtering, sorting and pagination."""
        self._begin_snapshot()
        conditions = self._conditions(query)

        total = (
            self.db.query(func.count(Resource.id))
            .join(Resource.owner)
            .filter(*conditions)
            .scalar()
        ) or 0

        reservation_count = reservation_count_of_resource().label("reservation_count")
        sort_columns = {
            "resourceName": Resource.name,
            "reservationCount": reservation_count,
        }
        sort_column = sort_columns[query.sort_col]
        ordering = sort_column.desc() if query.sort_dir == "desc" else sort_column.asc()

        rows = (
            self.db.query(Resource, reservation_count)
            .join(Resource.owner)
            .options(contains_eager(Resource.owner))
            .filter(*conditions)
            .order_by(ordering, Resource.id.asc())
            .offset(query.skip)
            .limit(query.page_size)
            .all()
        )
        return [(resource, count) for resource, count in rows], total
