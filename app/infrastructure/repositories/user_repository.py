"""
SQLAlchemy Implementation of User Repository.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.query import ListQuery
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository, contains
from app.infrastructure.repositories.resource_repository import reservation_count_of_resource


def resource_count_of_user():
    return (
        select(func.count(Resource.id))
        .where(Resource.owner_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def reservation_count_of_user():
    return (
        select(func.count(Reservation.id))
        .where(Reservation.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username.lower()).first()

    def ensure(self, username: str, commit: bool = True) -> User:
        username = username.lower()
        user = self.get_by_username(username)
        if user is None:
            try:
                # Savepoint: a concurrent insert of the same name only undoes this one
                with self.db.begin_nested():
                    user = User(username=username)
                    self.db.add(user)
            except IntegrityError:
                user = self.get_by_username(username)
        if commit:
            self.db.commit()
        return user

    def ensure_many(self, usernames: Iterable[str]) -> int:
        wanted = {name.lower() for name in usernames if name}
        if not wanted:
            return 0
        known = {
            row[0] for row in self.db.query(User.username).filter(User.username.in_(wanted)).all()
        }
        missing = wanted - known
        for username in sorted(missing):
            self.ensure(username, commit=False)
        self.db.commit()
        return len(missing)

    def get_counts(self, id: str) -> Tuple[int, int]:
        row = (
            self.db.query(resource_count_of_user(), reservation_count_of_user())
            .select_from(User)
            .filter(User.id == id)
            .first()
        )
        if row is None:
            return 0, 0
        return row[0], row[1]

    def get_owned_resources(self, id: str, limit: int = 100) -> List[Tuple[Resource, int]]:
        reservation_count = reservation_count_of_resource().label("reservation_count")
        rows = (
            self.db.query(Resource, reservation_count)
            .filter(Resource.owner_id == id)
            .order_by(reservation_count.asc(), Resource.id.asc())
            .limit(limit)
            .all()
        )
        return [(resource, count) for resource, count in rows]

    def get_upcoming_reservations(self, id: str, now: datetime, limit: int = 100) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .options(joinedload(Reservation.resource))
            .filter(Reservation.user_id == id, Reservation.end_time >= now)
            .order_by(Reservation.start_time.asc(), Reservation.id.asc())
            .limit(limit)
            .all()
        )

    def _conditions(self, query: ListQuery) -> list:
        conditions = []
        if query.user_id:
            conditions.append(User.id == query.user_id)
        if query.user_name:
            conditions.append(contains(User.username, query.user_name))
        return conditions

    def list_page(self, query: ListQuery) -> Tuple[List[Tuple[User, int, int]], int]:
        """Get users with filtering, sorting and pagination."""
        self._begin_snapshot()
        conditions = self._conditions(query)

        total = self.db.query(func.count(User.id)).filter(*conditions).scalar() or 0

        resource_count = resource_count_of_user().label("resource_count")
        reservation_count = reservation_count_of_user().label("reservation_count")
        sort_columns = {
            "userName": User.username,
            "resourceCount": resource_count,
            "reservationCount": reservation_count,
        }
        sort_column = sort_columns[query.sort_col]
        ordering = sort_column.desc() if query.sort_dir == "desc" else sort_column.asc()

        rows = (
            self.db.query(User, resource_count, reservation_count)
            .filter(*conditions)
            .order_by(ordering, User.id.asc())
            .offset(query.skip)
            .limit(query.page_size)
            .all()
        )
        return [(user, resources, reservations) for user, resources, reservations in rows], total
