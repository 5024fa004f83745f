"""
API Dependencies.
"""

from typing import Any, Dict

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.timeutils import local_timezone
from app.infrastructure.database import get_db
from app.domain.identity import IdentityProvider
from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.models.user import User
from app.domain.repositories.resource_repository import ResourceRepository
from app.domain.repositories.reservation_repository import ReservationRepository
from app.domain.repositories.user_repository import UserRepository
from app.application.services.resource_locks import ResourceLocks
from app.infrastructure.repositories.resource_repository import SQLAlchemyResourceRepository
from app.infrastructure.repositories.reservation_repository import SQLAlchemyReservationRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_resource_repository(db: Session = Depends(get_db)) -> ResourceRepository:
    """Get resource repository instance."""
    return SQLAlchemyResourceRepository(db, Resource)


def get_reservation_repository(db: Session = Depends(get_db)) -> ReservationRepository:
    """Get reservation repository instance."""
    return SQLAlchemyReservationRepository(db, Reservation)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_resource_locks(request: Request) -> ResourceLocks:
    return request.app.state.resource_locks


def get_raw_query(request: Request) -> Dict[str, Any]:
    """Query parameters as key -> value, or key -> list of values for repeated keys."""
    params = request.query_params
    raw: Dict[str, Any] = {}
    for key in params.keys():
        values = params.getlist(key)
        raw[key] = values[0] if len(values) == 1 else values
    return raw


def get_local_timezone(request: Request):
    """Timezone for timestamps sent without an offset."""
    return local_timezone(request.app.state.settings.TIMEZONE)
