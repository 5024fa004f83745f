"""Reservation service — overlap-checked scheduling and reservation queries."""

from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

import structlog

from app.application.services.authorization import authorize_owner_action
from app.application.services.query_validator import validate_query
from app.application.services.resource_locks import ResourceLocks
from app.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    InvalidInputException,
)
from app.core.timeutils import as_utc, parse_iso_timestamp
from app.domain.models.reservation import Reservation
from app.domain.repositories.reservation_repository import (
    RESERVATION_SORT_COLUMNS,
    ReservationRepository,
)
from app.domain.repositories.resource_repository import ResourceRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.query import Page
from app.domain.schemas.reservation import ReservationInput, ReservationRead

logger = structlog.get_logger(__name__)


def intervals_overlap(
    first_start: datetime, first_end: datetime, second_start: datetime, second_end: datetime
) -> bool:
    """Whether two [start, end) intervals share more than zero duration.

    The interval that starts later is compared against the end of the other
    one; touching intervals (one ends exactly when the next starts) do not
    overlap.
    """
    earlier_end, latter_start = first_end, second_start
    if first_start > second_start:
        earlier_end, latter_start = second_end, first_start
    return (earlier_end - latter_start).total_seconds() > 0


def validate_reservation(
    resource_repo: ResourceRepository,
    reservation_repo: ReservationRepository,
    resource_id: Optional[str],
    start_time: Any,
    end_time: Any,
    tz,
    exclude_reservation_id: Optional[str] = None,
) -> Tuple[datetime, datetime]:
    """Check a proposed reservation against its resource; return the parsed interval.

    Locks the resource row for the rest of the transaction so the caller can
    persist the reservation before any other writer re-reads the schedule.
    Timestamps without an offset are read in ``tz``.
    """
    if not resource_id:
        raise InvalidInputException("Must specify resource to reserve")

    start = parse_iso_timestamp(start_time, tz)
    end = parse_iso_timestamp(end_time, tz)
    if start is None or end is None:
        raise InvalidInputException("Both start and end times must be valid dates")
    if start >= end:
        raise InvalidInputException("Start time must be before end time")

    if resource_repo.get_for_update(resource_id) is None:
        raise EntityNotFoundException("Resource not found")

    for existing in reservation_repo.get_for_resource(resource_id, exclude_id=exclude_reservation_id):
        if intervals_overlap(start, end, as_utc(existing.start_time), as_utc(existing.end_time)):
            logger.info(
                "Overlap rejected",
                resource_id=resource_id,
                conflicting_reservation_id=existing.id,
            )
            raise ConflictException(
                f"Overlap with reservation {existing.id}",
                {"reservation_id": existing.id},
            )

    return start, end


def _get_or_404(reservation_repo: ReservationRepository, reservation_id: str) -> Reservation:
    reservation = reservation_repo.get_by_id(reservation_id)
    if reservation is None:
        raise EntityNotFoundException("Reservation not found")
    return reservation


def _authorize(auth: AuthContext, reservation: Reservation) -> None:
    authorize_owner_action(
        auth.username,
        auth.roles,
        reservation.reservee.username,
        "Reservations can only be edited by their reservee or by admins",
    )


def create_reservation(
    auth: AuthContext,
    body: ReservationInput,
    resource_repo: ResourceRepository,
    reservation_repo: ReservationRepository,
    user_repo: UserRepository,
    locks: ResourceLocks,
    tz,
) -> ReservationRead:
    """Reserve a resource for the caller."""
    with locks.hold(body.resource_id):
        try:
            start, end = validate_reservation(
                resource_repo, reservation_repo, body.resource_id, body.start_time, body.end_time, tz
            )
            reservee = user_repo.ensure(auth.username, commit=False)
            reservation = reservation_repo.create(
                {
                    "resource_id": body.resource_id,
                    "user_id": reservee.id,
                    "start_time": start,
                    "end_time": end,
                }
            )
        except Exception:
            reservation_repo.rollback()
            raise

    logger.info(
        "Reservation created",
        reservation_id=reservation.id,
        resource_id=reservation.resource_id,
        username=auth.username,
    )
    return ReservationRead.model_validate(reservation)


def update_reservation(
    reservation_id: str,
    auth: AuthContext,
    body: ReservationInput,
    resource_repo: ResourceRepository,
    reservation_repo: ReservationRepository,
    locks: ResourceLocks,
    tz,
) -> ReservationRead:
    """Move a reservation to a new interval, optionally on another resource."""
    reservation = _get_or_404(reservation_repo, reservation_id)
    _authorize(auth, reservation)

    target_resource_id = body.resource_id or reservation.resource_id
    with locks.hold(target_resource_id):
        try:
            start, end = validate_reservation(
                resource_repo,
                reservation_repo,
                target_resource_id,
                body.start_time,
                body.end_time,
                tz,
                exclude_reservation_id=reservation.id,
            )
            reservation = reservation_repo.update(
                reservation,
                {"resource_id": target_resource_id, "start_time": start, "end_time": end},
            )
        except Exception:
            reservation_repo.rollback()
            raise

    logger.info("Reservation updated", reservation_id=reservation.id, username=auth.username)
    return ReservationRead.model_validate(reservation)


def delete_reservation(
    reservation_id: str, auth: AuthContext, reservation_repo: ReservationRepository
) -> None:
    reservation = _get_or_404(reservation_repo, reservation_id)
    _authorize(auth, reservation)
    reservation_repo.delete(reservation.id)
    logger.info("Reservation deleted", reservation_id=reservation_id, username=auth.username)


def get_reservation(reservation_id: str, reservation_repo: ReservationRepository) -> ReservationRead:
    return ReservationRead.model_validate(_get_or_404(reservation_repo, reservation_id))


def list_reservations(
    params: Mapping[str, Any], reservation_repo: ReservationRepository, tz
) -> Page[ReservationRead]:
    """List reservations with filtering, sorting and pagination."""
    query = validate_query(params, RESERVATION_SORT_COLUMNS, tz)
    reservations, total = reservation_repo.list_page(query)
    items = [ReservationRead.model_validate(r) for r in reservations]
    return Page[ReservationRead].build(items, total, query)
