"""Reservations API routes — list, detail, create, update, delete."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from app.application.services.resource_locks import ResourceLocks
from app.application.services.reservation_service import (
    create_reservation,
    delete_reservation,
    get_reservation,
    list_reservations,
    update_reservation,
)
from app.domain.repositories.reservation_repository import ReservationRepository
from app.domain.repositories.resource_repository import ResourceRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.query import Page
from app.domain.schemas.reservation import ReservationInput, ReservationRead
from app.interfaces.api.deps import get_auth_context
from app.interfaces.deps import (
    get_local_timezone,
    get_raw_query,
    get_reservation_repository,
    get_resource_locks,
    get_resource_repository,
    get_user_repository,
)

router = APIRouter(prefix="/v1/reservations", tags=["Reservations"])


@router.get("", response_model=Page[ReservationRead])
def list_all(
    params: Dict[str, Any] = Depends(get_raw_query),
    tz=Depends(get_local_timezone),
    repo: ReservationRepository = Depends(get_reservation_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    """List reservations.

    Filters: `resourceID`, `resource` (name contains), `userID`, `user`
    (reservee name contains), and inclusive time bounds `startsBefore`,
    `startsAfter`, `endsBefore`, `endsAfter` (ISO-8601).
    Sorting: `col` in `startTime`, `endTime`; `dir` in `asc`, `desc`.
    Paging: `size`, `page`.
    """
    return list_reservations(params, repo, tz)


@router.post("", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create(
    body: ReservationInput,
    repo: ReservationRepository = Depends(get_reservation_repository),
    resource_repo: ResourceRepository = Depends(get_resource_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    locks: ResourceLocks = Depends(get_resource_locks),
    tz=Depends(get_local_timezone),
    auth: AuthContext = Depends(get_auth_context),
):
    return create_reservation(auth, body, resource_repo, repo, user_repo, locks, tz)


@router.get("/{reservation_id}", response_model=ReservationRead)
def detail(
    reservation_id: str,
    repo: ReservationRepository = Depends(get_reservation_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    return get_reservation(reservation_id, repo)


@router.patch("/{reservation_id}", response_model=ReservationRead)
def update(
    reservation_id: str,
    body: ReservationInput,
    repo: ReservationRepository = Depends(get_reservation_repository),
    resource_repo: ResourceRepository = Depends(get_resource_repository),
    locks: ResourceLocks = Depends(get_resource_locks),
    tz=Depends(get_local_timezone),
    auth: AuthContext = Depends(get_auth_context),
):
    return update_reservation(reservation_id, auth, body, resource_repo, repo, locks, tz)


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(
    reservation_id: str,
    repo: ReservationRepository = Depends(get_reservation_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    delete_reservation(reservation_id, auth, repo)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
