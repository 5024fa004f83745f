"""Resource service — validation, ownership checks and resource queries."""

from typing import Any, Mapping

import structlog

from app.application.services.authorization import authorize_owner_action
from app.application.services.query_validator import validate_query
from app.core.exceptions import EntityNotFoundException, InvalidInputException
from app.core.timeutils import utc_now
from app.domain.models.resource import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH, Resource
from app.domain.repositories.resource_repository import RESOURCE_SORT_COLUMNS, ResourceRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.query import Page
from app.domain.schemas.resource import (
    ResourceDetail,
    ResourceInput,
    ResourceRead,
    UpcomingReservation,
    UserSummary,
)

logger = structlog.get_logger(__name__)

UPCOMING_LIMIT = 100


def validate_resource(body: ResourceInput) -> None:
    if not body.name:
        raise InvalidInputException("Resource must have a name")
    if not NAME_MIN_LENGTH <= len(body.name) <= NAME_MAX_LENGTH:
        raise InvalidInputException(
            f"Resource name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters long"
        )
    if body.description is not None and len(body.description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidInputException(
            f"Resource description must be at most {DESCRIPTION_MAX_LENGTH} characters long"
        )


def to_resource_read(resource: Resource, reservation_count: int) -> ResourceRead:
    return ResourceRead(
        id=resource.id,
        name=resource.name,
        description=resource.description,
        owner=UserSummary.model_validate(resource.owner),
        reservation_count=reservation_count,
    )


def _get_or_404(resource_repo: ResourceRepository, resource_id: str) -> Resource:
    resource = resource_repo.get_by_id(resource_id)
    if resource is None:
        raise EntityNotFoundException("Resource not found")
    return resource


def _authorize(auth: AuthContext, resource: Resource) -> None:
    authorize_owner_action(
        auth.username,
        auth.roles,
        resource.owner.username,
        "Resources can only be edited by their owner or by admins",
    )


def create_resource(
    auth: AuthContext,
    body: ResourceInput,
    resource_repo: ResourceRepository,
    user_repo: UserRepository,
) -> ResourceRead:
    """Create a resource owned by the caller."""
    validate_resource(body)
    owner = user_repo.ensure(auth.username, commit=False)
    resource = resource_repo.create(
        {"name": body.name, "description": body.description, "owner_id": owner.id}
    )
    logger.info("Resource created", resource_id=resource.id, username=auth.username)
    return to_resource_read(resource, 0)


def update_resource(
    resource_id: str,
    auth: AuthContext,
    body: ResourceInput,
    resource_repo: ResourceRepository,
) -> ResourceRead:
    """Rename a resource; the description changes only when one is sent."""
    resource = _get_or_404(resource_repo, resource_id)
    _authorize(auth, resource)
    validate_resource(body)

    changes = {"name": body.name}
    if "description" in body.model_fields_set:
        changes["description"] = body.description
    resource_repo.update(resource, changes)

    logger.info("Resource updated", resource_id=resource.id, username=auth.username)
    resource, count = resource_repo.get_with_count(resource.id)
    return to_resource_read(resource, count)


def delete_resource(resource_id: str, auth: AuthContext, resource_repo: ResourceRepository) -> None:
    """Delete a resource together with all of its reservations."""
    resource = _get_or_404(resource_repo, resource_id)
    _authorize(auth, resource)
    resource_repo.delete(resource.id)
    logger.info("Resource deleted", resource_id=resource_id, username=auth.username)


def get_resource(resource_id: str, resource_repo: ResourceRepository) -> ResourceDetail:
    """Get a resource with its upcoming reservations."""
    row = resource_repo.get_with_count(resource_id)
    if row is None:
        raise EntityNotFoundException("Resource not found")
    resource, count = row

    upcoming = resource_repo.get_upcoming_reservations(resource_id, utc_now(), UPCOMING_LIMIT)
    return ResourceDetail(
        **to_resource_read(resource, count).model_dump(),
        reservations=[UpcomingReservation.model_validate(r) for r in upcoming],
    )


def list_resources(params: Mapping[str, Any], resource_repo: ResourceRepository, tz) -> Page[ResourceRead]:
    """List resources with filtering, sorting and pagination."""
    query = validate_query(params, RESOURCE_SORT_COLUMNS, tz)
    rows, total = resource_repo.list_page(query)
    items = [to_resource_read(resource, count) for resource, count in rows]
    return Page[ResourceRead].build(items, total, query)
