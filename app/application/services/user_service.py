"""User service — user queries, roles and deletion backed by the identity provider."""

from typing import Any, Mapping

import structlog

from app.application.services.query_validator import validate_query
from app.core.exceptions import EntityNotFoundException, InvalidInputException
from app.core.timeutils import utc_now
from app.domain.identity import ROLES, IdentityProvider
from app.domain.models.user import User
from app.domain.repositories.user_repository import USER_SORT_COLUMNS, UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.query import Page
from app.domain.schemas.user import HeldReservation, OwnedResource, RoleRead, UserDetail, UserRead

logger = structlog.get_logger(__name__)

DETAIL_LIMIT = 100


def sync_users(identity: IdentityProvider, user_repo: UserRepository) -> int:
    """Create local records for identities the provider knows and we do not."""
    created = user_repo.ensure_many(i["username"] for i in identity.list_identities())
    if created:
        logger.info("Local users reconciled with identity provider", created=created)
    return created


def _get_or_404(user_repo: UserRepository, user_id: str) -> User:
    user = user_repo.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundException("User not found")
    return user


def _user_detail(user: User, user_repo: UserRepository) -> UserDetail:
    resource_count, reservation_count = user_repo.get_counts(user.id)
    resources = user_repo.get_owned_resources(user.id, DETAIL_LIMIT)
    reservations = user_repo.get_upcoming_reservations(user.id, utc_now(), DETAIL_LIMIT)
    return UserDetail(
        id=user.id,
        username=user.username,
        resource_count=resource_count,
        reservation_count=reservation_count,
        resources=[
            OwnedResource(
                id=resource.id,
                name=resource.name,
                description=resource.description,
                reservation_count=count,
            )
            for resource, count in resources
        ],
        reservations=[HeldReservation.model_validate(r) for r in reservations],
    )


def list_users(
    params: Mapping[str, Any], identity: IdentityProvider, user_repo: UserRepository, tz
) -> Page[UserRead]:
    """List users with filtering, sorting and pagination."""
    query = validate_query(params, USER_SORT_COLUMNS, tz)
    sync_users(identity, user_repo)
    rows, total = user_repo.list_page(query)
    items = [
        UserRead(id=user.id, username=user.username, resource_count=resources, reservation_count=reservations)
        for user, resources, reservations in rows
    ]
    return Page[UserRead].build(items, total, query)


def get_user(user_id: str, identity: IdentityProvider, user_repo: UserRepository) -> UserDetail:
    sync_users(identity, user_repo)
    return _user_detail(_get_or_404(user_repo, user_id), user_repo)


def get_current_user_detail(
    auth: AuthContext, identity: IdentityProvider, user_repo: UserRepository
) -> UserDetail:
    sync_users(identity, user_repo)
    return _user_detail(user_repo.ensure(auth.username), user_repo)


def get_user_role(user_id: str, identity: IdentityProvider, user_repo: UserRepository) -> RoleRead:
    user = _get_or_404(user_repo, user_id)
    return RoleRead(user_id=user.id, role=identity.get_role(user.username))


def change_user_role(
    user_id: str, role: Any, identity: IdentityProvider, user_repo: UserRepository
) -> RoleRead:
    user = _get_or_404(user_repo, user_id)
    if role not in ROLES:
        raise InvalidInputException("Given role invalid")
    identity.set_role(user.username, role)
    logger.info("User role changed", user_id=user.id, role=role)
    return RoleRead(user_id=user.id, role=identity.get_role(user.username))


def delete_user(user_id: str, identity: IdentityProvider, user_repo: UserRepository) -> None:
    """Delete the identity, then the local user with its resources and reservations."""
    user = _get_or_404(user_repo, user_id)
    identity.delete_identity(user.username)
    user_repo.delete(user.id)
    logger.info("User deleted", user_id=user_id, username=user.username)
