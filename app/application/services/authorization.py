"""Authorization guard for owned entities."""

from typing import Iterable

from app.core.exceptions import ForbiddenException
from app.domain.schemas.auth import ADMIN_ROLE


def authorize_owner_action(
    acting_username: str,
    acting_roles: Iterable[str],
    owner_username: str,
    message: str = "Only the owner or an admin can change this",
) -> None:
    """Raise ForbiddenException unless the caller owns the entity or is an admin."""
    if acting_username == owner_username:
        return
    if ADMIN_ROLE in set(acting_roles):
        return
    raise ForbiddenException(message)
