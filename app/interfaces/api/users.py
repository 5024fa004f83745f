"""Users API routes — list and detail for everyone, roles and deletion for admins."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from app.application.services.user_service import (
    change_user_role,
    delete_user,
    get_user,
    get_user_role,
    list_users,
)
from app.domain.identity import IdentityProvider
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.query import Page
from app.domain.schemas.user import RoleRead, RoleUpdate, UserDetail, UserRead
from app.interfaces.api.deps import get_auth_context, require_admin
from app.interfaces.deps import (
    get_identity_provider,
    get_local_timezone,
    get_raw_query,
    get_user_repository,
)

router = APIRouter(prefix="/v1/users", tags=["Users"])


@router.get("", response_model=Page[UserRead])
def list_all(
    params: Dict[str, Any] = Depends(get_raw_query),
    tz=Depends(get_local_timezone),
    identity: IdentityProvider = Depends(get_identity_provider),
    repo: UserRepository = Depends(get_user_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    """List users.

    Filters: `userID`, `user` (name contains).
    Sorting: `col` in `userName`, `resourceCount`, `reservationCount`;
    `dir` in `asc`, `desc`. Paging: `size`, `page`.
    """
    return list_users(params, identity, repo, tz)


@router.get("/role/{user_id}", response_model=RoleRead)
def read_role(
    user_id: str,
    identity: IdentityProvider = Depends(get_identity_provider),
    repo: UserRepository = Depends(get_user_repository),
    admin: AuthContext = Depends(require_admin),
):
    return get_user_role(user_id, identity, repo)


@router.patch("/role/{user_id}", response_model=RoleRead)
def change_role(
    user_id: str,
    body: RoleUpdate,
    identity: IdentityProvider = Depends(get_identity_provider),
    repo: UserRepository = Depends(get_user_repository),
    admin: AuthContext = Depends(require_admin),
):
    return change_user_role(user_id, body.role, identity, repo)


@router.get("/{user_id}", response_model=UserDetail)
def detail(
    user_id: str,
    identity: IdentityProvider = Depends(get_identity_provider),
    repo: UserRepository = Depends(get_user_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    return get_user(user_id, identity, repo)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(
    user_id: str,
    identity: IdentityProvider = Depends(get_identity_provider),
    repo: UserRepository = Depends(get_user_repository),
    admin: AuthContext = Depends(require_admin),
):
    delete_user(user_id, identity, repo)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
