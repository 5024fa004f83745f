"""Resources API routes — list, detail, create, update, delete."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from app.application.services.resource_service import (
    create_resource,
    delete_resource,
    get_resource,
    list_resources,
    update_resource,
)
from app.domain.repositories.resource_repository import ResourceRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.query import Page
from app.domain.schemas.resource import ResourceDetail, ResourceInput, ResourceRead
from app.interfaces.api.deps import get_auth_context
from app.interfaces.deps import (
    get_local_timezone,
    get_raw_query,
    get_resource_repository,
    get_user_repository,
)

router = APIRouter(prefix="/v1/resources", tags=["Resources"])


@router.get("", response_model=Page[ResourceRead])
def list_all(
    params: Dict[str, Any] = Depends(get_raw_query),
    tz=Depends(get_local_timezone),
    repo: ResourceRepository = Depends(get_resource_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    """List resources.

    Filters: `resourceID`, `resource` (name contains), `description`
    (contains), `userID` (owner), `user` (owner name contains).
    Sorting: `col` in `resourceName`, `reservationCount`; `dir` in `asc`, `desc`.
    Paging: `size`, `page`.
    """
    return list_resources(params, repo, tz)


@router.post("", response_model=ResourceRead, status_code=status.HTTP_201_CREATED)
def create(
    body: ResourceInput,
    repo: ResourceRepository = Depends(get_resource_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    return create_resource(auth, body, repo, user_repo)


@router.get("/{resource_id}", response_model=ResourceDetail)
def detail(
    resource_id: str,
    repo: ResourceRepository = Depends(get_resource_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    return get_resource(resource_id, repo)


@router.patch("/{resource_id}", response_model=ResourceRead)
def update(
    resource_id: str,
    body: ResourceInput,
    repo: ResourceRepository = Depends(get_resource_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    return update_resource(resource_id, auth, body, repo)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(
    resource_id: str,
    repo: ResourceRepository = Depends(get_resource_repository),
    auth: AuthContext = Depends(get_auth_context),
):
    delete_resource(resource_id, auth, repo)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
