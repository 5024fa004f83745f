"""Home API routes — greeting and the caller's own profile."""

from fastapi import APIRouter, Depends

from app.application.services.user_service import get_current_user_detail
from app.domain.identity import IdentityProvider
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext
from app.domain.schemas.user import UserDetail
from app.interfaces.api.deps import get_auth_context
from app.interfaces.deps import get_identity_provider, get_user_repository

router = APIRouter(tags=["Home"])


@router.get("/")
def home(auth: AuthContext = Depends(get_auth_context)):
    return {"message": f"Welcome! You are logged in as {auth.username}"}


@router.get("/v1/whoami", response_model=UserDetail)
def whoami(
    auth: AuthContext = Depends(get_auth_context),
    identity: IdentityProvider = Depends(get_identity_provider),
    user_repo: UserRepository = Depends(get_user_repository),
):
    return get_current_user_detail(auth, identity, user_repo)
