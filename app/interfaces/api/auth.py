"""Auth API routes — login, register, logout."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from app.application.services.auth_service import login, register
from app.domain.identity import IdentityProvider
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from app.interfaces.api.deps import get_auth_context
from app.interfaces.deps import get_identity_provider, get_user_repository

router = APIRouter(prefix="/v1", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login_user(body: LoginRequest, identity: IdentityProvider = Depends(get_identity_provider)):
    return login(body, identity)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(
    body: RegisterRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    user_repo: UserRepository = Depends(get_user_repository),
):
    username = register(body, identity, user_repo)
    return {"message": f"User {username} created successfully", "username": username}


@router.get("/logout", dependencies=[Depends(get_auth_context)])
def logout(identity: IdentityProvider = Depends(get_identity_provider)):
    """End the identity provider session and return to the frontend."""
    return RedirectResponse(identity.logout_url(), status_code=status.HTTP_302_FOUND)
