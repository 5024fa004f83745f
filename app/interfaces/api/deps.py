"""FastAPI dependency — bearer token authentication."""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.application.services.auth_service import authenticate_token
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.domain.identity import IdentityProvider
from app.domain.schemas.auth import AuthContext
from app.interfaces.deps import get_identity_provider

security = HTTPBearer(auto_error=False)


def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> AuthContext:
    """Verify the bearer token and return the caller's identity."""
    if credentials is None:
        raise UnauthorizedException("Missing bearer token")
    return authenticate_token(credentials.credentials, identity)


def require_admin(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Require admin role."""
    if not auth.is_admin:
        raise ForbiddenException("Only admins can access this resource")
    return auth
