"""Auth service — login, registration and access token checks via the identity provider."""

import structlog

from app.core.exceptions import InvalidInputException, UnauthorizedException
from app.domain.identity import IdentityProvider
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthContext, LoginRequest, RegisterRequest, TokenResponse

logger = structlog.get_logger(__name__)


def login(body: LoginRequest, identity: IdentityProvider) -> TokenResponse:
    if not isinstance(body.username, str) or not isinstance(body.password, str):
        raise InvalidInputException("Must provide username and password")
    return TokenResponse(access_token=identity.authenticate(body.username, body.password))


def register(body: RegisterRequest, identity: IdentityProvider, user_repo: UserRepository) -> str:
    """Create the identity and its local user; return the stored username."""
    if not body.email or not body.username or not body.password:
        raise InvalidInputException("Must provide valid email, username, and password")

    identity.create_identity(body.email, body.username, body.password)
    user = user_repo.ensure(body.username)
    logger.info("User registered", username=user.username)
    return user.username


def authenticate_token(token: str, identity: IdentityProvider) -> AuthContext:
    """Verify a bearer token and build the caller's context from its claims."""
    claims = identity.verify_token(token)
    auth = AuthContext.from_claims(claims, token)
    if not auth.username:
        raise UnauthorizedException("Token has no username")
    return auth
