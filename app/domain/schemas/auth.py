"""Pydantic schemas for authentication and the authenticated caller."""

from typing import FrozenSet, Optional

from pydantic import BaseModel

ADMIN_ROLE = "admin"


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthContext(BaseModel):
    """Identity of the caller, taken from a verified access token."""

    username: str
    roles: FrozenSet[str] = frozenset()
    token: str

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    @classmethod
    def from_claims(cls, claims: dict, token: str) -> "AuthContext":
        realm_access = claims.get("realm_access") or {}
        return cls(
            username=str(claims.get("preferred_username") or "").lower(),
            roles=frozenset(realm_access.get("roles") or []),
            token=token,
        )
