"""
Identity Provider Interface.
Credentials, roles and token issuance live in an external identity service;
the application only talks to it through this contract.
"""

from typing import List, Protocol

ROLES = ("admin", "user")


class IdentityProvider(Protocol):
    def authenticate(self, username: str, password: str) -> str:
        """Exchange credentials for an access token."""
        ...

    def create_identity(self, email: str, username: str, password: str) -> None:
        """Register a new identity (400 on invalid input, 409 on duplicates)."""
        ...

    def get_role(self, username: str) -> str:
        """Return "admin" or "user"."""
        ...

    def set_role(self, username: str, role: str) -> None:
        ...

    def delete_identity(self, username: str) -> None:
        ...

    def list_identities(self) -> List[dict]:
        """Return every identity as a dict with at least a "username" key."""
        ...

    def verify_token(self, token: str) -> dict:
        """Verify an access token and return its claims."""
        ...

    def logout_url(self) -> str:
        """URL that ends the provider session and redirects back to the frontend."""
        ...
