"""Keycloak HTTP client implementing the identity provider contract.

Uses the realm's OpenID Connect endpoints for user tokens and the Admin REST
API (authenticated as the master-realm admin through admin-cli) for
registration, role mappings and deletion.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import urlencode

import httpx
from jose import JWTError, jwt

from app.config import Settings
from app.core.exceptions import IdentityProviderError, InvalidInputException, UnauthorizedException
from app.domain.identity import ROLES

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
USER_PAGE_SIZE = 100
# Refresh the admin token this long before it expires
TOKEN_EXPIRY_MARGIN = timedelta(seconds=10)


class KeycloakIdentityProvider:
    """Client for a Keycloak realm."""

    def __init__(self, settings: Settings, http: Optional[httpx.Client] = None):
        self.base_url = settings.KEYCLOAK_URL.rstrip("/")
        self.realm = settings.KEYCLOAK_REALM
        self.client_id = settings.KEYCLOAK_CLIENT
        self.client_secret = settings.KEYCLOAK_SECRET
        self.admin_username = settings.KEYCLOAK_ADMIN_USERNAME
        self.admin_password = settings.KEYCLOAK_ADMIN_PASSWORD
        self.algorithm = settings.JWT_ALGORITHM
        self.logout_redirect_url = settings.LOGOUT_REDIRECT_URL
        self.http = http or httpx.Client(timeout=settings.IDENTITY_TIMEOUT_SECONDS)
        self._public_key: Optional[str] = settings.KEYCLOAK_PUBLIC_KEY or None
        self._admin_token: Optional[str] = None
        self._admin_token_expires_at: Optional[datetime] = None

    # ── URLs ────────────────────────────────────────────────

    def _realm_url(self, realm: Optional[str] = None) -> str:
        return f"{self.base_url}/realms/{realm or self.realm}"

    def _admin_url(self, path: str = "") -> str:
        return f"{self.base_url}/admin/realms/{self.realm}{path}"

    # ── Transport ───────────────────────────────────────────

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {method} {url}: {e}")
            raise IdentityProviderError("Identity provider is unreachable", 503) from e

    def _admin_request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._get_admin_token()}"}
        return self._send(method, self._admin_url(path), headers=headers, **kwargs)

    @staticmethod
    def _unexpected(response: httpx.Response, action: str) -> IdentityProviderError:
        logger.warning(
            f"Identity provider error while trying to {action}: "
            f"{response.status_code} - {response.text[:200]}"
        )
        return IdentityProviderError(f"Identity provider failed to {action}", response.status_code)

    def _get_admin_token(self) -> str:
        now = datetime.now(timezone.utc)
        if self._admin_token and self._admin_token_expires_at and now < self._admin_token_expires_at:
            return self._admin_token

        response = self._send(
            "POST",
            f"{self._realm_url('master')}/protocol/openid-connect/token",
            data={
                "username": self.admin_username,
                "password": self.admin_password,
                "client_id": "admin-cli",
                "grant_type": "password",
            },
        )
        if response.status_code != 200:
            raise self._unexpected(response, "issue an admin token")

        body = response.json()
        self._admin_token = body["access_token"]
        expires_in = timedelta(seconds=int(body.get("expires_in", 60)))
        self._admin_token_expires_at = now + expires_in - TOKEN_EXPIRY_MARGIN
        return self._admin_token

    def _find_identity_id(self, username: str) -> str:
        response = self._admin_request(
            "GET", "/users", params={"username": username.lower(), "exact": "true"}
        )
        if response.status_code != 200:
            raise self._unexpected(response, "look up a user")
        for identity in response.json():
            if identity.get("username", "").lower() == username.lower():
                return identity["id"]
        raise IdentityProviderError("User not found", 404)

    # ── Contract ────────────────────────────────────────────

    def authenticate(self, username: str, password: str) -> str:
        response = self._send(
            "POST",
            f"{self._realm_url()}/protocol/openid-connect/token",
            data={
                "username": username.lower(),
                "password": password,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "password",
                "scope": "openid",
            },
        )
        if response.status_code == 200:
            return response.json()["access_token"]
        if response.status_code in (400, 401):
            raise IdentityProviderError("Invalid username or password", 401)
        raise self._unexpected(response, "authenticate")

    def create_identity(self, email: str, username: str, password: str) -> None:
        response = self._admin_request(
            "POST",
            "/users",
            json={
                "username": username,
                "email": email,
                "credentials": [{"type": "password", "value": password, "temporary": False}],
                "enabled": True,
            },
        )
        if response.status_code == 201:
            logger.info(f"Identity {username.lower()} created")
            return
        if response.status_code == 400:
            raise IdentityProviderError("Must provide valid email, username, and password", 400)
        if response.status_code == 409:
            raise IdentityProviderError("User with same name or email already exists", 409)
        raise self._unexpected(response, "create a user")

    def get_role(self, username: str) -> str:
        identity_id = self._find_identity_id(username)
        response = self._admin_request("GET", f"/users/{identity_id}/role-mappings/realm")
        if response.status_code != 200:
            raise self._unexpected(response, "read role mappings")
        names = {role.get("name") for role in response.json()}
        return ADMIN_ROLE if ADMIN_ROLE in names else "user"

    def set_role(self, username: str, role: str) -> None:
        if role not in ROLES:
            raise InvalidInputException("Given role invalid")
        identity_id = self._find_identity_id(username)

        role_response = self._admin_request("GET", f"/roles/{ADMIN_ROLE}")
        if role_response.status_code != 200:
            raise self._unexpected(role_response, "read the admin role")
        admin_role = role_response.json()
        mapping = [{"id": admin_role["id"], "name": admin_role["name"]}]

        method = "POST" if role == ADMIN_ROLE else "DELETE"
        response = self._admin_request(
            method, f"/users/{identity_id}/role-mappings/realm", json=mapping
        )
        if response.status_code not in (200, 204):
            raise self._unexpected(response, "change a role")
        logger.info(f"Role of {username} set to {role}")

    def delete_identity(self, username: str) -> None:
        identity_id = self._find_identity_id(username)
        response = self._admin_request("DELETE", f"/users/{identity_id}")
        if response.status_code not in (200, 204):
            raise self._unexpected(response, "delete a user")
        logger.info(f"Identity {username} deleted")

    def list_identities(self) -> List[dict]:
        identities: List[dict] = []
        first = 0
        while True:
            response = self._admin_request(
                "GET",
                "/users",
                params={"first": first, "max": USER_PAGE_SIZE, "briefRepresentation": "true"},
            )
            if response.status_code != 200:
                raise self._unexpected(response, "list users")
            batch = response.json()
            identities.extend({"id": u.get("id"), "username": u["username"]} for u in batch)
            if len(batch) < USER_PAGE_SIZE:
                return identities
            first += USER_PAGE_SIZE

    def _get_public_key(self) -> str:
        if self._public_key is None:
            response = self._send("GET", self._realm_url())
            if response.status_code != 200:
                raise self._unexpected(response, "read the realm public key")
            key = response.json()["public_key"]
            self._public_key = f"-----BEGIN PUBLIC KEY-----\n{key}\n-----END PUBLIC KEY-----"
        return self._public_key

    def verify_token(self, token: str) -> dict:
        try:
            return jwt.decode(
                token,
                self._get_public_key(),
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            raise UnauthorizedException("Token invalid or expired") from e

    def logout_url(self) -> str:
        query = urlencode(
            {"post_logout_redirect_uri": self.logout_redirect_url, "client_id": self.client_id}
        )
        return f"{self._realm_url()}/protocol/openid-connect/logout?{query}"

    def close(self) -> None:
        self.http.close()
