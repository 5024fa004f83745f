"""Shared fixtures: an in-memory database and a scripted identity provider."""

from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.exceptions import ConflictException, IdentityProviderError, UnauthorizedException
from app.infrastructure.database import build_engine
from app.main import create_app


class FakeIdentityProvider:
    """Identity provider keeping identities in memory; a user's token is "token-<username>"."""

    def __init__(self):
        self.identities: Dict[str, dict] = {}
        self.passwords: Dict[str, str] = {}

    def add(self, username: str, role: str = "user", password: str = "secret") -> str:
        self.identities[username] = {"username": username, "email": f"{username}@example.com", "role": role}
        self.passwords[username] = password
        return self.token_for(username)

    @staticmethod
    def token_for(username: str) -> str:
        return f"token-{username}"

    def authenticate(self, username: str, password: str) -> str:
        if self.passwords.get(username) != password:
            raise IdentityProviderError("Invalid user credentials", 401)
        return self.token_for(username)

    def create_identity(self, email: str, username: str, password: str) -> None:
        if username in self.identities:
            raise ConflictException("User exists with same username")
        self.identities[username] = {"username": username, "email": email, "role": "user"}
        self.passwords[username] = password

    def get_role(self, username: str) -> str:
        if username not in self.identities:
            raise IdentityProviderError("User not found", 404)
        return self.identities[username]["role"]

    def set_role(self, username: str, role: str) -> None:
        self.identities[username]["role"] = role

    def delete_identity(self, username: str) -> None:
        self.identities.pop(username, None)
        self.passwords.pop(username, None)

    def list_identities(self) -> List[dict]:
        return [{"username": name} for name in self.identities]

    def verify_token(self, token: str) -> dict:
        username = token[len("token-"):] if token.startswith("token-") else None
        if username not in self.identities:
            raise UnauthorizedException("Invalid token")
        roles = ["admin"] if self.identities[username]["role"] == "admin" else []
        return {"preferred_username": username, "realm_access": {"roles": roles}}

    def logout_url(self) -> str:
        return "http://identity.test/logout?post_logout_redirect_uri=http://frontend.test"


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", ENVIRONMENT="test", LOG_LEVEL="WARNING")


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def app(settings, identity):
    return create_app(settings=settings, engine=build_engine(settings.DATABASE_URL), identity_provider=identity)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(identity):
    return bearer(identity.add("alice"))


@pytest.fixture
def bob(identity):
    return bearer(identity.add("bob"))


@pytest.fixture
def admin(identity):
    return bearer(identity.add("root", role="admin"))


@pytest.fixture
def make_resource(client):
    def _make(headers: dict, name: str = "Sauna", description: str = "Top floor") -> dict:
        response = client.post("/v1/resources", json={"name": name, "description": description}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_reservation(client):
    def _make(headers: dict, resource_id: str, start: str, end: str) -> dict:
        response = client.post(
            "/v1/reservations",
            json={"resource_id": resource_id, "start_time": start, "end_time": end},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make
