import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.exceptions import (
    AppError,
    ConflictException,
    EntityNotFoundException,
    ErrorKind,
    IdentityProviderError,
    register_exception_handlers,
)


@pytest.mark.parametrize(
    "provider_status, kind, status_code",
    [
        (400, ErrorKind.VALIDATION, 400),
        (401, ErrorKind.UNAUTHENTICATED, 401),
        (404, ErrorKind.NOT_FOUND, 404),
        (409, ErrorKind.CONFLICT, 409),
        (422, ErrorKind.UNCLASSIFIED, 422),
        (502, ErrorKind.UNCLASSIFIED, 500),
    ],
)
def test_identity_provider_status_is_reflected(provider_status, kind, status_code):
    error = IdentityProviderError("failed", provider_status)

    assert error.kind is kind
    assert error.status_code == status_code


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    def missing():
        raise EntityNotFoundException("Resource not found")

    @app.get("/conflict")
    def conflict():
        raise ConflictException("Overlap with reservation r1", {"reservation_id": "r1"})

    @app.get("/unclassified")
    def unclassified():
        raise AppError("database exploded")

    @app.get("/crash")
    def crash():
        raise RuntimeError("boom")

    return TestClient(app, raise_server_exceptions=False)


def test_error_body(client):
    response = client.get("/conflict")

    assert response.status_code == 409
    assert response.json() == {
        "error": {
            "code": "ConflictException",
            "message": "Overlap with reservation r1",
            "path": "/conflict",
            "details": {"reservation_id": "r1"},
        }
    }


def test_not_found(client):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Resource not found"


def test_unclassified_errors_hide_their_message(client):
    response = client.get("/unclassified")

    assert response.status_code == 500
    assert "database exploded" not in response.text


def test_unexpected_exceptions_become_500(client):
    response = client.get("/crash")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "InternalServerError"
