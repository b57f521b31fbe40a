"""
Tests for application wiring: configuration-driven behaviour, middleware
and the health endpoint.
"""
import pytest
from fastapi.testclient import TestClient

from blog_platform.blog_service.config import Settings
from blog_platform.blog_service.db import get_db
from blog_platform.blog_service.main import create_app
from .conftest import auth_header, signup


@pytest.fixture
def strict_client():
    """App that only lets owners modify their posts."""
    with TestClient(create_app(Settings(ENFORCE_POST_OWNERSHIP=True))) as c:
        yield c


@pytest.fixture
def small_body_client():
    with TestClient(create_app(Settings(BODY_LIMIT_BYTES=64))) as c:
        yield c


def test_ownership_enforced_when_configured(strict_client):
    owner = signup(strict_client, email="owner@example.com")
    other = signup(strict_client, email="other@example.com")
    created = strict_client.post(
        "/api/v1/posts",
        headers=auth_header(owner["token"]),
        json={"title": "hello", "fullText": "world"},
    )
    post_id = created.json()["post"]["id"]

    response = strict_client.put(f"/api/v1/posts/{post_id}/publish", headers=auth_header(other["token"]))
    assert response.status_code == 500
    assert response.json()["message"] == "AuthError : NOT THE OWNER OF THE POST"

    response = strict_client.request(
        "DELETE", "/api/v1/posts", headers=auth_header(other["token"]), json={"id": post_id}
    )
    assert response.status_code == 500

    response = strict_client.put(f"/api/v1/posts/{post_id}/publish", headers=auth_header(owner["token"]))
    assert response.status_code == 200


def test_token_from_another_secret_is_forbidden(client):
    other_app = create_app(Settings(JWT_SECRET="a-completely-different-secret-value"))
    with TestClient(other_app) as other_client:
        foreign = signup(other_client)

    response = client.get("/api/v1/users", headers=auth_header(foreign["token"]))
    assert response.status_code == 403


def test_oversized_body_is_rejected(small_body_client):
    response = small_body_client.post(
        "/api/v1/users",
        json={"email": "jane@example.com", "password": "x" * 200},
    )

    assert response.status_code == 413
    assert response.json() == {"success": False, "message": "PayloadTooLargeError : request entity too large"}


def test_oversized_chunked_body_is_rejected(small_body_client):
    def chunks():
        yield b'{"email": "jane@example.com", "password": "'
        yield b"x" * 200
        yield b'"}'

    # A generator body goes out without Content-Length
    response = small_body_client.post(
        "/api/v1/users",
        content=chunks(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json() == {"success": False, "message": "PayloadTooLargeError : request entity too large"}
    assert small_body_client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "x"}).status_code == 500


def test_security_headers(client):
    response = client.get("/api/v1/posts/published")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "connected"


def test_unexpected_error_gets_the_failure_envelope():
    def broken_db():
        raise RuntimeError("connection pool exhausted")

    app = create_app()
    app.dependency_overrides[get_db] = broken_db
    with TestClient(app, raise_server_exceptions=False) as c:
        response = c.get("/api/v1/posts/published")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "RuntimeError : connection pool exhausted"}
