"""
Pytest configuration for blog service tests.

Points the service at a throwaway SQLite database before anything imports
the settings, and recreates all tables before each test.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_blog.db")
os.environ.setdefault("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from blog_platform.blog_service.db import Base, engine, SessionLocal  # noqa: E402
from blog_platform.blog_service.main import app  # noqa: E402
from blog_platform.blog_service.models import User, Post  # noqa: E402,F401


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    """Create a database session for testing."""
    session = SessionLocal()
    yield session
    session.close()


def signup(client, email="jane@example.com", password="Secret123!", **names):
    """Register through the API and return the response body."""
    body = {"email": email, "password": password}
    body.update(names)
    response = client.post("/api/v1/users", json=body)
    assert response.status_code == 201, response.json()
    return response.json()


def auth_header(token: str) -> dict:
    return {"Authorization": token}
