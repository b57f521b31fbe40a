import jwt

from blog_platform.blog_service.models import User
from .conftest import auth_header, signup


def test_signup_returns_token_and_profile(client):
    body = signup(client, email="jane@example.com", firstName="jane", lastName="DOE")

    assert body["success"] is True
    assert body["message"] == "user created"
    assert body["token"].startswith("JWT ")
    profile = body["profile"]
    assert profile["email"] == "jane@example.com"
    assert profile["firstName"] == "Jane"
    assert profile["lastName"] == "Doe"
    assert "password" not in profile
    assert {"id", "createdAt", "updatedAt", "deletedAt"} <= set(profile)


def test_signup_requires_email_and_password(client):
    for body in ({"email": "jane@example.com"}, {"password": "pw"}, {}):
        response = client.post("/api/v1/users", json=body)
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "email and password are required"}

    response = client.post("/api/v1/users")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "email and password are required"}


def test_signup_with_malformed_email_is_rejected(client):
    response = client.post("/api/v1/users", json={"email": "not-an-email", "password": "pw"})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["message"].startswith("ValidationError : ")


def test_signup_with_taken_email_fails(client, db_session):
    signup(client)
    response = client.post("/api/v1/users", json={"email": "jane@example.com", "password": "other"})

    assert response.status_code == 500
    assert response.json()["message"].startswith("ConstraintError : ")
    assert db_session.query(User).count() == 1


def test_wrongly_typed_body_is_a_bad_request(client):
    response = client.post("/api/v1/users", json={"email": ["jane@example.com"], "password": "pw"})

    assert response.status_code == 400
    assert response.json()["message"].startswith("ValidationError : ")


def test_login(client):
    created = signup(client)
    response = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "Secret123!"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "user logged in"
    assert body["token"].startswith("JWT ")
    assert body["profile"]["id"] == created["profile"]["id"]


def test_login_requires_email_and_password(client):
    response = client.post("/api/v1/users/login", json={"email": "jane@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "email and password are required"


def test_login_with_wrong_password(client):
    signup(client)
    response = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "nope"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "AuthError : INVALID CREDENTIALS"}


def test_protected_route_without_token_is_forbidden(client):
    response = client.get("/api/v1/users")

    assert response.status_code == 403
    assert response.json()["success"] is False
    assert response.json()["message"].startswith("AuthError : ")


def test_protected_route_with_garbage_token_is_forbidden(client):
    for header in ("JWT not-a-token", "Token abc", "JWT"):
        response = client.get("/api/v1/users", headers={"Authorization": header})
        assert response.status_code == 403


def test_get_profile(client):
    created = signup(client, firstName="jane")
    response = client.get("/api/v1/users", headers=auth_header(created["token"]))

    assert response.status_code == 200
    assert response.json()["profile"]["id"] == created["profile"]["id"]
    assert response.json()["profile"]["firstName"] == "Jane"


def test_bearer_scheme_is_accepted(client):
    created = signup(client)
    token = created["token"].split(" ", 1)[1]
    response = client.get("/api/v1/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_update_profile(client):
    created = signup(client)
    headers = auth_header(created["token"])

    response = client.put("/api/v1/users", headers=headers, json={"firstName": "JOHN", "password": "new-pw"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "user successfully updated"
    assert body["token"].startswith("JWT ")
    assert body["profile"]["id"] == created["profile"]["id"]
    assert body["profile"]["firstName"] == "John"

    login = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "new-pw"})
    assert login.status_code == 200


def test_update_only_targets_the_caller(client):
    jane = signup(client, email="jane@example.com")
    john = signup(client, email="john@example.com")

    client.put(
        "/api/v1/users",
        headers=auth_header(jane["token"]),
        json={"id": john["profile"]["id"], "lastName": "changed"},
    )

    profile = client.get("/api/v1/users", headers=auth_header(john["token"])).json()["profile"]
    assert profile["lastName"] == ""


def test_delete_account(client):
    created = signup(client)
    headers = auth_header(created["token"])

    response = client.delete("/api/v1/users", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "user successfully removed"}

    login = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "Secret123!"})
    assert login.status_code == 500
    assert login.json()["message"] == "AuthError : UNKNOWN OR DELETED USER"

    # The token still verifies, but the account is gone
    profile = client.get("/api/v1/users", headers=headers)
    assert profile.status_code == 500
    assert profile.json()["message"] == "AuthError : UNKNOWN OR DELETED USER"


def test_deleted_account_email_can_sign_up_again(client):
    first = signup(client)
    client.delete("/api/v1/users", headers=auth_header(first["token"]))

    second = signup(client)
    assert second["profile"]["id"] != first["profile"]["id"]


def test_token_without_id_claim_is_a_bad_request(client):
    token_service = client.app.state.token_service
    no_id = jwt.encode({"name": "x"}, token_service.secret, algorithm=token_service.algorithm)

    response = client.put("/api/v1/users", headers={"Authorization": f"JWT {no_id}"}, json={})
    assert response.status_code == 400
    assert response.json()["message"] == "ID is mandatory for updating a user account"

    response = client.delete("/api/v1/users", headers={"Authorization": f"JWT {no_id}"})
    assert response.status_code == 400
    assert response.json()["message"] == "ID is mandatory for deleting a user"
