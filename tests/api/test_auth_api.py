from fastapi.testclient import TestClient

from evenza_api.app.core.config import settings
from evenza_api.app.core.db import Database
from tests.utils.auth import DEFAULT_PASSWORD, auth_headers, create_user


def test_register_user(client: TestClient) -> None:
    data = {"name": "Ada Lovelace", "email": "Ada@Example.com", "password": "secret123"}
    response = client.post("/api/v1/auth/register", json=data)
    assert response.status_code == 201
    content = response.json()
    assert content["email"] == "ada@example.com"
    assert content["role"] == "user"
    assert "password" not in content


def test_register_duplicate_email_conflicts(client: TestClient) -> None:
    data = {"name": "Ada", "email": "ada@example.com", "password": "secret123"}
    assert client.post("/api/v1/auth/register", json=data).status_code == 201
    response = client.post("/api/v1/auth/register", json={**data, "email": "ADA@example.com"})
    assert response.status_code == 409


def test_register_rejects_short_password(client: TestClient) -> None:
    response = client.post("/api/v1/auth/register", json={"name": "A", "email": "a@example.com", "password": "123"})
    assert response.status_code == 422


def test_login_sets_cookie_and_cookie_authenticates(client: TestClient, db: Database) -> None:
    user = create_user(db, email="grace@example.com")
    response = client.post(
        "/api/v1/auth/login", json={"email": "grace@example.com", "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user["id"]
    assert body["access_token"]
    assert settings.auth_cookie_name in response.cookies

    me = client.get("/api/v1/auth/me")
    assert me.status_code == 200
    assert me.json() == {"id": user["id"], "name": user["name"], "email": user["email"], "role": "user"}


def test_login_with_wrong_password(client: TestClient, db: Database) -> None:
    create_user(db, email="grace@example.com")
    response = client.post("/api/v1/auth/login", json={"email": "grace@example.com", "password": "nope"})
    assert response.status_code == 401


def test_me_requires_token(client: TestClient) -> None:
    assert client.get("/api/v1/auth/me").status_code == 401
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_check_admin(client: TestClient, db: Database) -> None:
    user = create_user(db)
    admin = create_user(db, role="super_admin")
    assert client.get("/api/v1/auth/check-admin", headers=auth_headers(user)).status_code == 403
    response = client.get("/api/v1/auth/check-admin", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["is_admin"] is True


def test_setup_admin_only_once(client: TestClient) -> None:
    data = {"name": "Root", "email": "root@example.com", "password": "secret123"}
    response = client.post("/api/v1/setup/admin", json=data)
    assert response.status_code == 201
    assert response.json()["role"] == "super_admin"

    again = client.post("/api/v1/setup/admin", json={**data, "email": "other@example.com"})
    assert again.status_code == 403


def test_logout_clears_cookie(client: TestClient, db: Database) -> None:
    create_user(db, email="grace@example.com")
    client.post("/api/v1/auth/login", json={"email": "grace@example.com", "password": DEFAULT_PASSWORD})
    response = client.post("/api/v1/auth/logout")
    assert response.status_code == 200
    assert client.get("/api/v1/auth/me").status_code == 401
