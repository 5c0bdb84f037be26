from fastapi.testclient import TestClient

from evenza_api.app.core.db import Database
from tests.utils.auth import DEFAULT_PASSWORD, auth_headers, create_user
from tests.utils.catalogue import create_event, create_interview, create_trip


def test_get_and_update_profile(client: TestClient, db: Database) -> None:
    user = create_user(db)
    headers = auth_headers(user)
    response = client.get("/api/v1/user/profile", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == user["email"]

    response = client.put(
        "/api/v1/user/profile", json={"bio": "Likes hackathons", "year": "3", "name": None}, headers=headers
    )
    assert response.status_code == 200
    content = response.json()
    assert content["bio"] == "Likes hackathons"
    assert content["year"] == "3"
    assert content["name"] == user["name"]


def test_profile_update_cannot_change_role(client: TestClient, db: Database) -> None:
    user = create_user(db)
    response = client.put("/api/v1/user/profile", json={"role": "admin"}, headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["role"] == "user"


def test_change_password(client: TestClient, db: Database) -> None:
    user = create_user(db, email="grace@example.com")
    headers = auth_headers(user)
    wrong = client.post(
        "/api/v1/user/change-password",
        json={"current_password": "not-it", "new_password": "newsecret"},
        headers=headers,
    )
    assert wrong.status_code == 400

    response = client.post(
        "/api/v1/user/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "newsecret"},
        headers=headers,
    )
    assert response.status_code == 200

    old_login = client.post("/api/v1/auth/login", json={"email": "grace@example.com", "password": DEFAULT_PASSWORD})
    assert old_login.status_code == 401
    new_login = client.post("/api/v1/auth/login", json={"email": "grace@example.com", "password": "newsecret"})
    assert new_login.status_code == 200


def test_dashboard(client: TestClient, db: Database) -> None:
    user = create_user(db)
    headers = auth_headers(user)
    joined = create_event(db)
    open_event = create_event(db, title="Open Mic")
    trip = create_trip(db)
    interview = create_interview(db)
    client.post(f"/api/v1/events/{joined['id']}/register", json={}, headers=headers)
    client.post(
        f"/api/v1/interviews/{interview['id']}/submit", json={"position": "Backend Engineer"}, headers=headers
    )
    client.post("/api/v1/queries/", json={"subject": "Hi", "message": "Question"}, headers=headers)

    response = client.get("/api/v1/user/dashboard", headers=headers)
    assert response.status_code == 200
    content = response.json()
    assert content["user"]["id"] == user["id"]
    assert content["stats"] == {"events": 1, "trips": 0, "interviews": 1, "queries": 1}
    assert [e["entity_id"] for e in content["registered_events"]] == [joined["id"]]
    assert [e["id"] for e in content["available_events"]] == [open_event["id"]]
    assert [t["id"] for t in content["available_trips"]] == [trip["id"]]
    assert content["available_interviews"] == []


def test_own_activity(client: TestClient, db: Database) -> None:
    user = create_user(db)
    other = create_user(db)
    client.put("/api/v1/user/profile", json={"bio": "Hello"}, headers=auth_headers(user))
    client.put("/api/v1/user/profile", json={"bio": "Other"}, headers=auth_headers(other))

    response = client.get("/api/v1/user/activity", headers=auth_headers(user))
    assert response.status_code == 200
    content = response.json()
    assert content["total"] == 1
    assert content["items"][0]["type"] == "PROFILE_UPDATED"
    assert content["items"][0]["user_id"] == user["id"]


def test_self_service_requires_authentication(client: TestClient) -> None:
    for path in ("/api/v1/user/profile", "/api/v1/user/dashboard", "/api/v1/user/activity"):
        assert client.get(path).status_code == 401
