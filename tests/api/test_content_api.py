from fastapi.testclient import TestClient

from evenza_api.app.core.db import Database
from tests.utils.auth import auth_headers, create_user


def _page(**overrides):
    data = {"title": "About us", "slug": "about-us", "body": "<p>Hello</p>", "status": "published"}
    data.update(overrides)
    return data


def test_duplicate_slug_conflicts(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    assert client.post("/api/v1/admin/content/", json=_page(), headers=headers).status_code == 201
    response = client.post("/api/v1/admin/content/", json=_page(title="Other", slug="About Us"), headers=headers)
    assert response.status_code == 409


def test_only_one_homepage(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    first = client.post("/api/v1/admin/content/", json=_page(slug="home", is_homepage=True), headers=headers).json()
    second = client.post(
        "/api/v1/admin/content/", json=_page(slug="landing", is_homepage=True), headers=headers
    ).json()

    assert client.get(f"/api/v1/admin/content/{first['id']}", headers=headers).json()["is_homepage"] is False
    homepage = client.get("/api/v1/content/", params={"homepage": True}).json()
    assert [item["id"] for item in homepage["items"]] == [second["id"]]

    client.put(f"/api/v1/admin/content/{first['id']}", json={"is_homepage": True}, headers=headers)
    homepage = client.get("/api/v1/content/", params={"homepage": True}).json()
    assert [item["id"] for item in homepage["items"]] == [first["id"]]


def test_public_content_is_published_only(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    client.post("/api/v1/admin/content/", json=_page(), headers=headers)
    client.post("/api/v1/admin/content/", json=_page(slug="draft-page", status="draft"), headers=headers)

    listing = client.get("/api/v1/content/").json()
    assert [item["slug"] for item in listing["items"]] == ["about-us"]
    assert client.get("/api/v1/content/about-us").status_code == 200
    assert client.get("/api/v1/content/draft-page").status_code == 404
    assert client.get("/api/v1/admin/content/", headers=headers).json()["total"] == 2


def test_settings_upsert_and_read(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    response = client.post(
        "/api/v1/admin/settings/",
        json={"category": "general", "settings": {"siteName": "Evenza", "maintenance": False}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"general.maintenance": False, "general.siteName": "Evenza"}

    client.post(
        "/api/v1/admin/settings/",
        json={"category": "general", "settings": {"siteName": "Evenza Campus"}},
        headers=headers,
    )
    client.post("/api/v1/admin/settings/", json={"category": "payments", "settings": {"upi": "evenza@bank"}}, headers=headers)

    settings = client.get("/api/v1/admin/settings/", headers=headers).json()
    assert settings == {
        "general.maintenance": False,
        "general.siteName": "Evenza Campus",
        "payments.upi": "evenza@bank",
    }

    assert client.delete("/api/v1/admin/settings/payments.upi", headers=headers).status_code == 200
    assert client.delete("/api/v1/admin/settings/payments.upi", headers=headers).status_code == 404
