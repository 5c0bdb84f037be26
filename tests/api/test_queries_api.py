from fastapi.testclient import TestClient

from evenza_api.app.core.db import Database
from tests.utils.auth import auth_headers, create_user
from tests.utils.catalogue import count_rows, fetch_one

QUERY = {"subject": "Refund for the hackathon", "message": "I can no longer attend."}


def test_create_query_also_creates_message(client: TestClient, db: Database) -> None:
    user = create_user(db)
    response = client.post("/api/v1/queries/", json=QUERY, headers=auth_headers(user))
    assert response.status_code == 201
    query = response.json()
    assert query["status"] == "new"
    assert query["email"] == user["email"]

    assert count_rows(db, "messages", "query_id = ?", (query["id"],)) == 1
    with db.connection() as conn:
        message = conn.execute("SELECT * FROM messages WHERE query_id = ?", (query["id"],)).fetchone()
    assert message["status"] == "new"
    assert message["subject"] == QUERY["subject"]


def test_query_requires_authentication(client: TestClient, db: Database) -> None:
    assert client.post("/api/v1/queries/", json=QUERY).status_code == 401
    assert count_rows(db, "queries") == 0
    assert count_rows(db, "messages") == 0


def test_user_only_sees_own_queries(client: TestClient, db: Database) -> None:
    owner = create_user(db)
    other = create_user(db)
    query = client.post("/api/v1/queries/", json=QUERY, headers=auth_headers(owner)).json()

    assert client.get(f"/api/v1/queries/{query['id']}", headers=auth_headers(owner)).status_code == 200
    assert client.get(f"/api/v1/queries/{query['id']}", headers=auth_headers(other)).status_code == 403
    assert client.get("/api/v1/queries/", headers=auth_headers(other)).json()["total"] == 0


def test_admin_responds_to_query(client: TestClient, db: Database, sent_emails) -> None:
    user = create_user(db)
    admin = create_user(db, role="admin")
    query = client.post("/api/v1/queries/", json=QUERY, headers=auth_headers(user)).json()

    response = client.put(
        f"/api/v1/admin/queries/{query['id']}/respond",
        json={"response": "Refund issued."},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    content = response.json()
    assert content["status"] == "answered"
    assert content["response"] == "Refund issued."
    assert content["responded_by"] == admin["id"]
    sent_emails.assert_called_once()

    with db.connection() as conn:
        message = conn.execute("SELECT status FROM messages WHERE query_id = ?", (query["id"],)).fetchone()
    assert message["status"] == "answered"


def test_admin_message_status_update(client: TestClient, db: Database) -> None:
    user = create_user(db)
    headers = auth_headers(create_user(db, role="admin"))
    query = client.post("/api/v1/queries/", json=QUERY, headers=auth_headers(user)).json()
    messages = client.get("/api/v1/admin/messages/", params={"status": "new"}, headers=headers).json()
    assert messages["total"] == 1
    message_id = messages["items"][0]["id"]

    response = client.patch(f"/api/v1/admin/messages/{message_id}", json={"status": "closed"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "closed"
    assert fetch_one(db, "queries", query["id"])["status"] == "closed"

    response = client.patch(f"/api/v1/admin/messages/{message_id}", json={"status": "archived"}, headers=headers)
    assert response.status_code == 400

    everything = client.get("/api/v1/admin/messages/", params={"status": "all"}, headers=headers).json()
    assert everything["total"] == 1
