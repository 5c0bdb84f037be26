from typing import Dict, Tuple

from fastapi.testclient import TestClient

from evenza_api.app.core.db import Database
from tests.utils.auth import auth_headers, create_user
from tests.utils.catalogue import create_event, fetch_one


def _paid_registration(client: TestClient, db: Database) -> Tuple[Dict, Dict, int]:
    user = create_user(db)
    event = create_event(db, price=100)
    response = client.post(f"/api/v1/events/{event['id']}/register", json={}, headers=auth_headers(user))
    assert response.status_code == 201
    return user, event, response.json()["payment_id"]


def test_invalid_status_leaves_payment_unchanged(client: TestClient, db: Database) -> None:
    _, _, payment_id = _paid_registration(client, db)
    admin = create_user(db, role="admin")
    response = client.put(
        f"/api/v1/admin/payments/{payment_id}/status", json={"status": "paid"}, headers=auth_headers(admin)
    )
    assert response.status_code == 400
    payment = fetch_one(db, "payments", payment_id)
    assert payment["status"] == "pending"
    assert payment["verified_by"] is None


def test_complete_payment_syncs_membership(client: TestClient, db: Database, sent_emails) -> None:
    user, event, payment_id = _paid_registration(client, db)
    admin = create_user(db, role="admin")
    response = client.put(
        f"/api/v1/admin/payments/{payment_id}/status",
        json={"status": "completed", "notes": "Bank transfer received"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    content = response.json()
    assert content["status"] == "completed"
    assert content["verified_by"] == admin["id"]
    assert content["verified_at"] is not None
    assert content["notes"] == "Bank transfer received"

    with db.connection() as conn:
        attendee = conn.execute(
            "SELECT payment_status FROM event_attendees WHERE event_id = ? AND user_id = ?",
            (event["id"], user["id"]),
        ).fetchone()
    assert attendee["payment_status"] == "completed"
    registrations = client.get("/api/v1/user/registrations", headers=auth_headers(user)).json()
    assert registrations[0]["payment_status"] == "completed"

    sent_emails.assert_called_once()
    assert sent_emails.call_args.args[0] == user["email"]


def test_refunded_payment_cannot_return_to_pending(client: TestClient, db: Database, sent_emails) -> None:
    _, _, payment_id = _paid_registration(client, db)
    headers = auth_headers(create_user(db, role="admin"))
    url = f"/api/v1/admin/payments/{payment_id}/status"
    assert client.put(url, json={"status": "completed"}, headers=headers).status_code == 200
    assert client.put(url, json={"status": "refunded"}, headers=headers).status_code == 200

    response = client.put(url, json={"status": "pending"}, headers=headers)
    assert response.status_code == 400
    assert fetch_one(db, "payments", payment_id)["status"] == "refunded"


def test_list_payments_filters(client: TestClient, db: Database) -> None:
    _paid_registration(client, db)
    headers = auth_headers(create_user(db, role="admin"))
    response = client.get("/api/v1/admin/payments/", params={"status": "pending"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert response.json()["items"][0]["user_name"]

    assert client.get("/api/v1/admin/payments/", params={"status": "completed"}, headers=headers).json()["total"] == 0
    assert client.get("/api/v1/admin/payments/", params={"status": "bogus"}, headers=headers).status_code == 400


def test_user_submits_payment_proof(client: TestClient, db: Database) -> None:
    user, _, payment_id = _paid_registration(client, db)
    response = client.put(
        f"/api/v1/user/payments/{payment_id}/proof",
        json={"proof_url": "https://cdn.example.com/payments/receipt.png"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    assert response.json()["proof_url"] == "https://cdn.example.com/payments/receipt.png"
    assert response.json()["status"] == "pending"

    mine = client.get("/api/v1/user/payments", headers=auth_headers(user)).json()
    assert [item["id"] for item in mine["items"]] == [payment_id]


def test_user_cannot_touch_foreign_payment(client: TestClient, db: Database) -> None:
    _, _, payment_id = _paid_registration(client, db)
    other = create_user(db)
    response = client.put(
        f"/api/v1/user/payments/{payment_id}/proof",
        json={"proof_url": "https://cdn.example.com/x.png"},
        headers=auth_headers(other),
    )
    assert response.status_code == 403
    assert fetch_one(db, "payments", payment_id)["proof_url"] is None
