import pytest
from fastapi.testclient import TestClient

from evenza_api.app.core.db import Database
from tests.utils.auth import auth_headers, create_user
from tests.utils.catalogue import count_rows, create_event, create_interview, fetch_one

EVENT_DATA = {
    "title": "Robotics Workshop",
    "description": "Build a line follower",
    "date": "2026-06-12",
    "time": "14:00",
    "location": "Lab 3",
    "category": "Technical",
    "price": 50,
    "max_attendees": 30,
}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/v1/admin/dashboard"),
        ("get", "/api/v1/admin/users/"),
        ("post", "/api/v1/admin/events/"),
        ("delete", "/api/v1/admin/events/1"),
        ("put", "/api/v1/admin/payments/1/status"),
        ("post", "/api/v1/admin/settings/"),
    ],
)
def test_admin_paths_require_authentication(client: TestClient, db: Database, method: str, path: str) -> None:
    create_event(db)
    response = client.request(method, path, json={})
    assert response.status_code == 401
    assert count_rows(db, "events") == 1


def test_admin_paths_reject_regular_users(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db))
    assert client.get("/api/v1/admin/dashboard", headers=headers).status_code == 403
    response = client.post("/api/v1/admin/events/", json=EVENT_DATA, headers=headers)
    assert response.status_code == 403
    assert count_rows(db, "events") == 0


def test_event_crud(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    response = client.post("/api/v1/admin/events/", json=EVENT_DATA, headers=headers)
    assert response.status_code == 201
    event = response.json()
    assert event["title"] == EVENT_DATA["title"]
    assert event["attendee_count"] == 0
    assert event["is_published"] is True

    response = client.put(
        f"/api/v1/admin/events/{event['id']}", json={"price": 75, "is_published": False}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["price"] == 75
    assert response.json()["title"] == EVENT_DATA["title"]

    # Unpublished events are hidden from the public listing.
    assert client.get(f"/api/v1/events/{event['id']}").status_code == 404
    assert client.get("/api/v1/events/").json()["total"] == 0

    response = client.delete(f"/api/v1/admin/events/{event['id']}", headers=headers)
    assert response.status_code == 200
    assert count_rows(db, "events") == 0
    assert client.get(f"/api/v1/admin/events/{event['id']}", headers=headers).status_code == 404


def test_create_event_validates_body(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    response = client.post("/api/v1/admin/events/", json={**EVENT_DATA, "price": -1}, headers=headers)
    assert response.status_code == 422


def test_remove_attendee_decrements_count(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    user = create_user(db)
    event = create_event(db)
    client.post(f"/api/v1/events/{event['id']}/register", json={}, headers=auth_headers(user))
    assert fetch_one(db, "events", event["id"])["attendee_count"] == 1

    response = client.delete(
        f"/api/v1/admin/events/{event['id']}/attendees/{user['id']}", headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert fetch_one(db, "events", event["id"])["attendee_count"] == 0
    assert count_rows(db, "event_attendees") == 0
    assert count_rows(db, "user_registrations", "user_id = ?", (user["id"],)) == 0

    again = client.delete(
        f"/api/v1/admin/events/{event['id']}/attendees/{user['id']}", headers=auth_headers(admin)
    )
    assert again.status_code == 404


def test_event_detail_lists_attendees(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    user = create_user(db)
    event = create_event(db)
    client.post(f"/api/v1/events/{event['id']}/register", json={"tickets": 2}, headers=auth_headers(user))

    response = client.get(f"/api/v1/admin/events/{event['id']}", headers=auth_headers(admin))
    assert response.status_code == 200
    attendees = response.json()["attendees"]
    assert len(attendees) == 1
    assert attendees[0]["user_id"] == user["id"]
    assert attendees[0]["tickets"] == 2


def test_admin_cannot_delete_self(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    response = client.delete(f"/api/v1/admin/users/{admin['id']}", headers=auth_headers(admin))
    assert response.status_code == 400
    assert count_rows(db, "users", "id = ?", (admin["id"],)) == 1


def test_delete_user_releases_places(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    user = create_user(db)
    event = create_event(db)
    client.post(f"/api/v1/events/{event['id']}/register", json={}, headers=auth_headers(user))

    response = client.delete(f"/api/v1/admin/users/{user['id']}", headers=auth_headers(admin))
    assert response.status_code == 200
    assert count_rows(db, "users", "id = ?", (user["id"],)) == 0
    assert fetch_one(db, "events", event["id"])["attendee_count"] == 0


def test_only_super_admin_changes_roles(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    super_admin = create_user(db, role="super_admin")
    user = create_user(db)

    response = client.put(f"/api/v1/admin/users/{user['id']}", json={"role": "admin"}, headers=auth_headers(admin))
    assert response.status_code == 403
    assert fetch_one(db, "users", user["id"])["role"] == "user"

    response = client.put(
        f"/api/v1/admin/users/{user['id']}", json={"role": "admin"}, headers=auth_headers(super_admin)
    )
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_admin_edits_user_profile(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    user = create_user(db)
    response = client.put(
        f"/api/v1/admin/users/{user['id']}",
        json={"name": "Renamed", "department": "Physics"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["department"] == "Physics"


def test_review_submission(client: TestClient, db: Database, sent_emails) -> None:
    admin = create_user(db, role="admin")
    user = create_user(db)
    interview = create_interview(db)
    submitted = client.post(
        f"/api/v1/interviews/{interview['id']}/submit",
        json={"position": "Backend Engineer"},
        headers=auth_headers(user),
    ).json()

    response = client.put(
        f"/api/v1/admin/interview-submissions/{submitted['submission_id']}",
        json={"status": "approved", "admin_notes": "See you Monday"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    content = response.json()
    assert content["status"] == "approved"
    assert content["reviewed_by"] == admin["id"]
    assert sent_emails.call_count == 1

    registrations = client.get("/api/v1/user/registrations", headers=auth_headers(user)).json()
    assert registrations[0]["status"] == "approved"

    response = client.put(
        f"/api/v1/admin/interview-submissions/{submitted['submission_id']}",
        json={"status": "pending"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400


def test_dashboard_totals(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    create_event(db)
    create_event(db, title="Second")
    response = client.get("/api/v1/admin/dashboard", headers=auth_headers(admin))
    assert response.status_code == 200
    totals = response.json()["totals"]
    assert totals["events"] == 2
    assert totals["users"] == 1


def test_admin_cannot_delete_super_admin(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    super_admin = create_user(db, role="super_admin")
    response = client.delete(f"/api/v1/admin/users/{super_admin['id']}", headers=auth_headers(admin))
    assert response.status_code == 403
    assert response.json()["detail"] == "Cannot delete super_admin user"
    assert count_rows(db, "users", "id = ?", (super_admin["id"],)) == 1


def test_admin_cannot_edit_super_admin(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    super_admin = create_user(db, role="super_admin")
    response = client.put(
        f"/api/v1/admin/users/{super_admin['id']}", json={"name": "Demoted"}, headers=auth_headers(admin)
    )
    assert response.status_code == 403
    assert fetch_one(db, "users", super_admin["id"])["name"] == super_admin["name"]


def test_super_admin_can_delete_super_admin(client: TestClient, db: Database) -> None:
    actor = create_user(db, role="super_admin")
    other = create_user(db, role="super_admin")
    response = client.delete(f"/api/v1/admin/users/{other['id']}", headers=auth_headers(actor))
    assert response.status_code == 200
    assert count_rows(db, "users", "id = ?", (other["id"],)) == 0


def test_null_capacity_update_keeps_capacity(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    event = create_event(db, max_attendees=1)
    response = client.put(f"/api/v1/admin/events/{event['id']}", json={"max_attendees": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["max_attendees"] == 1
    assert fetch_one(db, "events", event["id"])["max_attendees"] == 1

    first = client.post(f"/api/v1/events/{event['id']}/register", json={}, headers=auth_headers(create_user(db)))
    assert first.status_code == 201
    second = client.post(f"/api/v1/events/{event['id']}/register", json={}, headers=auth_headers(create_user(db)))
    assert second.status_code == 400
    assert count_rows(db, "event_attendees", "event_id = ?", (event["id"],)) == 1

    assert client.get(f"/api/v1/events/{event['id']}").status_code == 200


def test_null_required_field_update_is_ignored(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    event = create_event(db, image="https://cdn.example.com/e.png")
    response = client.put(
        f"/api/v1/admin/events/{event['id']}",
        json={"title": None, "location": "Hall B", "image": None},
        headers=headers,
    )
    assert response.status_code == 200
    content = response.json()
    assert content["title"] == event["title"]
    assert content["location"] == "Hall B"
    assert content["image"] is None


def test_admin_creates_user(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    super_admin = create_user(db, role="super_admin")
    data = {"name": "New Member", "email": "Member@Example.com", "password": "secret123", "department": "Arts"}

    response = client.post("/api/v1/admin/users/", json=data, headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["email"] == "member@example.com"
    assert response.json()["role"] == "user"

    promoted = {**data, "email": "staff@example.com", "role": "admin"}
    assert client.post("/api/v1/admin/users/", json=promoted, headers=auth_headers(admin)).status_code == 403
    response = client.post("/api/v1/admin/users/", json=promoted, headers=auth_headers(super_admin))
    assert response.status_code == 201
    assert response.json()["role"] == "admin"

    duplicate = client.post("/api/v1/admin/users/", json=data, headers=auth_headers(admin))
    assert duplicate.status_code == 409


def test_trip_crud_and_participant_removal(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    data = {"title": "Coastal Walk", "description": "Two days", "date": "2026-07-01", "location": "Goa", "spots": 5}
    response = client.post("/api/v1/admin/trips/", json=data, headers=headers)
    assert response.status_code == 201
    trip = response.json()
    assert trip["enrollments"] == 0

    response = client.put(f"/api/v1/admin/trips/{trip['id']}", json={"spots": 8, "itinerary": "Day 1"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["spots"] == 8

    member = create_user(db)
    client.post(f"/api/v1/trips/{trip['id']}/enroll", json={}, headers=auth_headers(member))
    detail = client.get(f"/api/v1/admin/trips/{trip['id']}", headers=headers).json()
    assert [p["user_id"] for p in detail["participants"]] == [member["id"]]

    response = client.delete(f"/api/v1/admin/trips/{trip['id']}/participants/{member['id']}", headers=headers)
    assert response.status_code == 200
    assert fetch_one(db, "trips", trip["id"])["enrollments"] == 0
    assert count_rows(db, "trip_participants") == 0

    assert client.delete(f"/api/v1/admin/trips/{trip['id']}", headers=headers).status_code == 200
    assert count_rows(db, "trips") == 0


def test_interview_crud_and_applicant_removal(client: TestClient, db: Database) -> None:
    headers = auth_headers(create_user(db, role="admin"))
    data = {
        "title": "Summer Internships",
        "company": "Globex",
        "description": "Ten week programme",
        "date": "2026-05-20",
        "location": "Auditorium",
        "positions": ["Data Analyst", "QA Engineer"],
        "slots": 2,
    }
    response = client.post("/api/v1/admin/interviews/", json=data, headers=headers)
    assert response.status_code == 201
    interview = response.json()
    assert interview["positions"] == ["Data Analyst", "QA Engineer"]

    response = client.put(f"/api/v1/admin/interviews/{interview['id']}", json={"slots": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["slots"] is None

    applicant = create_user(db)
    client.post(
        f"/api/v1/interviews/{interview['id']}/submit",
        json={"position": "Data Analyst"},
        headers=auth_headers(applicant),
    )
    detail = client.get(f"/api/v1/admin/interviews/{interview['id']}", headers=headers).json()
    assert [s["user_id"] for s in detail["submissions"]] == [applicant["id"]]

    response = client.delete(
        f"/api/v1/admin/interviews/{interview['id']}/applicants/{applicant['id']}", headers=headers
    )
    assert response.status_code == 200
    assert fetch_one(db, "interviews", interview["id"])["registrations"] == 0
    assert count_rows(db, "interview_submissions") == 0

    assert client.delete(f"/api/v1/admin/interviews/{interview['id']}", headers=headers).status_code == 200
    assert count_rows(db, "interviews") == 0


def test_admin_activity_listing(client: TestClient, db: Database) -> None:
    admin = create_user(db, role="admin")
    headers = auth_headers(admin)
    client.post("/api/v1/admin/events/", json=EVENT_DATA, headers=headers)

    response = client.get("/api/v1/admin/activity", params={"user_id": admin["id"]}, headers=headers)
    assert response.status_code == 200
    content = response.json()
    assert content["total"] == 1
    assert content["items"][0]["type"] == "ADMIN_ACTION"
    assert content["items"][0]["resource_type"] == "event"

    found = client.get("/api/v1/admin/activity", params={"search": "Robotics"}, headers=headers).json()
    assert found["total"] == 1
