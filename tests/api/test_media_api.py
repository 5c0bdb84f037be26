from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from evenza_api.app.core.db import Database
from tests.utils.auth import auth_headers, create_user
from tests.utils.catalogue import count_rows, create_event

STORED_URL = "https://evenza-test.s3.amazonaws.com/gallery/photo.jpg"


def _media(**overrides):
    data = {"title": "Opening night", "type": "image", "url": STORED_URL, "category": "events"}
    data.update(overrides)
    return data


def test_create_and_list_media(client: TestClient, db: Database) -> None:
    user = create_user(db)
    event = create_event(db)
    response = client.post("/api/v1/media/", json=_media(related_event_id=event["id"]), headers=auth_headers(user))
    assert response.status_code == 201
    assert response.json()["uploaded_by"] == user["id"]

    client.post("/api/v1/media/", json=_media(title="Trailer", type="video", category="trips"), headers=auth_headers(user))

    assert client.get("/api/v1/media/").json()["total"] == 2
    by_event = client.get("/api/v1/media/", params={"event_id": event["id"]}).json()
    assert [item["title"] for item in by_event["items"]] == ["Opening night"]
    videos = client.get("/api/v1/media/", params={"type": "video"}).json()
    assert [item["title"] for item in videos["items"]] == ["Trailer"]
    assert client.get("/api/v1/media/", params={"category": "all"}).json()["total"] == 2


def test_create_media_requires_authentication(client: TestClient, db: Database) -> None:
    assert client.post("/api/v1/media/", json=_media()).status_code == 401
    assert count_rows(db, "media") == 0


def test_create_media_for_unknown_event(client: TestClient, db: Database) -> None:
    response = client.post("/api/v1/media/", json=_media(related_event_id=9999), headers=auth_headers(create_user(db)))
    assert response.status_code == 400
    assert count_rows(db, "media") == 0


def test_admin_deletes_media_and_object(client: TestClient, db: Database) -> None:
    item = client.post("/api/v1/media/", json=_media(), headers=auth_headers(create_user(db))).json()
    s3 = MagicMock()
    with patch("evenza_api.app.services.storage_service.get_s3_client", return_value=s3):
        response = client.delete(f"/api/v1/admin/media/{item['id']}", headers=auth_headers(create_user(db, role="admin")))
    assert response.status_code == 200
    assert count_rows(db, "media") == 0
    s3.delete_object.assert_called_once_with(Bucket="evenza-test", Key="gallery/photo.jpg")


def test_media_delete_survives_storage_failure(client: TestClient, db: Database) -> None:
    item = client.post("/api/v1/media/", json=_media(), headers=auth_headers(create_user(db))).json()
    s3 = MagicMock()
    s3.delete_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey", "Message": "gone"}}, "DeleteObject")
    headers = auth_headers(create_user(db, role="admin"))
    with patch("evenza_api.app.services.storage_service.get_s3_client", return_value=s3):
        response = client.delete(f"/api/v1/admin/media/{item['id']}", headers=headers)
    assert response.status_code == 200
    assert count_rows(db, "media") == 0
    assert client.delete(f"/api/v1/admin/media/{item['id']}", headers=headers).status_code == 404


def test_regular_user_cannot_delete_media(client: TestClient, db: Database) -> None:
    user = create_user(db)
    item = client.post("/api/v1/media/", json=_media(), headers=auth_headers(user)).json()
    assert client.delete(f"/api/v1/admin/media/{item['id']}", headers=auth_headers(user)).status_code == 403
    assert count_rows(db, "media") == 1
