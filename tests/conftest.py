# tests/conftest.py

import dataclasses
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from evenza_api.app.core.config import settings
from evenza_api.app.main import create_app
from evenza_api.app.services import email_service, storage_service
from evenza_api.app.services.email_service import EmailService


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    """Settings for one test: a fresh SQLite file, no outbound email."""
    return dataclasses.replace(
        settings,
        database_url=str(tmp_path / "evenza_test.db"),
        resend_api_key="",
        aws_s3_bucket="evenza-test",
        aws_s3_endpoint_url="",
    )


@pytest.fixture(scope="function")
def app(test_settings):
    # The email and storage services read their module level settings.
    with patch.object(email_service, "settings", test_settings), patch.object(
        storage_service, "settings", test_settings
    ):
        yield create_app(test_settings)


@pytest.fixture(scope="function")
def db(app):
    database = app.state.db
    database.init()
    return database


@pytest.fixture(scope="function")
def client(app, db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def sent_emails():
    """Replace outgoing email with a mock that records every call."""
    with patch.object(EmailService, "send", MagicMock(return_value=True)) as send:
        yield send
