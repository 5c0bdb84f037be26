import dataclasses
from unittest.mock import patch

from evenza_api.app.core.config import settings
from evenza_api.app.services import email_service
from evenza_api.app.services.email_service import EmailService


def test_send_is_skipped_without_api_key() -> None:
    no_key = dataclasses.replace(settings, resend_api_key="")
    with patch.object(email_service, "settings", no_key), patch("resend.Emails.send") as resend_send:
        assert EmailService.send("ada@example.com", "Hello", "<p>Hi</p>") is False
    resend_send.assert_not_called()


def test_send_uses_configured_sender() -> None:
    configured = dataclasses.replace(settings, resend_api_key="re_test", email_from="Evenza <noreply@example.com>")
    with patch.object(email_service, "settings", configured), patch(
        "resend.Emails.send", return_value={"id": "email_1"}
    ) as resend_send:
        assert EmailService.send("ada@example.com", "Hello", "<p>Hi</p>", text="Hi") is True
    params = resend_send.call_args.args[0]
    assert params["from"] == "Evenza <noreply@example.com>"
    assert params["to"] == ["ada@example.com"]
    assert params["text"] == "Hi"


def test_send_failure_is_reported_not_raised() -> None:
    configured = dataclasses.replace(settings, resend_api_key="re_test")
    with patch.object(email_service, "settings", configured), patch(
        "resend.Emails.send", side_effect=RuntimeError("503 from provider")
    ):
        assert EmailService.send("ada@example.com", "Hello", "<p>Hi</p>") is False


def test_payment_notification_escapes_user_content() -> None:
    with patch.object(EmailService, "send", return_value=True) as send:
        EmailService.payment_status_changed("ada@example.com", "<Ada>", "Hackathon", 750, "completed")
    to_email, subject, html = send.call_args.args[:3]
    assert to_email == "ada@example.com"
    assert subject == "Payment completed: Hackathon"
    assert "&lt;Ada&gt;" in html
    assert "750.00" in html
