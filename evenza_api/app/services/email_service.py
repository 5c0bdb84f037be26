"""
Email service using Resend for sending transactional emails.

Every send is best-effort: the caller's request has already succeeded
by the time a notification goes out, so failures are logged and
reported through the boolean return value, never raised.
"""

import logging
from html import escape
from typing import Optional

import resend

from ..core.config import settings

logger = logging.getLogger(__name__)


def init_resend() -> bool:
    """Initialize Resend with the API key; ``False`` when none is configured."""
    if not settings.resend_api_key:
        return False
    resend.api_key = settings.resend_api_key
    return True


def _layout(title: str, body_html: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"></head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #4f46e5;">{escape(title)}</h2>
            {body_html}
            <p>Best regards,<br>The Evenza Team</p>
        </div>
    </body>
    </html>
    """


class EmailService:
    """Outbound notifications for status changes."""

    @classmethod
    def send(cls, to_email: str, subject: str, html: str, text: Optional[str] = None) -> bool:
        if not init_resend():
            logger.info("Email to %s skipped (no RESEND_API_KEY): %s", to_email, subject)
            return False
        params = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        if text:
            params["text"] = text
        try:
            response = resend.Emails.send(params)
        except Exception:
            logger.error("Failed to send email to %s: %s", to_email, subject, exc_info=True)
            return False
        logger.info("Email sent to %s (%s)", to_email, response.get("id") if isinstance(response, dict) else response)
        return True

    @classmethod
    def payment_status_changed(cls, to_email: str, name: str, title: str, amount: float, status: str) -> bool:
        body = (
            f"<p>Hi {escape(name)},</p>"
            f"<p>The status of your payment of <strong>{amount:.2f}</strong> for "
            f"<strong>{escape(title)}</strong> is now <strong>{escape(status)}</strong>.</p>"
        )
        return cls.send(
            to_email,
            f"Payment {status}: {title}",
            _layout("Payment update", body),
            text=f"Your payment for {title} is now {status}.",
        )

    @classmethod
    def submission_status_changed(
        cls, to_email: str, name: str, interview_title: str, status: str, notes: Optional[str] = None
    ) -> bool:
        notes_html = f"<p><strong>Notes:</strong> {escape(notes)}</p>" if notes else ""
        body = (
            f"<p>Hi {escape(name)},</p>"
            f"<p>Your application for <strong>{escape(interview_title)}</strong> "
            f"has been marked as <strong>{escape(status)}</strong>.</p>{notes_html}"
        )
        return cls.send(
            to_email,
            f"Application {status}: {interview_title}",
            _layout("Application update", body),
            text=f"Your application for {interview_title} is now {status}.",
        )

    @classmethod
    def query_answered(cls, to_email: str, name: str, subject: str, response: str) -> bool:
        body = (
            f"<p>Hi {escape(name)},</p>"
            f"<p>We have replied to your query <strong>{escape(subject)}</strong>:</p>"
            f"<blockquote>{escape(response)}</blockquote>"
        )
        return cls.send(to_email, f"Re: {subject}", _layout("We answered your query", body), text=response)
