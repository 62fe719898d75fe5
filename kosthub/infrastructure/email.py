"""SendGrid-backed email delivery for notifications."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from kosthub.config import Settings, get_settings
from kosthub.domain.entities import Notification, NotificationKind

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return the ``errors[].message`` texts of a SendGrid error body, joined."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not body:
        return None

    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list):
        messages = [
            str(item["message"])
            for item in errors
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return json.dumps(body, default=str)


def _log_sendgrid_exception(exc: Exception) -> None:
    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))
    if status_code is None and details is None:
        logger.exception("Error sending email via SendGrid: %s", exc)
        return
    logger.error(
        "SendGrid API request failed with status %s: %s",
        status_code or "unknown",
        details or exc,
    )


def send_email(
    subject: str,
    html_content: str,
    recipient: str,
    *,
    settings: Settings | None = None,
) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = settings or get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # network and API errors are reported, not raised
        _log_sendgrid_exception(exc)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        if details:
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
        else:
            logger.error("SendGrid API responded with status %s", status_code)
        return False

    return True


def render_notification_email(notification: Notification, recipient_name: str) -> str:
    """Render the HTML body mirroring an in-app notification."""

    parts = [
        f"<h2>{html.escape(notification.title)}</h2>",
        f"<p>Hi {html.escape(recipient_name)},</p>",
        f"<p>{html.escape(notification.message)}</p>",
    ]
    if notification.kind is NotificationKind.PAYMENT_REMINDER:
        parts.append(
            "<p>Tolong upload bukti pembayaran via website setelah pembayaran selesai dilakukan.</p>"
        )
    parts.append("<p>Terima kasih!</p>")
    return "".join(parts)


class EmailNotificationSink:
    """Optional delivery channel plugged into the notification pipeline."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def deliver(self, notification: Notification, *, recipient: str, recipient_name: str) -> bool:
        sent = send_email(
            notification.title,
            render_notification_email(notification, recipient_name),
            recipient,
            settings=self._settings,
        )
        if sent:
            logger.info("Notification %s emailed to %s", notification.id, recipient)
        return sent


def build_email_sink(settings: Settings | None = None) -> EmailNotificationSink | None:
    """Return an email sink when SendGrid is configured, ``None`` otherwise."""

    settings = settings or get_settings()
    if not settings.email_enabled:
        logger.info("SendGrid not configured; notification emails disabled")
        return None
    return EmailNotificationSink(settings)


__all__ = [
    "EmailNotificationSink",
    "build_email_sink",
    "render_notification_email",
    "send_email",
]
