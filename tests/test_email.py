"""Unit tests for the SendGrid email helpers and the notification sink."""

from __future__ import annotations

import json
import types

import pytest

from kosthub.config import Settings
from kosthub.domain.entities import Notification, NotificationKind
from kosthub.infrastructure import email as email_module


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite://",
        "secret_key": "secret",
        "sendgrid_api_key": "SG.fake",
        "sendgrid_sender": "kost@example.com",
    }
    values.update(overrides)
    return Settings(**values)


class _RecordingClient:
    sent: list = []

    def __init__(self, api_key: str):
        self.api_key = api_key

    def send(self, message):
        _RecordingClient.sent.append(message)
        return types.SimpleNamespace(status_code=202, body=None)


def test_send_email_without_configuration():
    settings = _settings(sendgrid_api_key=None, sendgrid_sender=None)

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com", settings=settings) is False


def test_send_email_success(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(email_module, "SendGridAPIClient", _RecordingClient)

    assert email_module.send_email("Subject", "<p>Body</p>", "user@example.com", settings=_settings()) is True


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog):
    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid."}]}
        ).encode()

    class FailingClient(_RecordingClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email(
            "Subject", "<p>Body</p>", "user@example.com", settings=_settings()
        )

    assert result is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_send_email_reports_non_success_status(monkeypatch: pytest.MonkeyPatch, caplog):
    class RejectingClient(_RecordingClient):
        def send(self, message):
            return types.SimpleNamespace(status_code=400, body=b'{"errors": [{"message": "bad to"}]}')

    monkeypatch.setattr(email_module, "SendGridAPIClient", RejectingClient)

    with caplog.at_level("ERROR"):
        assert email_module.send_email("S", "<p>B</p>", "x@example.com", settings=_settings()) is False
    assert "bad to" in caplog.text


def test_reminder_email_mentions_upload_and_escapes_html():
    notification = Notification(
        id=1,
        user_id=2,
        kind=NotificationKind.PAYMENT_REMINDER,
        title="Pengingat",
        message="Kamar: <A1>",
    )

    rendered = email_module.render_notification_email(notification, "Budi")

    assert "&lt;A1&gt;" in rendered
    assert "Hi Budi" in rendered
    assert "upload bukti pembayaran" in rendered


def test_build_email_sink_depends_on_configuration():
    assert email_module.build_email_sink(_settings(sendgrid_api_key=None, sendgrid_sender=None)) is None
    assert isinstance(email_module.build_email_sink(_settings()), email_module.EmailNotificationSink)
