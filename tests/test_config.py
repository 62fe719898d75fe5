"""Tests for the settings model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kosthub.config import Settings


def test_defaults():
    settings = Settings(database_url="sqlite://", secret_key="secret")

    assert settings.app_timezone == "Asia/Jakarta"
    assert (settings.reminder_hour, settings.reminder_minute) == (9, 0)
    assert settings.heartbeat_interval_seconds == 30
    assert settings.reminder_short_month_policy == "skip"
    assert settings.receipt_max_bytes == 5 * 1024 * 1024
    assert settings.approval_requires_room_price is False
    assert settings.email_enabled is False


def test_sendgrid_settings_must_come_in_pairs():
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", secret_key="secret", sendgrid_api_key="SG.key")

    settings = Settings(
        database_url="sqlite://",
        secret_key="secret",
        sendgrid_api_key="SG.key",
        sendgrid_sender="kost@example.com",
    )
    assert settings.email_enabled is True


def test_unknown_short_month_policy_is_rejected():
    with pytest.raises(ValidationError):
        Settings(
            database_url="sqlite://",
            secret_key="secret",
            reminder_short_month_policy="first_day",
        )
