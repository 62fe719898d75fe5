"""Tests for the daily payment reminder sweep."""

from __future__ import annotations

from datetime import date

import pytest

from conftest import create_receipt, create_room, create_user
from kosthub.application.use_cases.notifications import (
    is_due_on,
    list_notifications,
    send_payment_reminders,
)
from kosthub.application.use_cases.notifications import reminders as reminders_module
from kosthub.domain.entities import NotificationKind

SWEEP_DAY = date(2025, 10, 5)


def test_reminder_sent_once_per_period_even_when_swept_twice(
    session, tenant, tenant_room, pipeline, publisher
):
    first = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)
    second = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    assert first.sent == 1
    assert first.notified_user_ids == [tenant.id]
    assert second.sent == 0
    assert second.already_notified == 1

    notifications = list_notifications(session, tenant.id)
    assert len(notifications) == 1
    assert notifications[0].kind is NotificationKind.PAYMENT_REMINDER
    assert (notifications[0].billing_month, notifications[0].billing_year) == (10, 2025)
    assert len(publisher.of_type("notification")) == 1


def test_no_reminder_when_period_already_paid(session, tenant, tenant_room, pipeline):
    create_receipt(
        session,
        tenant_id=tenant.id,
        room_id=tenant_room.id,
        month=10,
        year=2025,
        status="approved",
    )

    result = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    assert result.sent == 0
    assert result.already_paid == 1
    assert list_notifications(session, tenant.id) == []


def test_pending_or_rejected_receipt_does_not_count_as_paid(
    session, tenant, tenant_room, pipeline
):
    create_receipt(
        session, tenant_id=tenant.id, room_id=tenant_room.id, status="rejected"
    )

    result = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    assert result.sent == 1


def test_tenants_not_due_today_are_skipped(session, tenant, tenant_room, pipeline):
    result = send_payment_reminders(session, pipeline=pipeline, today=date(2025, 10, 6))

    assert result.examined == 1
    assert result.not_due == 1
    assert list_notifications(session, tenant.id) == []


def test_rooms_without_tenancy_are_ignored(session, pipeline):
    create_room(session, name="Empty", tenant_id=None, rent_start_date=date(2025, 1, 5))
    create_room(session, name="Closed", tenant_id=None, rent_start_date=None, is_active=False)

    result = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    assert result.examined == 0
    assert result.sent == 0


@pytest.mark.parametrize(
    ("due_day", "today", "policy", "expected"),
    [
        (5, date(2025, 10, 5), "skip", True),
        (31, date(2025, 11, 30), "skip", False),
        (31, date(2025, 11, 30), "last_day", True),
        (30, date(2025, 2, 28), "last_day", True),
        (28, date(2025, 2, 27), "last_day", False),
        (29, date(2024, 2, 29), "skip", True),
    ],
)
def test_is_due_on(due_day, today, policy, expected):
    assert is_due_on(due_day, today, policy=policy) is expected


def test_short_month_policy_applies_to_the_sweep(session, pipeline):
    tenant = create_user(session, name="Sari")
    create_room(
        session, name="B2", tenant_id=tenant.id, rent_start_date=date(2025, 1, 31)
    )

    skipped = send_payment_reminders(
        session, pipeline=pipeline, today=date(2025, 11, 30), short_month_policy="skip"
    )
    fired = send_payment_reminders(
        session, pipeline=pipeline, today=date(2025, 11, 30), short_month_policy="last_day"
    )

    assert skipped.sent == 0
    assert fired.sent == 1


def test_one_failing_tenancy_does_not_abort_the_sweep(
    session, pipeline, monkeypatch: pytest.MonkeyPatch
):
    first = create_user(session, name="First")
    second = create_user(session, name="Second")
    create_room(session, name="C1", tenant_id=first.id, rent_start_date=date(2025, 1, 5))
    create_room(session, name="C2", tenant_id=second.id, rent_start_date=date(2025, 1, 5))

    original_notify = pipeline.notify

    def flaky_notify(db, *, user_id, content):
        if user_id == first.id:
            raise RuntimeError("database hiccup")
        return original_notify(db, user_id=user_id, content=content)

    monkeypatch.setattr(pipeline, "notify", flaky_notify)

    result = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    assert result.failed == 1
    assert result.sent == 1
    assert result.notified_user_ids == [second.id]
    assert list_notifications(session, second.id)


def test_unique_index_blocks_duplicate_reminders(
    session, tenant, tenant_room, pipeline, monkeypatch: pytest.MonkeyPatch
):
    send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    # simulate a second process that passed the existence check concurrently
    monkeypatch.setattr(
        reminders_module.NotificationRepository,
        "exists_for_period",
        lambda self, **kwargs: False,
    )
    result = send_payment_reminders(session, pipeline=pipeline, today=SWEEP_DAY)

    assert result.already_notified == 1
    assert len(list_notifications(session, tenant.id)) == 1
