"""Tests for notification creation, publishing and read-state changes."""

from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import RecordingPublisher
from kosthub.application.use_cases.notifications import (
    NotificationPipeline,
    count_unread_notifications,
    list_notifications,
    list_unread_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from kosthub.domain.entities import (
    BillingPeriod,
    NotificationKind,
    PaymentRejectedMessage,
    PaymentReminderMessage,
)
from kosthub.domain.exceptions import NotFoundError


def test_create_notification_persists_then_pushes(session, tenant, pipeline, publisher):
    notification = pipeline.create_notification(
        session,
        user_id=tenant.id,
        kind=NotificationKind.PAYMENT_REMINDER,
        title="Hello",
        message="World",
    )

    assert notification.id is not None
    assert [event for _, event, _ in publisher.events] == ["notification", "unread_count"]
    assert publisher.of_type("unread_count")[0][2] == {"count": 1}
    assert [item.id for item in list_notifications(session, tenant.id)] == [notification.id]


def test_push_failure_does_not_lose_the_notification(session, tenant):
    pipeline = NotificationPipeline(RecordingPublisher(fail=True))

    notification = pipeline.create_notification(
        session,
        user_id=tenant.id,
        kind=NotificationKind.PAYMENT_REMINDER,
        title="Offline",
        message="Nobody is listening",
    )

    stored = list_unread_notifications(session, tenant.id)
    assert [item.id for item in stored] == [notification.id]


def test_notify_uses_the_message_variant(session, tenant, pipeline):
    content = PaymentReminderMessage(
        period=BillingPeriod.of(10, 2025), room_name="A1", amount=Decimal("1500000")
    )

    notification = pipeline.notify(session, user_id=tenant.id, content=content)

    assert notification.kind is NotificationKind.PAYMENT_REMINDER
    assert notification.billing_month == 10
    assert notification.billing_year == 2025
    assert notification.title == "Pengingat pembayaran kost Oktober"
    assert "Rp 1.500.000" in notification.message
    assert "Kamar: A1" in notification.message


def test_stage_does_not_commit(session, tenant, pipeline, publisher):
    pipeline.stage_message(
        session,
        user_id=tenant.id,
        content=PaymentRejectedMessage(period=BillingPeriod.of(3, 2025), reason="blurry"),
    )
    session.rollback()

    assert count_unread_notifications(session, tenant.id) == 0
    assert publisher.events == []


def test_email_sink_receives_committed_notification(session, tenant, publisher):
    delivered = []

    class Sink:
        def deliver(self, notification, *, recipient, recipient_name):
            delivered.append((notification.id, recipient, recipient_name))
            return True

    pipeline = NotificationPipeline(publisher, email_sink=Sink())
    notification = pipeline.create_notification(
        session,
        user_id=tenant.id,
        kind=NotificationKind.PAYMENT_APPROVED,
        title="Payment Approved",
        message="Thanks",
    )

    assert delivered == [(notification.id, "budi@example.com", "Budi")]


def test_failing_email_sink_is_swallowed(session, tenant, publisher):
    class BrokenSink:
        def deliver(self, notification, *, recipient, recipient_name):
            raise ConnectionError("smtp down")

    pipeline = NotificationPipeline(publisher, email_sink=BrokenSink())
    pipeline.create_notification(
        session,
        user_id=tenant.id,
        kind=NotificationKind.PAYMENT_APPROVED,
        title="Payment Approved",
        message="Thanks",
    )

    assert count_unread_notifications(session, tenant.id) == 1


def test_mark_notification_read_is_owner_scoped(session, tenant, admin, pipeline, publisher):
    notification = pipeline.create_notification(
        session,
        user_id=tenant.id,
        kind=NotificationKind.PAYMENT_REMINDER,
        title="Hello",
        message="World",
    )
    publisher.events.clear()

    with pytest.raises(NotFoundError):
        mark_notification_read(session, notification_id=notification.id, user_id=admin.id)

    remaining = mark_notification_read(
        session, notification_id=notification.id, user_id=tenant.id, pipeline=pipeline
    )

    assert remaining == 0
    assert publisher.of_type("unread_count") == [(tenant.id, "unread_count", {"count": 0})]


def test_mark_all_notifications_read(session, tenant, pipeline):
    for index in range(3):
        pipeline.create_notification(
            session,
            user_id=tenant.id,
            kind=NotificationKind.PAYMENT_REMINDER,
            title=f"Notice {index}",
            message="Body",
        )

    assert mark_all_notifications_read(session, user_id=tenant.id) == 3
    assert count_unread_notifications(session, tenant.id) == 0
    assert mark_all_notifications_read(session, user_id=tenant.id) == 0
