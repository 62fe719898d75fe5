"""Notification pipeline, reminder sweep and notification read-state use cases."""

from .pipeline import NotificationPipeline, NotificationSink
from .queries import (
    count_unread_notifications,
    list_notifications,
    list_unread_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from .reminders import (
    ReminderOutcome,
    ReminderSweepResult,
    is_due_on,
    send_payment_reminders,
)

__all__ = [
    "NotificationPipeline",
    "NotificationSink",
    "ReminderOutcome",
    "ReminderSweepResult",
    "count_unread_notifications",
    "is_due_on",
    "list_notifications",
    "list_unread_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "send_payment_reminders",
]
