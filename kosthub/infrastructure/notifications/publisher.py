"""Utility helpers to push notifications to live subscribers."""

from __future__ import annotations

import asyncio
from typing import Any

from anyio import from_thread

from kosthub.domain.entities import Notification

from .hub import NotificationHub


NOTIFICATION_EVENT = "notification"
UNREAD_COUNT_EVENT = "unread_count"


class NotificationPublisher:
    """Serialize notifications and hand them to the :class:`NotificationHub`.

    Use cases are synchronous. Inside a running event loop the push is
    scheduled as a task; from an AnyIO worker thread (sync FastAPI routes and
    the scheduler's sweep) it runs on the loop and waits for completion, which
    keeps ``notification`` ahead of the ``unread_count`` that follows it.
    Anywhere else ``RuntimeError`` is raised and the caller decides what to do.
    """

    def __init__(self, hub: NotificationHub) -> None:
        self._hub = hub
        self._pending: set[asyncio.Task] = set()

    @property
    def hub(self) -> NotificationHub:
        return self._hub

    def publish_notification(self, notification: Notification) -> None:
        self.send(notification.user_id, NOTIFICATION_EVENT, serialize_notification(notification))

    def publish_unread_count(self, user_id: int, count: int) -> None:
        self.send(user_id, UNREAD_COUNT_EVENT, {"count": count})

    def send(self, user_id: int, event: str, payload: Any) -> None:
        """Schedule ``event`` to be delivered to ``user_id``."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            from_thread.run(self._hub.push, user_id, event, payload)
        else:
            task = loop.create_task(self._hub.push(user_id, event, payload))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the realtime payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "kind": notification.kind.value,
        "title": notification.title,
        "message": notification.message,
        "is_read": notification.is_read,
        "billing_month": notification.billing_month,
        "billing_year": notification.billing_year,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


__all__ = [
    "NOTIFICATION_EVENT",
    "NotificationPublisher",
    "UNREAD_COUNT_EVENT",
    "serialize_notification",
]
