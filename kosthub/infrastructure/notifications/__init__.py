"""Realtime notification helpers for the infrastructure layer."""

from .hub import HEARTBEAT_EVENT, ConnectionHandle, NotificationConnection, NotificationHub
from .publisher import (
    NOTIFICATION_EVENT,
    UNREAD_COUNT_EVENT,
    NotificationPublisher,
    serialize_notification,
)

__all__ = [
    "ConnectionHandle",
    "HEARTBEAT_EVENT",
    "NOTIFICATION_EVENT",
    "NotificationConnection",
    "NotificationHub",
    "NotificationPublisher",
    "UNREAD_COUNT_EVENT",
    "serialize_notification",
]
