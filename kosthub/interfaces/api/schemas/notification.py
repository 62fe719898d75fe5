"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    kind: str
    title: str
    message: str
    is_read: bool
    billing_month: int | None = None
    billing_year: int | None = None
    created_at: datetime | None = None


class UnreadCountRead(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int
    count: int


class ReminderSweepRead(BaseModel):
    """Outcome of one payment reminder sweep."""

    run_date: date
    billing_month: int
    billing_year: int
    examined: int
    sent: int
    not_due: int
    already_paid: int
    already_notified: int
    failed: int
    notified_user_ids: list[int]


__all__ = [
    "MarkAllReadResponse",
    "NotificationRead",
    "ReminderSweepRead",
    "UnreadCountRead",
]
