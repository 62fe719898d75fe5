"""Read access and read-acknowledgement for a user's notifications."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from kosthub.domain.entities import Notification
from kosthub.domain.exceptions import NotFoundError
from kosthub.infrastructure.repositories import NotificationRepository

from .pipeline import NotificationPipeline


def list_notifications(session: Session, user_id: int) -> Sequence[Notification]:
    """Return every notification of ``user_id``, newest first."""

    return NotificationRepository(session).list_for_user(user_id)


def list_unread_notifications(session: Session, user_id: int) -> Sequence[Notification]:
    return NotificationRepository(session).list_unread_for_user(user_id)


def count_unread_notifications(session: Session, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_read(
    session: Session,
    *,
    notification_id: int,
    user_id: int,
    pipeline: NotificationPipeline | None = None,
) -> int:
    """Mark one of the user's notifications read and return the unread count.

    Notifications owned by someone else are reported as missing.
    """

    repository = NotificationRepository(session)
    try:
        if not repository.mark_as_read(notification_id, user_id=user_id):
            raise NotFoundError("Notification not found")
        session.commit()
    except Exception:
        session.rollback()
        raise

    if pipeline is not None:
        pipeline.push_unread_count(session, user_id)
    return repository.count_unread(user_id)


def mark_all_notifications_read(
    session: Session,
    *,
    user_id: int,
    pipeline: NotificationPipeline | None = None,
) -> int:
    """Mark every unread notification of ``user_id`` read; return how many changed."""

    repository = NotificationRepository(session)
    try:
        updated = repository.mark_all_as_read(user_id)
        session.commit()
    except Exception:
        session.rollback()
        raise

    if pipeline is not None:
        pipeline.push_unread_count(session, user_id)
    return updated


__all__ = [
    "count_unread_notifications",
    "list_notifications",
    "list_unread_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
