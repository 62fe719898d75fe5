"""Single entry point through which every notification is created."""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.orm import Session

from kosthub.domain.entities import Notification, NotificationKind, NotificationMessage
from kosthub.infrastructure.notifications import NotificationPublisher
from kosthub.infrastructure.repositories import NotificationRepository, UserRepository
from kosthub.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Extra delivery channel (email) fed after a notification is stored."""

    def deliver(self, notification: Notification, *, recipient: str, recipient_name: str) -> bool: ...


class NotificationPipeline:
    """Persist notifications, then push them to live clients.

    Persistence is the source of truth and its failures propagate. Everything
    after the commit (hub push, unread count, email) is best effort and only
    logged when it fails.
    """

    def __init__(
        self,
        publisher: NotificationPublisher,
        *,
        email_sink: NotificationSink | None = None,
    ) -> None:
        self._publisher = publisher
        self._email_sink = email_sink

    @property
    def publisher(self) -> NotificationPublisher:
        return self._publisher

    def create_notification(
        self,
        session: Session,
        *,
        user_id: int,
        kind: NotificationKind,
        title: str,
        message: str,
        billing_month: int | None = None,
        billing_year: int | None = None,
    ) -> Notification:
        """Store a notification in its own transaction and publish it."""

        try:
            notification = self.stage(
                session,
                user_id=user_id,
                kind=kind,
                title=title,
                message=message,
                billing_month=billing_month,
                billing_year=billing_year,
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
        self.publish(session, notification)
        return notification

    def notify(
        self, session: Session, *, user_id: int, content: NotificationMessage
    ) -> Notification:
        """Shortcut for :meth:`create_notification` from a message variant."""

        period = getattr(content, "period", None)
        return self.create_notification(
            session,
            user_id=user_id,
            kind=content.kind,
            title=content.title(),
            message=content.body(),
            billing_month=period.month if period else None,
            billing_year=period.year if period else None,
        )

    def stage(
        self,
        session: Session,
        *,
        user_id: int,
        kind: NotificationKind,
        title: str,
        message: str,
        billing_month: int | None = None,
        billing_year: int | None = None,
    ) -> Notification:
        """Add a notification to the caller's unit of work without committing.

        The caller commits and then calls :meth:`publish`.
        """

        notification = Notification(
            id=None,
            user_id=user_id,
            kind=NotificationKind(kind),
            title=title,
            message=message,
            is_read=False,
            billing_month=billing_month,
            billing_year=billing_year,
            created_at=now_in_app_timezone(),
        )
        return NotificationRepository(session).create(notification)

    def stage_message(
        self, session: Session, *, user_id: int, content: NotificationMessage
    ) -> Notification:
        return self.stage(
            session,
            user_id=user_id,
            kind=content.kind,
            title=content.title(),
            message=content.body(),
            billing_month=content.period.month,
            billing_year=content.period.year,
        )

    def publish(self, session: Session, notification: Notification) -> None:
        """Push an already committed notification; never raises."""

        try:
            self._publisher.publish_notification(notification)
        except Exception as exc:
            logger.warning(
                "Realtime push of notification %s to user %s failed: %s",
                notification.id,
                notification.user_id,
                exc,
            )
        else:
            self.push_unread_count(session, notification.user_id)

        if self._email_sink is not None:
            self._send_email(session, notification)

    def push_unread_count(self, session: Session, user_id: int) -> None:
        """Recompute the unread count of ``user_id`` and push it; never raises."""

        try:
            count = NotificationRepository(session).count_unread(user_id)
            self._publisher.publish_unread_count(user_id, count)
        except Exception as exc:
            logger.warning("Unread count push to user %s failed: %s", user_id, exc)

    def _send_email(self, session: Session, notification: Notification) -> None:
        try:
            user = UserRepository(session).get(notification.user_id)
            if user is None or not user.email:
                logger.info(
                    "No email address for user %s; notification %s not emailed",
                    notification.user_id,
                    notification.id,
                )
                return
            self._email_sink.deliver(
                notification, recipient=user.email, recipient_name=user.name
            )
        except Exception as exc:
            logger.warning(
                "Email delivery of notification %s failed: %s", notification.id, exc
            )


__all__ = ["NotificationPipeline", "NotificationSink"]
