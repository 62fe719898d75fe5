"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from kosthub.domain.entities import BillingPeriod, Notification, NotificationKind
from kosthub.infrastructure.models import NotificationModel
from kosthub.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class NotificationRepository:
    """Append notifications and flip their read flag.

    Like the other repositories, writes are flushed and left for the caller
    to commit.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = None,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: int, *, limit: int | None = None
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
            or 0
        )

    def exists_for_period(
        self, *, user_id: int, kind: NotificationKind, period: BillingPeriod
    ) -> bool:
        query = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.kind == kind.value)
            .filter(NotificationModel.billing_month == period.month)
            .filter(NotificationModel.billing_year == period.year)
        )
        return query.first() is not None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            kind=notification.kind.value,
            title=notification.title,
            message=notification.message,
            is_read=notification.is_read,
            billing_month=notification.billing_month,
            billing_year=notification.billing_year,
            created_at=(
                ensure_app_naive_datetime(notification.created_at)
                or ensure_app_naive_datetime(now_in_app_timezone())
            ),
        )
        self.session.add(model)
        self.session.flush()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int, *, user_id: int) -> bool:
        """Mark one notification read; only its owner may do so."""

        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .update({NotificationModel.is_read: True}, synchronize_session="fetch")
        )
        self.session.flush()
        return updated == 1

    def mark_all_as_read(self, user_id: int) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .update({NotificationModel.is_read: True}, synchronize_session="fetch")
        )
        self.session.flush()
        return updated

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            kind=NotificationKind(model.kind),
            title=model.title,
            message=model.message,
            is_read=bool(model.is_read),
            billing_month=model.billing_month,
            billing_year=model.billing_year,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
