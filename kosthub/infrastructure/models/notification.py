"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, text

from kosthub.infrastructure.database import Base
from kosthub.utils import now_in_app_naive_datetime

REMINDER_KIND = "payment_reminder"


class NotificationModel(Base):
    """Database representation for user notifications.

    The partial unique index allows a single reminder per user and billing
    period even when two sweeps race each other.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index(
            "ux_notification_reminder_period",
            "user_id",
            "billing_year",
            "billing_month",
            unique=True,
            sqlite_where=text(f"kind = '{REMINDER_KIND}' AND billing_month IS NOT NULL"),
            postgresql_where=text(f"kind = '{REMINDER_KIND}' AND billing_month IS NOT NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    kind = Column(String(30), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    billing_month = Column(Integer, nullable=True)
    billing_year = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel"]
