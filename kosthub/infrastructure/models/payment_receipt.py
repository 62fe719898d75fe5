"""SQLAlchemy model for uploaded payment receipts."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, text

from kosthub.infrastructure.database import Base
from kosthub.utils import now_in_app_naive_datetime

APPROVED_STATUS = "approved"


class PaymentReceiptModel(Base):
    """Database representation of a payment receipt.

    ``room_id`` is kept without a foreign key so that receipts outlive the
    room they were paid for; approval checks the room still exists. The
    partial unique index lets at most one receipt per tenant and billing
    period reach ``approved``.
    """

    __tablename__ = "payment_receipt"
    __table_args__ = (
        Index(
            "ix_payment_receipt_tenant_period",
            "tenant_id",
            "billing_year",
            "billing_month",
        ),
        Index(
            "ux_payment_receipt_approved_period",
            "tenant_id",
            "billing_year",
            "billing_month",
            unique=True,
            sqlite_where=text(f"status = '{APPROVED_STATUS}'"),
            postgresql_where=text(f"status = '{APPROVED_STATUS}'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    room_id = Column(Integer, nullable=False, index=True)
    billing_month = Column(Integer, nullable=False)
    billing_year = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    receipt_path = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    description = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    confirmed_by = Column(Integer, ForeignKey("user.id"), nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["PaymentReceiptModel"]
