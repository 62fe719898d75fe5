"""SQLAlchemy model for income ledger entries."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from kosthub.infrastructure.database import Base
from kosthub.utils import now_in_app_naive_datetime


class IncomeModel(Base):
    """One ledger line per approved receipt; the unique receipt id enforces it."""

    __tablename__ = "income"

    id = Column(Integer, primary_key=True, index=True)
    receipt_id = Column(
        Integer,
        ForeignKey("payment_receipt.id"),
        nullable=False,
        unique=True,
    )
    room_id = Column(Integer, nullable=False, index=True)
    tenant_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    billing_month = Column(Integer, nullable=False)
    billing_year = Column(Integer, nullable=False, index=True)
    description = Column(String(255), nullable=False)
    confirmed_by = Column(Integer, ForeignKey("user.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["IncomeModel"]
