"""Domain entity for a tenant's proof of rent payment."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .billing_period import BillingPeriod


class PaymentStatus(str, Enum):
    """Review state of a payment receipt."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class PaymentReceipt:
    """Uploaded proof of payment for one billing period.

    A tenant may upload several receipts for the same period (a rejected
    receipt is never re-evaluated, the tenant uploads a new one), but at most
    one of them ever reaches ``approved``.
    """

    id: int | None
    tenant_id: int
    room_id: int
    billing_month: int
    billing_year: int
    amount: Decimal
    receipt_path: str
    status: PaymentStatus = PaymentStatus.PENDING
    description: str | None = None
    rejection_reason: str | None = None
    confirmed_by: int | None = None
    confirmed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def period(self) -> BillingPeriod:
        return BillingPeriod.of(self.billing_month, self.billing_year)

    def is_owned_by(self, user_id: int) -> bool:
        return self.tenant_id == user_id


__all__ = ["PaymentReceipt", "PaymentStatus"]
