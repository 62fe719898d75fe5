"""Domain entity representing a user notification and its message variants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from kosthub.utils.formatting import format_period, format_rupiah, month_name

from .billing_period import BillingPeriod


class NotificationKind(str, Enum):
    """Closed set of notification kinds this service produces."""

    PAYMENT_REMINDER = "payment_reminder"
    PAYMENT_APPROVED = "payment_approved"
    PAYMENT_REJECTED = "payment_rejected"


@dataclass
class Notification:
    """Information message delivered to a specific user.

    Once created only ``is_read`` changes; kind, owner and billing period are
    fixed for the lifetime of the record.
    """

    id: int | None
    user_id: int
    kind: NotificationKind
    title: str
    message: str
    is_read: bool = False
    billing_month: int | None = None
    billing_year: int | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PaymentReminderMessage:
    """Monthly rent reminder, worded for the tenant in Indonesian."""

    period: BillingPeriod
    room_name: str
    amount: Decimal

    kind = NotificationKind.PAYMENT_REMINDER

    def title(self) -> str:
        return f"Pengingat pembayaran kost {month_name(self.period.month, locale='id')}"

    def body(self) -> str:
        return (
            f"Kamar: {self.room_name} • "
            f"Bulan: {format_period(self.period.month, self.period.year, locale='id')} • "
            f"Jumlah: {format_rupiah(self.amount)}"
        )


@dataclass(frozen=True)
class PaymentApprovedMessage:
    """Confirmation that an uploaded receipt was accepted."""

    period: BillingPeriod
    room_name: str
    amount: Decimal
    description: str | None = None

    kind = NotificationKind.PAYMENT_APPROVED

    def title(self) -> str:
        return "Payment Approved"

    def body(self) -> str:
        text = (
            f"Your payment of {format_rupiah(self.amount)} for {self.room_name} "
            f"({format_period(self.period.month, self.period.year)}) has been approved"
        )
        if self.description:
            text = f"{text}. Note: {self.description}"
        return text


@dataclass(frozen=True)
class PaymentRejectedMessage:
    """Notice that an uploaded receipt was refused, with the admin's reason."""

    period: BillingPeriod
    reason: str

    kind = NotificationKind.PAYMENT_REJECTED

    def title(self) -> str:
        return "Payment Rejected"

    def body(self) -> str:
        return (
            f"Your payment for {format_period(self.period.month, self.period.year)} "
            f"has been rejected. Reason: {self.reason}"
        )


NotificationMessage = PaymentReminderMessage | PaymentApprovedMessage | PaymentRejectedMessage


__all__ = [
    "Notification",
    "NotificationKind",
    "NotificationMessage",
    "PaymentApprovedMessage",
    "PaymentRejectedMessage",
    "PaymentReminderMessage",
]
