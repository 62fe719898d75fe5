"""Domain entities exposed by the application."""

from .billing_period import MIN_BILLING_YEAR, BillingPeriod
from .income_entry import IncomeEntry, IncomeSummary, MonthlyIncome
from .notification import (
    Notification,
    NotificationKind,
    NotificationMessage,
    PaymentApprovedMessage,
    PaymentRejectedMessage,
    PaymentReminderMessage,
)
from .payment_receipt import PaymentReceipt, PaymentStatus
from .role import ROLE_ADMIN, ROLE_TENANT, Role
from .tenancy import Tenancy
from .user import User

__all__ = [
    "BillingPeriod",
    "IncomeEntry",
    "IncomeSummary",
    "MIN_BILLING_YEAR",
    "MonthlyIncome",
    "Notification",
    "NotificationKind",
    "NotificationMessage",
    "PaymentApprovedMessage",
    "PaymentReceipt",
    "PaymentRejectedMessage",
    "PaymentReminderMessage",
    "PaymentStatus",
    "ROLE_ADMIN",
    "ROLE_TENANT",
    "Role",
    "Tenancy",
    "User",
]
