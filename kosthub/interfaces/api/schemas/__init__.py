from .notification import (
    MarkAllReadResponse,
    NotificationRead,
    ReminderSweepRead,
    UnreadCountRead,
)
from .payment import (
    IncomeEntryRead,
    IncomeSummaryRead,
    MonthlyIncomeRead,
    PaymentReceiptRead,
    RejectPaymentRequest,
)

__all__ = [
    "IncomeEntryRead",
    "IncomeSummaryRead",
    "MarkAllReadResponse",
    "MonthlyIncomeRead",
    "NotificationRead",
    "PaymentReceiptRead",
    "RejectPaymentRequest",
    "ReminderSweepRead",
    "UnreadCountRead",
]
