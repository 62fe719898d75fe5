"""Repository implementations for infrastructure layer."""

from .income_repository import IncomeRepository
from .notification_repository import NotificationRepository
from .payment_receipt_repository import PaymentReceiptRepository
from .room_repository import RoomRepository
from .user_repository import UserRepository

__all__ = [
    "IncomeRepository",
    "NotificationRepository",
    "PaymentReceiptRepository",
    "RoomRepository",
    "UserRepository",
]
