"""ORM models used by the application infrastructure."""

from .role import RoleModel
from .user import UserModel
from .room import RoomModel
from .payment_receipt import PaymentReceiptModel
from .income import IncomeModel
from .notification import NotificationModel

__all__ = [
    "IncomeModel",
    "NotificationModel",
    "PaymentReceiptModel",
    "RoleModel",
    "RoomModel",
    "UserModel",
]
