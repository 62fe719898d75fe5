"""Aggregate application use cases."""

from .notifications import NotificationPipeline, send_payment_reminders
from .payments import approve_receipt, reject_receipt, submit_receipt

__all__ = [
    "NotificationPipeline",
    "approve_receipt",
    "reject_receipt",
    "send_payment_reminders",
    "submit_receipt",
]
