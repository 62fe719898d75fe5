"""Payment receipt workflow: upload, review, deletion and income reports."""

from .approve_receipt import approve_receipt
from .delete_receipt import delete_receipt
from .income import income_report, income_summary
from .queries import (
    get_latest_room_receipt,
    get_receipt,
    list_all_receipts,
    list_pending_receipts,
    list_room_receipts,
    list_user_receipts,
)
from .reject_receipt import reject_receipt
from .submit_receipt import submit_receipt
from .transitions import ALLOWED_TRANSITIONS, can_transition, ensure_transition

__all__ = [
    "ALLOWED_TRANSITIONS",
    "approve_receipt",
    "can_transition",
    "delete_receipt",
    "ensure_transition",
    "get_latest_room_receipt",
    "get_receipt",
    "income_report",
    "income_summary",
    "list_all_receipts",
    "list_pending_receipts",
    "list_room_receipts",
    "list_user_receipts",
    "reject_receipt",
    "submit_receipt",
]
