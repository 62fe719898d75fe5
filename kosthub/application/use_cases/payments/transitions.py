"""Allowed review transitions of a payment receipt.

``pending`` is the only state a reviewer can act on. ``approved`` is
terminal. ``rejected`` is terminal for the receipt itself; the tenant
uploads a new receipt for the same period instead of reopening the old one.
"""

from __future__ import annotations

from typing import Final

from kosthub.domain.entities import PaymentReceipt, PaymentStatus
from kosthub.domain.exceptions import ConflictError

ALLOWED_TRANSITIONS: Final[dict[PaymentStatus, frozenset[PaymentStatus]]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.APPROVED, PaymentStatus.REJECTED}),
    PaymentStatus.APPROVED: frozenset(),
    PaymentStatus.REJECTED: frozenset(),
}

_CONFLICT_MESSAGES: Final[dict[tuple[PaymentStatus, PaymentStatus], str]] = {
    (PaymentStatus.APPROVED, PaymentStatus.APPROVED): "Payment has already been approved",
    (PaymentStatus.APPROVED, PaymentStatus.REJECTED): "Cannot reject an approved payment",
    (PaymentStatus.REJECTED, PaymentStatus.APPROVED): (
        "Payment has already been rejected; the tenant must upload a new receipt"
    ),
    (PaymentStatus.REJECTED, PaymentStatus.REJECTED): "Payment has already been rejected",
}


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(receipt: PaymentReceipt, target: PaymentStatus) -> None:
    """Raise :class:`ConflictError` unless ``receipt`` may move to ``target``."""

    if can_transition(receipt.status, target):
        return
    message = _CONFLICT_MESSAGES.get(
        (receipt.status, target),
        f"Cannot move payment from {receipt.status.value} to {target.value}",
    )
    raise ConflictError(message)


__all__ = ["ALLOWED_TRANSITIONS", "can_transition", "ensure_transition"]
