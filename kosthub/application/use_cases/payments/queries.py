"""Read-only views over payment receipts."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from kosthub.domain.entities import PaymentReceipt, PaymentStatus
from kosthub.domain.exceptions import NotFoundError
from kosthub.infrastructure.repositories import PaymentReceiptRepository


def get_receipt(session: Session, receipt_id: int) -> PaymentReceipt:
    """Return the receipt identified by ``receipt_id`` or raise an error."""

    receipt = PaymentReceiptRepository(session).get(receipt_id)
    if receipt is None:
        raise NotFoundError("Payment receipt not found")
    return receipt


def list_user_receipts(session: Session, tenant_id: int) -> Sequence[PaymentReceipt]:
    """Return the payment history of a tenant, most recent period first."""

    return PaymentReceiptRepository(session).list_for_tenant(tenant_id)


def list_pending_receipts(session: Session) -> Sequence[PaymentReceipt]:
    return PaymentReceiptRepository(session).list(status=PaymentStatus.PENDING)


def list_all_receipts(session: Session) -> Sequence[PaymentReceipt]:
    return PaymentReceiptRepository(session).list()


def list_room_receipts(
    session: Session, room_id: int, *, tenant_id: int | None = None
) -> Sequence[PaymentReceipt]:
    """Return the receipts paid for ``room_id``, newest first.

    ``tenant_id`` restricts the list to that tenant's own receipts.
    """

    receipts = PaymentReceiptRepository(session).list_for_room(room_id)
    if tenant_id is not None:
        receipts = [receipt for receipt in receipts if receipt.is_owned_by(tenant_id)]
    if not receipts:
        raise NotFoundError("No payment receipts found for this room")
    return receipts


def get_latest_room_receipt(
    session: Session, room_id: int, *, tenant_id: int | None = None
) -> PaymentReceipt:
    return list_room_receipts(session, room_id, tenant_id=tenant_id)[0]


__all__ = [
    "get_latest_room_receipt",
    "get_receipt",
    "list_all_receipts",
    "list_pending_receipts",
    "list_room_receipts",
    "list_user_receipts",
]
