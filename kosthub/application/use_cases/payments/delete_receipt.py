"""Use case for deleting a payment receipt."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from kosthub.domain.entities import PaymentStatus
from kosthub.domain.exceptions import ForbiddenError, NotFoundError
from kosthub.infrastructure import storage
from kosthub.infrastructure.repositories import PaymentReceiptRepository

logger = logging.getLogger(__name__)

APPROVED_DELETE_MESSAGE = "Cannot delete approved payment receipts. Please contact admin."


def delete_receipt(
    session: Session,
    receipt_id: int,
    *,
    requester_id: int,
    requester_is_admin: bool,
) -> None:
    """Delete a receipt that has not been approved.

    Tenants may only delete their own receipts. The stored image is removed
    after the row; a storage failure is logged and does not restore the row.
    """

    repository = PaymentReceiptRepository(session)
    receipt = repository.get(receipt_id)
    if receipt is None:
        raise NotFoundError("Payment receipt not found")
    if not requester_is_admin and not receipt.is_owned_by(requester_id):
        raise ForbiddenError("You can only delete your own payment receipts")
    if receipt.status is PaymentStatus.APPROVED:
        raise ForbiddenError(APPROVED_DELETE_MESSAGE)

    try:
        deleted = repository.delete_unless(
            receipt.id, protected_status=PaymentStatus.APPROVED
        )
        if not deleted:
            # approved or removed by someone else since it was read
            if repository.get(receipt.id) is None:
                raise NotFoundError("Payment receipt not found")
            raise ForbiddenError(APPROVED_DELETE_MESSAGE)
        session.commit()
    except Exception:
        session.rollback()
        raise

    try:
        storage.delete_receipt(receipt.receipt_path)
    except Exception as exc:
        logger.warning(
            "Receipt image %s could not be deleted: %s", receipt.receipt_path, exc
        )


__all__ = ["delete_receipt"]
