"""Use case for rejecting a pending payment receipt."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from kosthub.domain.entities import PaymentReceipt, PaymentRejectedMessage, PaymentStatus
from kosthub.domain.exceptions import ConflictError, NotFoundError, ValidationError
from kosthub.infrastructure.repositories import PaymentReceiptRepository
from kosthub.utils import now_in_app_timezone

from ..notifications.pipeline import NotificationPipeline
from .transitions import ensure_transition

logger = logging.getLogger(__name__)


def reject_receipt(
    session: Session,
    receipt_id: int,
    admin_id: int,
    reason: str,
    *,
    pipeline: NotificationPipeline,
) -> PaymentReceipt:
    """Reject a pending receipt and tell the tenant why.

    A rejected receipt stays rejected; the tenant uploads a new receipt for
    the same period.
    """

    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Rejection reason is required")

    receipts = PaymentReceiptRepository(session)
    try:
        receipt = receipts.get(receipt_id)
        if receipt is None:
            raise NotFoundError("Payment receipt not found")
        ensure_transition(receipt, PaymentStatus.REJECTED)

        applied = receipts.transition(
            receipt.id,
            from_status=PaymentStatus.PENDING,
            to_status=PaymentStatus.REJECTED,
            confirmed_by=admin_id,
            confirmed_at=now_in_app_timezone(),
            rejection_reason=reason,
        )
        if not applied:
            raise ConflictError("Payment has already been reviewed")

        notification = pipeline.stage_message(
            session,
            user_id=receipt.tenant_id,
            content=PaymentRejectedMessage(period=receipt.period, reason=reason),
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Payment receipt %s rejected by admin %s", receipt.id, admin_id)
    pipeline.publish(session, notification)
    return receipts.get(receipt.id)


__all__ = ["reject_receipt"]
