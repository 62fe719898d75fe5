"""Use case for approving a pending payment receipt."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kosthub.domain.entities import (
    IncomeEntry,
    PaymentApprovedMessage,
    PaymentReceipt,
    PaymentStatus,
)
from kosthub.config import get_settings
from kosthub.domain.exceptions import ConflictError, NotFoundError, ValidationError
from kosthub.infrastructure.repositories import (
    IncomeRepository,
    PaymentReceiptRepository,
    RoomRepository,
)
from kosthub.utils import format_period, format_rupiah, now_in_app_timezone

from ..notifications.pipeline import NotificationPipeline
from .transitions import ensure_transition

logger = logging.getLogger(__name__)


def approve_receipt(
    session: Session,
    receipt_id: int,
    admin_id: int,
    *,
    pipeline: NotificationPipeline,
    require_room_price: bool | None = None,
) -> PaymentReceipt:
    """Approve a receipt, record its income and notify the tenant.

    The status change, the ledger entry and the notification row commit in
    one transaction; if any of them fails nothing is written. The realtime
    push happens after the commit and cannot undo the approval.

    With ``require_room_price`` (default: ``APPROVAL_REQUIRES_ROOM_PRICE``)
    the amount must equal the room price.
    """

    receipts = PaymentReceiptRepository(session)
    try:
        receipt = receipts.get(receipt_id)
        if receipt is None:
            raise NotFoundError("Payment receipt not found")
        ensure_transition(receipt, PaymentStatus.APPROVED)

        room = RoomRepository(session).get(receipt.room_id)
        if room is None:
            raise NotFoundError("Room not found")

        if require_room_price is None:
            require_room_price = get_settings().approval_requires_room_price
        if require_room_price and receipt.amount != room.price:
            raise ValidationError(
                f"Payment amount ({format_rupiah(receipt.amount)}) does not match "
                f"room rent ({format_rupiah(room.price)})"
            )

        if receipts.has_approved(
            tenant_id=receipt.tenant_id, room_id=None, period=receipt.period
        ):
            raise ConflictError("Payment for this period has already been approved")

        applied = receipts.transition(
            receipt.id,
            from_status=PaymentStatus.PENDING,
            to_status=PaymentStatus.APPROVED,
            confirmed_by=admin_id,
            confirmed_at=now_in_app_timezone(),
        )
        if not applied:
            raise ConflictError("Payment has already been reviewed")

        IncomeRepository(session).create(
            IncomeEntry(
                id=None,
                receipt_id=receipt.id,
                room_id=receipt.room_id,
                tenant_id=receipt.tenant_id,
                amount=receipt.amount,
                billing_month=receipt.billing_month,
                billing_year=receipt.billing_year,
                description=(
                    f"Payment {format_period(receipt.billing_month, receipt.billing_year)}"
                    f" - {room.room_name}"
                ),
                confirmed_by=admin_id,
            )
        )
        notification = pipeline.stage_message(
            session,
            user_id=receipt.tenant_id,
            content=PaymentApprovedMessage(
                period=receipt.period,
                room_name=room.room_name,
                amount=receipt.amount,
                description=receipt.description,
            ),
        )
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError("Payment has already been approved") from exc
    except Exception:
        session.rollback()
        raise

    logger.info(
        "Payment receipt %s approved by admin %s (%s/%s, %s)",
        receipt.id,
        admin_id,
        receipt.billing_month,
        receipt.billing_year,
        receipt.amount,
    )
    pipeline.publish(session, notification)
    return receipts.get(receipt.id)


__all__ = ["approve_receipt"]
