"""Use case for uploading a payment receipt."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from kosthub.config import get_settings
from kosthub.domain.entities import BillingPeriod, PaymentReceipt, PaymentStatus
from kosthub.domain.exceptions import ConflictError, NotFoundError, ValidationError
from kosthub.infrastructure import storage
from kosthub.infrastructure.repositories import PaymentReceiptRepository, RoomRepository

logger = logging.getLogger(__name__)


def _parse_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Amount must be a number") from exc
    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be greater than zero")
    return value


def _parse_period(month: int, year: int) -> BillingPeriod:
    try:
        return BillingPeriod.of(int(month), int(year))
    except (TypeError, ValueError) as exc:
        raise ValidationError(str(exc)) from exc


def submit_receipt(
    session: Session,
    *,
    tenant_id: int,
    month: int,
    year: int,
    amount,
    file_name: str,
    content: bytes,
    description: str | None = None,
    max_bytes: int | None = None,
) -> PaymentReceipt:
    """Validate and store a new pending receipt for the tenant's room.

    The image is uploaded before the row is written; if the insert fails the
    uploaded blob is removed again.
    """

    period = _parse_period(month, year)
    value = _parse_amount(amount)

    extension = storage.receipt_extension(file_name or "")
    if extension not in storage.RECEIPT_CONTENT_TYPES:
        raise ValidationError("Only image files are allowed (jpg, jpeg, png, gif, webp)")
    if not content:
        raise ValidationError("Receipt image is empty")
    limit = max_bytes if max_bytes is not None else get_settings().receipt_max_bytes
    if len(content) > limit:
        raise ValidationError(f"File size must not exceed {limit // (1024 * 1024)}MB")

    room = RoomRepository(session).get_by_tenant(tenant_id)
    if room is None:
        raise NotFoundError("You are not currently renting a room")

    repository = PaymentReceiptRepository(session)
    if repository.has_approved(tenant_id=tenant_id, room_id=room.room_id, period=period):
        raise ConflictError("Payment for this period has already been approved")

    blob_path = storage.build_receipt_path(file_name)
    storage.store_receipt(blob_path, content)

    try:
        receipt = repository.create(
            PaymentReceipt(
                id=None,
                tenant_id=tenant_id,
                room_id=room.room_id,
                billing_month=period.month,
                billing_year=period.year,
                amount=value,
                receipt_path=blob_path,
                status=PaymentStatus.PENDING,
                description=(description or "").strip() or None,
            )
        )
        session.commit()
    except Exception:
        session.rollback()
        try:
            storage.delete_receipt(blob_path)
        except Exception as exc:
            logger.warning("Orphaned receipt image %s not removed: %s", blob_path, exc)
        raise

    logger.info(
        "Tenant %s uploaded receipt %s for %s/%s",
        tenant_id,
        receipt.id,
        period.month,
        period.year,
    )
    return receipt


__all__ = ["submit_receipt"]
