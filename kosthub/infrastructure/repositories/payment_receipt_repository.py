"""Persistence helpers for payment receipts."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from kosthub.domain.entities import BillingPeriod, PaymentReceipt, PaymentStatus
from kosthub.infrastructure.models import PaymentReceiptModel
from kosthub.utils import ensure_app_naive_datetime, ensure_app_timezone


class PaymentReceiptRepository:
    """Provide queries and state changes for :class:`PaymentReceipt` objects.

    Writes are flushed but never committed; the calling use case owns the
    transaction so a status change and its side effects commit together.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, receipt_id: int) -> PaymentReceipt | None:
        # conditional updates and other sessions may have changed the row
        model = self.session.get(PaymentReceiptModel, receipt_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def list_for_tenant(self, tenant_id: int) -> Sequence[PaymentReceipt]:
        query = (
            self.session.query(PaymentReceiptModel)
            .filter(PaymentReceiptModel.tenant_id == tenant_id)
            .order_by(
                PaymentReceiptModel.billing_year.desc(),
                PaymentReceiptModel.billing_month.desc(),
                PaymentReceiptModel.created_at.desc(),
                PaymentReceiptModel.id.desc(),
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def list(self, *, status: PaymentStatus | None = None) -> Sequence[PaymentReceipt]:
        query = self.session.query(PaymentReceiptModel)
        if status is not None:
            query = query.filter(PaymentReceiptModel.status == status.value)
        query = query.order_by(
            PaymentReceiptModel.created_at.desc(), PaymentReceiptModel.id.desc()
        )
        return [self._to_entity(model) for model in query.all()]

    def list_for_room(self, room_id: int) -> Sequence[PaymentReceipt]:
        query = (
            self.session.query(PaymentReceiptModel)
            .filter(PaymentReceiptModel.room_id == room_id)
            .order_by(
                PaymentReceiptModel.created_at.desc(), PaymentReceiptModel.id.desc()
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def has_approved(
        self, *, tenant_id: int, room_id: int | None, period: BillingPeriod
    ) -> bool:
        """Return ``True`` when ``tenant_id`` already paid for ``period``.

        ``room_id`` narrows the check to one room; ``None`` checks any room.
        """

        query = (
            self.session.query(PaymentReceiptModel.id)
            .filter(PaymentReceiptModel.tenant_id == tenant_id)
            .filter(PaymentReceiptModel.billing_month == period.month)
            .filter(PaymentReceiptModel.billing_year == period.year)
            .filter(PaymentReceiptModel.status == PaymentStatus.APPROVED.value)
        )
        if room_id is not None:
            query = query.filter(PaymentReceiptModel.room_id == room_id)
        return query.first() is not None

    def create(self, receipt: PaymentReceipt) -> PaymentReceipt:
        model = PaymentReceiptModel(
            tenant_id=receipt.tenant_id,
            room_id=receipt.room_id,
            billing_month=receipt.billing_month,
            billing_year=receipt.billing_year,
            amount=receipt.amount,
            receipt_path=receipt.receipt_path,
            status=receipt.status.value,
            description=receipt.description,
        )
        self.session.add(model)
        self.session.flush()
        self.session.refresh(model)
        return self._to_entity(model)

    def transition(
        self,
        receipt_id: int,
        *,
        from_status: PaymentStatus,
        to_status: PaymentStatus,
        confirmed_by: int,
        confirmed_at: datetime,
        rejection_reason: str | None = None,
    ) -> bool:
        """Move a receipt from ``from_status`` to ``to_status`` atomically.

        The update is conditional on the stored status, so two concurrent
        reviewers cannot both apply a transition: the loser sees ``False``.
        """

        values = {
            PaymentReceiptModel.status: to_status.value,
            PaymentReceiptModel.confirmed_by: confirmed_by,
            PaymentReceiptModel.confirmed_at: ensure_app_naive_datetime(confirmed_at),
            PaymentReceiptModel.updated_at: ensure_app_naive_datetime(confirmed_at),
        }
        if rejection_reason is not None:
            values[PaymentReceiptModel.rejection_reason] = rejection_reason

        updated = (
            self.session.query(PaymentReceiptModel)
            .filter(PaymentReceiptModel.id == receipt_id)
            .filter(PaymentReceiptModel.status == from_status.value)
            .update(values, synchronize_session="fetch")
        )
        self.session.flush()
        return updated == 1

    def delete_unless(self, receipt_id: int, *, protected_status: PaymentStatus) -> bool:
        """Delete the receipt unless it is in ``protected_status``.

        The status check is part of the DELETE statement, so a review
        committed concurrently cannot slip in between check and delete.
        Returns ``False`` when no row was deleted.
        """

        deleted = (
            self.session.query(PaymentReceiptModel)
            .filter(PaymentReceiptModel.id == receipt_id)
            .filter(PaymentReceiptModel.status != protected_status.value)
            .delete(synchronize_session="fetch")
        )
        self.session.flush()
        return deleted == 1

    @staticmethod
    def _to_entity(model: PaymentReceiptModel) -> PaymentReceipt:
        return PaymentReceipt(
            id=model.id,
            tenant_id=model.tenant_id,
            room_id=model.room_id,
            billing_month=model.billing_month,
            billing_year=model.billing_year,
            amount=Decimal(str(model.amount)),
            receipt_path=model.receipt_path,
            status=PaymentStatus(model.status),
            description=model.description,
            rejection_reason=model.rejection_reason,
            confirmed_by=model.confirmed_by,
            confirmed_at=ensure_app_timezone(model.confirmed_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["PaymentReceiptRepository"]
