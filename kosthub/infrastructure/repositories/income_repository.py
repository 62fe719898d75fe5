"""Persistence helpers for the income ledger."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy.orm import Session

from kosthub.domain.entities import IncomeEntry
from kosthub.infrastructure.models import IncomeModel
from kosthub.utils import ensure_app_timezone


class IncomeRepository:
    """Append-only access to :class:`IncomeEntry` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: IncomeEntry) -> IncomeEntry:
        model = IncomeModel(
            receipt_id=entry.receipt_id,
            room_id=entry.room_id,
            tenant_id=entry.tenant_id,
            amount=entry.amount,
            billing_month=entry.billing_month,
            billing_year=entry.billing_year,
            description=entry.description,
            confirmed_by=entry.confirmed_by,
        )
        self.session.add(model)
        self.session.flush()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_by_receipt(self, receipt_id: int) -> IncomeEntry | None:
        model = (
            self.session.query(IncomeModel)
            .filter(IncomeModel.receipt_id == receipt_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list(self, *, year: int | None = None) -> Sequence[IncomeEntry]:
        query = self.session.query(IncomeModel)
        if year is not None:
            query = query.filter(IncomeModel.billing_year == year)
        query = query.order_by(
            IncomeModel.billing_year.desc(),
            IncomeModel.billing_month.desc(),
            IncomeModel.id.desc(),
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: IncomeModel) -> IncomeEntry:
        return IncomeEntry(
            id=model.id,
            receipt_id=model.receipt_id,
            room_id=model.room_id,
            tenant_id=model.tenant_id,
            amount=Decimal(str(model.amount)),
            billing_month=model.billing_month,
            billing_year=model.billing_year,
            description=model.description,
            confirmed_by=model.confirmed_by,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["IncomeRepository"]
