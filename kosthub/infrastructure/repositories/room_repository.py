"""Read-only access to rooms and the tenancies they carry."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy.orm import Session

from kosthub.domain.entities import Tenancy
from kosthub.infrastructure.models import RoomModel


class RoomRepository:
    """Expose rooms as :class:`Tenancy` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, room_id: int) -> Tenancy | None:
        model = self.session.get(RoomModel, room_id)
        return self._to_entity(model) if model else None

    def get_by_tenant(self, tenant_id: int) -> Tenancy | None:
        model = (
            self.session.query(RoomModel)
            .filter(RoomModel.tenant_id == tenant_id)
            .order_by(RoomModel.id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_billable(self) -> Sequence[Tenancy]:
        """Return active rooms that have a tenant and a rent start date."""

        query = (
            self.session.query(RoomModel)
            .filter(RoomModel.is_active.is_(True))
            .filter(RoomModel.tenant_id.isnot(None))
            .filter(RoomModel.rent_start_date.isnot(None))
            .order_by(RoomModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: RoomModel) -> Tenancy:
        return Tenancy(
            room_id=model.id,
            room_name=model.name,
            price=Decimal(str(model.price)),
            tenant_id=model.tenant_id,
            rent_start_date=model.rent_start_date,
            is_active=bool(model.is_active),
        )


__all__ = ["RoomRepository"]
