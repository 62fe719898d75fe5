"""Domain entity describing a room and the tenant currently renting it."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class Tenancy:
    """A room as seen by the reminder engine and the payment workflow.

    ``rent_start_date`` carries the tenant's personal due day: its day of the
    month is the day rent is expected every month.
    """

    room_id: int | None
    room_name: str
    price: Decimal
    tenant_id: int | None
    rent_start_date: date | None
    is_active: bool

    @property
    def due_day(self) -> int | None:
        if self.rent_start_date is None:
            return None
        return self.rent_start_date.day

    def is_billable(self) -> bool:
        """Return ``True`` when the room is active, rented and dated."""

        return (
            self.is_active
            and self.tenant_id is not None
            and self.rent_start_date is not None
        )


__all__ = ["Tenancy"]
