"""Value object for the month a rent payment covers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..exceptions import ValidationError

MIN_BILLING_YEAR = 2020


@dataclass(frozen=True, order=True)
class BillingPeriod:
    """A (year, month) pair; ordering is chronological."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise ValidationError("Billing month must be between 1 and 12")
        if not isinstance(self.year, int) or self.year < MIN_BILLING_YEAR:
            raise ValidationError(f"Billing year must be {MIN_BILLING_YEAR} or later")

    @classmethod
    def of(cls, month: int, year: int) -> "BillingPeriod":
        return cls(year=year, month=month)

    @classmethod
    def containing(cls, day: date) -> "BillingPeriod":
        """Return the period ``day`` falls in."""

        return cls(year=day.year, month=day.month)


__all__ = ["BillingPeriod", "MIN_BILLING_YEAR"]
