"""Income ledger reports."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy.orm import Session

from kosthub.domain.entities import IncomeEntry, IncomeSummary, MonthlyIncome
from kosthub.infrastructure.repositories import IncomeRepository


def income_report(session: Session, *, year: int | None = None) -> Sequence[IncomeEntry]:
    """Return ledger entries, newest billing period first."""

    return IncomeRepository(session).list(year=year)


def income_summary(session: Session, *, year: int | None = None) -> IncomeSummary:
    """Total the ledger and group it by billing period, newest first."""

    totals: dict[tuple[int, int], Decimal] = {}
    for entry in income_report(session, year=year):
        key = (entry.billing_year, entry.billing_month)
        totals[key] = totals.get(key, Decimal("0")) + entry.amount

    by_month = [
        MonthlyIncome(month=month, year=period_year, total=total)
        for (period_year, month), total in sorted(totals.items(), reverse=True)
    ]
    return IncomeSummary(
        total_income=sum(totals.values(), Decimal("0")),
        income_by_month=by_month,
    )


__all__ = ["income_report", "income_summary"]
