"""Domain entity for a ledger line recorded when a receipt is approved."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class IncomeEntry:
    """Immutable mirror of an approved receipt in the income ledger."""

    id: int | None
    receipt_id: int
    room_id: int
    tenant_id: int
    amount: Decimal
    billing_month: int
    billing_year: int
    description: str
    confirmed_by: int
    created_at: datetime | None = None


@dataclass
class MonthlyIncome:
    """Aggregated income for one billing period."""

    month: int
    year: int
    total: Decimal


@dataclass
class IncomeSummary:
    """Total income plus its per-period breakdown, newest period first."""

    total_income: Decimal
    income_by_month: list[MonthlyIncome]


__all__ = ["IncomeEntry", "IncomeSummary", "MonthlyIncome"]
