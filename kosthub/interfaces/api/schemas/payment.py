"""Schemas for payment receipt and income endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PaymentReceiptRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    room_id: int
    billing_month: int
    billing_year: int
    amount: Decimal
    receipt_path: str
    status: str
    description: str | None = None
    rejection_reason: str | None = None
    confirmed_by: int | None = None
    confirmed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RejectPaymentRequest(BaseModel):
    """Body of the reject endpoint; the reason is shown to the tenant."""

    rejection_reason: str = Field(..., min_length=1, max_length=1000)


class IncomeEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    receipt_id: int
    room_id: int
    tenant_id: int
    amount: Decimal
    billing_month: int
    billing_year: int
    description: str
    confirmed_by: int
    created_at: datetime | None = None


class MonthlyIncomeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    year: int
    total: Decimal


class IncomeSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_income: Decimal
    income_by_month: list[MonthlyIncomeRead]


__all__ = [
    "IncomeEntryRead",
    "IncomeSummaryRead",
    "MonthlyIncomeRead",
    "PaymentReceiptRead",
    "RejectPaymentRequest",
]
