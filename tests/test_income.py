"""Tests for the income report and summary."""

from __future__ import annotations

from decimal import Decimal

from conftest import create_receipt, create_room, create_user
from kosthub.application.use_cases.payments import (
    approve_receipt,
    income_report,
    income_summary,
)


def _approved(session, admin, pipeline, *, tenant, room, month, year, amount):
    receipt = create_receipt(
        session,
        tenant_id=tenant.id,
        room_id=room.id,
        month=month,
        year=year,
        amount=amount,
    )
    return approve_receipt(session, receipt.id, admin.id, pipeline=pipeline)


def test_income_summary_groups_by_period_newest_first(session, admin, pipeline):
    first = create_user(session, name="Ani")
    second = create_user(session, name="Dodi")
    room_a = create_room(session, name="A1", tenant_id=first.id)
    room_b = create_room(session, name="B1", tenant_id=second.id)

    _approved(session, admin, pipeline, tenant=first, room=room_a, month=9, year=2025, amount="1500000")
    _approved(session, admin, pipeline, tenant=second, room=room_b, month=10, year=2025, amount="1200000")
    _approved(session, admin, pipeline, tenant=first, room=room_a, month=10, year=2025, amount="1500000")
    _approved(session, admin, pipeline, tenant=first, room=room_a, month=12, year=2024, amount="1400000")

    summary = income_summary(session)

    assert summary.total_income == Decimal("5600000")
    assert [(item.year, item.month, item.total) for item in summary.income_by_month] == [
        (2025, 10, Decimal("2700000")),
        (2025, 9, Decimal("1500000")),
        (2024, 12, Decimal("1400000")),
    ]

    only_2024 = income_summary(session, year=2024)
    assert only_2024.total_income == Decimal("1400000")
    assert [entry.billing_year for entry in income_report(session, year=2024)] == [2024]


def test_empty_ledger_summary(session):
    summary = income_summary(session)

    assert summary.total_income == Decimal("0")
    assert summary.income_by_month == []
