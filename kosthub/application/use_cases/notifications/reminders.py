"""Daily sweep that reminds tenants to pay rent on their personal due day."""

from __future__ import annotations

import calendar
import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kosthub.config import get_settings
from kosthub.domain.entities import (
    BillingPeriod,
    NotificationKind,
    PaymentReminderMessage,
    Tenancy,
)
from kosthub.infrastructure.repositories import (
    NotificationRepository,
    PaymentReceiptRepository,
    RoomRepository,
)
from kosthub.utils import today_in_app_timezone

from .pipeline import NotificationPipeline

logger = logging.getLogger(__name__)

SHORT_MONTH_SKIP = "skip"
SHORT_MONTH_LAST_DAY = "last_day"

# Scheduled and manual sweeps in the same process run one at a time.
_sweep_lock = threading.Lock()


class ReminderOutcome(str, Enum):
    SENT = "sent"
    NOT_DUE = "not_due"
    ALREADY_PAID = "already_paid"
    ALREADY_NOTIFIED = "already_notified"


@dataclass
class ReminderSweepResult:
    """Counters describing what one sweep did."""

    run_date: date
    period: BillingPeriod
    examined: int = 0
    sent: int = 0
    not_due: int = 0
    already_paid: int = 0
    already_notified: int = 0
    failed: int = 0
    notified_user_ids: list[int] = field(default_factory=list)

    def record(self, outcome: ReminderOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)


def is_due_on(due_day: int, today: date, *, policy: str = SHORT_MONTH_SKIP) -> bool:
    """Return ``True`` when a tenant whose due day is ``due_day`` is due ``today``.

    With the ``skip`` policy a due day missing from the current month (31 in
    a 30-day month) produces no reminder that month. With ``last_day`` the
    reminder fires on the month's last day instead.
    """

    if due_day == today.day:
        return True
    if policy == SHORT_MONTH_LAST_DAY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.day == last_day and due_day > last_day
    return False


def send_payment_reminders(
    session: Session,
    *,
    pipeline: NotificationPipeline,
    today: date | None = None,
    short_month_policy: str | None = None,
) -> ReminderSweepResult:
    """Notify every tenant whose rent is due today and who has not paid yet.

    The sweep is idempotent per (tenant, billing period): a tenant who
    already paid or was already reminded for the period is skipped, so
    running it again the same day sends nothing new. A failure on one
    tenancy is logged and the sweep moves on to the next.
    """

    today = today or today_in_app_timezone()
    policy = short_month_policy or get_settings().reminder_short_month_policy
    period = BillingPeriod.containing(today)
    result = ReminderSweepResult(run_date=today, period=period)

    with _sweep_lock:
        logger.info("Payment reminder sweep started for %s", today.isoformat())
        tenancies = RoomRepository(session).list_billable()
        for tenancy in tenancies:
            result.examined += 1
            try:
                outcome = _remind_tenancy(
                    session, pipeline, tenancy, today=today, period=period, policy=policy
                )
            except Exception:
                session.rollback()
                result.failed += 1
                logger.exception(
                    "Payment reminder failed for room %s (tenant %s)",
                    tenancy.room_id,
                    tenancy.tenant_id,
                )
                continue
            result.record(outcome)
            if outcome is ReminderOutcome.SENT:
                result.notified_user_ids.append(tenancy.tenant_id)

    logger.info(
        "Payment reminder sweep finished: %s examined, %s sent, %s not due, "
        "%s already paid, %s already notified, %s failed",
        result.examined,
        result.sent,
        result.not_due,
        result.already_paid,
        result.already_notified,
        result.failed,
    )
    return result


def _remind_tenancy(
    session: Session,
    pipeline: NotificationPipeline,
    tenancy: Tenancy,
    *,
    today: date,
    period: BillingPeriod,
    policy: str,
) -> ReminderOutcome:
    if not tenancy.is_billable():
        return ReminderOutcome.NOT_DUE

    if not is_due_on(tenancy.due_day, today, policy=policy):
        logger.debug(
            "Skipping tenant %s: today is %s, due day is %s",
            tenancy.tenant_id,
            today.day,
            tenancy.due_day,
        )
        return ReminderOutcome.NOT_DUE

    if PaymentReceiptRepository(session).has_approved(
        tenant_id=tenancy.tenant_id, room_id=tenancy.room_id, period=period
    ):
        logger.info(
            "Tenant %s already paid for %s/%s", tenancy.tenant_id, period.month, period.year
        )
        return ReminderOutcome.ALREADY_PAID

    if NotificationRepository(session).exists_for_period(
        user_id=tenancy.tenant_id, kind=NotificationKind.PAYMENT_REMINDER, period=period
    ):
        logger.info(
            "Reminder already sent to tenant %s for %s/%s",
            tenancy.tenant_id,
            period.month,
            period.year,
        )
        return ReminderOutcome.ALREADY_NOTIFIED

    content = PaymentReminderMessage(
        period=period, room_name=tenancy.room_name, amount=tenancy.price
    )
    try:
        pipeline.notify(session, user_id=tenancy.tenant_id, content=content)
    except IntegrityError:
        # another process stored the same reminder between the check and the insert
        logger.info(
            "Reminder for tenant %s and %s/%s was created concurrently",
            tenancy.tenant_id,
            period.month,
            period.year,
        )
        return ReminderOutcome.ALREADY_NOTIFIED

    logger.info(
        "Payment reminder created for tenant %s (room %s) for %s/%s",
        tenancy.tenant_id,
        tenancy.room_name,
        period.month,
        period.year,
    )
    return ReminderOutcome.SENT


__all__ = [
    "ReminderOutcome",
    "ReminderSweepResult",
    "SHORT_MONTH_LAST_DAY",
    "SHORT_MONTH_SKIP",
    "is_due_on",
    "send_payment_reminders",
]
