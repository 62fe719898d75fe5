"""Periodic jobs: the daily payment reminder sweep and the keepalive heartbeat."""

from __future__ import annotations

import logging

from anyio import to_thread
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session, sessionmaker

from kosthub.application.use_cases.notifications import (
    NotificationPipeline,
    ReminderSweepResult,
    send_payment_reminders,
)
from kosthub.config import Settings, get_settings
from kosthub.infrastructure.notifications import NotificationHub
from kosthub.utils import get_app_timezone

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "payment-reminders"
HEARTBEAT_JOB_ID = "notification-heartbeat"


class ReminderScheduler:
    """Run the reminder sweep once a day and the heartbeat at a fixed interval.

    Both jobs are limited to one running instance and missed firings are
    coalesced, so a slow sweep is never overlapped by the next one. The sweep
    itself is synchronous database work and runs in a worker thread.
    """

    def __init__(
        self,
        *,
        session_factory: sessionmaker[Session],
        pipeline: NotificationPipeline,
        hub: NotificationHub,
        settings: Settings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._pipeline = pipeline
        self._hub = hub
        self._settings = settings or get_settings()
        self._scheduler = AsyncIOScheduler(timezone=get_app_timezone())

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        settings = self._settings
        self._scheduler.add_job(
            self.run_reminder_job,
            CronTrigger(
                hour=settings.reminder_hour,
                minute=settings.reminder_minute,
                timezone=get_app_timezone(),
            ),
            id=REMINDER_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.add_job(
            self.run_heartbeat_job,
            IntervalTrigger(seconds=settings.heartbeat_interval_seconds),
            id=HEARTBEAT_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Scheduler started: reminders daily at %02d:%02d, heartbeat every %ss",
            settings.reminder_hour,
            settings.reminder_minute,
            settings.heartbeat_interval_seconds,
        )

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    async def run_reminder_job(self) -> ReminderSweepResult | None:
        return await to_thread.run_sync(self.run_reminder_sweep)

    def run_reminder_sweep(self) -> ReminderSweepResult | None:
        """Run one sweep in a fresh session; failures are logged, not raised."""

        session = self._session_factory()
        try:
            return send_payment_reminders(
                session,
                pipeline=self._pipeline,
                short_month_policy=self._settings.reminder_short_month_policy,
            )
        except Exception:
            logger.exception("Scheduled payment reminder sweep failed")
            return None
        finally:
            session.close()

    async def run_heartbeat_job(self) -> int:
        return await self._hub.broadcast_heartbeat()


__all__ = ["HEARTBEAT_JOB_ID", "REMINDER_JOB_ID", "ReminderScheduler"]
