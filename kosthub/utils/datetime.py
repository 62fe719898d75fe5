"""Clock helpers bound to the boarding house's local timezone.

Due days and billing periods are calendar concepts, so "today" must be the
date at the property, not the server's UTC date. Database columns store naive
wall-clock times in that same zone.
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kosthub.config import get_settings

FALLBACK_TIMEZONE: Final[str] = "Asia/Jakarta"


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``, or Jakarta if it is unknown."""

    name = (get_settings().app_timezone or "").strip()
    return _load_zone(name) or ZoneInfo(FALLBACK_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def today_in_app_timezone() -> date:
    """Return the calendar date used by the reminder sweep."""

    return now_in_app_timezone().date()


def now_in_app_naive_datetime() -> datetime:
    """Column default: local wall-clock time without ``tzinfo``."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach or convert ``value`` to the app timezone.

    Naive values are taken to be local wall-clock times, which is how they are
    stored.
    """

    if value is None:
        return None
    zone = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Convert ``value`` to local wall-clock time and drop ``tzinfo`` for storage."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)


def _load_zone(name: str) -> tzinfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None
