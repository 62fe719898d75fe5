"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    today_in_app_timezone,
)
from .formatting import format_period, format_rupiah, month_name

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "format_period",
    "format_rupiah",
    "get_app_timezone",
    "month_name",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "today_in_app_timezone",
]
