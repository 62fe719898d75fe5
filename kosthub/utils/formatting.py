"""Human readable rendering of billing periods and rupiah amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Final

INDONESIAN_MONTH_NAMES: Final[tuple[str, ...]] = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)

ENGLISH_MONTH_NAMES: Final[tuple[str, ...]] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def month_name(month: int, *, locale: str = "en") -> str:
    """Return the name of ``month`` (1-12) in English or Indonesian (``id``)."""

    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    names = INDONESIAN_MONTH_NAMES if locale == "id" else ENGLISH_MONTH_NAMES
    return names[month - 1]


def format_period(month: int, year: int, *, locale: str = "en") -> str:
    """Return ``"October 2025"`` style labels for a billing period."""

    return f"{month_name(month, locale=locale)} {year}"


def format_rupiah(amount: Decimal | int | float) -> str:
    """Format ``amount`` the way Indonesian invoices do, e.g. ``Rp 1.500.000``.

    Cents are only rendered when the amount is not a whole number.
    """

    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    whole, cents = divmod(abs(value), 1)
    grouped = f"{int(whole):,}".replace(",", ".")
    sign = "-" if value < 0 else ""
    if cents:
        return f"{sign}Rp {grouped},{int(cents * 100):02d}"
    return f"{sign}Rp {grouped}"


__all__ = [
    "ENGLISH_MONTH_NAMES",
    "INDONESIAN_MONTH_NAMES",
    "format_period",
    "format_rupiah",
    "month_name",
]
