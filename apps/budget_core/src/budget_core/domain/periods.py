"""Billing period helpers computed in UTC for each payment cadence."""

from __future__ import annotations

import calendar
import enum
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

from budget_core.domain.errors import UnsupportedCadenceError
from budget_core.domain.money import MoneyAmount, round_half_up

# Monday. Changing it shifts every live biweekly period boundary.
BIWEEKLY_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)

BIWEEKLY_SPAN = timedelta(days=14)
WEEKLY_SPAN = timedelta(days=7)
END_OF_PERIOD_OFFSET = timedelta(milliseconds=1)


class Cadence(enum.StrEnum):
    """Repeating interval of a recurring obligation."""

    MONTHLY = "MONTHLY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"


MONTHLY_EQUIVALENT_FACTOR: dict[Cadence, Decimal] = {
    Cadence.MONTHLY: Decimal("1"),
    Cadence.WEEKLY: Decimal("4.33"),
    Cadence.BIWEEKLY: Decimal("2.17"),
}


@dataclass(frozen=True, slots=True)
class PeriodWindow:
    """Closed ``[start, end]`` window of one billing period."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= to_utc(instant) <= self.end


def to_utc(instant: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are read as UTC."""

    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def _utc_midnight(value: date) -> datetime:
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


def ensure_cadence(cadence: Cadence | str) -> Cadence:
    """Coerce a cadence value, rejecting anything outside the enumeration."""

    try:
        return Cadence(cadence)
    except ValueError as exc:
        raise UnsupportedCadenceError(cadence) from exc


def current_period_start(cadence: Cadence | str, reference: datetime) -> datetime:
    """Return the UTC midnight that starts the period containing reference.

    Biweekly periods are counted from a fixed epoch rather than from when an
    obligation was created, so every biweekly obligation shares boundaries.
    """

    cadence = ensure_cadence(cadence)
    reference_day = to_utc(reference).date()

    if cadence is Cadence.MONTHLY:
        return _utc_midnight(reference_day.replace(day=1))
    if cadence is Cadence.WEEKLY:
        monday = reference_day - timedelta(days=reference_day.weekday())
        return _utc_midnight(monday)

    days_since_epoch = (reference_day - BIWEEKLY_EPOCH.date()).days
    period_index = days_since_epoch // BIWEEKLY_SPAN.days
    return BIWEEKLY_EPOCH + period_index * BIWEEKLY_SPAN


def period_end(period_start: datetime, cadence: Cadence | str) -> datetime:
    """Return the last millisecond of the period beginning at period_start."""

    cadence = ensure_cadence(cadence)
    start = to_utc(period_start)

    if cadence is Cadence.MONTHLY:
        _, last_day = calendar.monthrange(start.year, start.month)
        return datetime(
            start.year, start.month, last_day, 23, 59, 59, 999000, tzinfo=UTC
        )
    if cadence is Cadence.WEEKLY:
        return start + WEEKLY_SPAN - END_OF_PERIOD_OFFSET
    return start + BIWEEKLY_SPAN - END_OF_PERIOD_OFFSET


def period_window(cadence: Cadence | str, reference: datetime) -> PeriodWindow:
    start = current_period_start(cadence, reference)
    return PeriodWindow(start=start, end=period_end(start, cadence))


def is_in_period(
    instant: datetime, period_start: datetime, cadence: Cadence | str
) -> bool:
    """Return whether instant falls within the period, bounds inclusive."""

    start = to_utc(period_start)
    return start <= to_utc(instant) <= period_end(start, cadence)


def same_period_start(first: datetime, second: datetime) -> bool:
    """Compare two period starts by their UTC calendar date."""

    return to_utc(first).date() == to_utc(second).date()


def monthly_equivalent(amount: MoneyAmount, cadence: Cadence | str) -> MoneyAmount:
    """Scale a per-period amount to an approximate monthly amount."""

    factor = MONTHLY_EQUIVALENT_FACTOR[ensure_cadence(cadence)]
    return MoneyAmount(
        round_half_up(Decimal(amount.minor_units) * factor), amount.currency
    )


_MONTH_NAMES = {
    "en": (
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
    ),
    "es": (
        "enero",
        "febrero",
        "marzo",
        "abril",
        "mayo",
        "junio",
        "julio",
        "agosto",
        "septiembre",
        "octubre",
        "noviembre",
        "diciembre",
    ),
}


def _language(locale: str) -> str:
    language = locale.replace("_", "-").split("-", 1)[0].lower()
    return language if language in _MONTH_NAMES else "en"


def _short_day(value: datetime, language: str) -> str:
    month_name = _MONTH_NAMES[language][value.month - 1]
    if language == "es":
        return f"{value.day} {month_name[:3]}"
    return f"{month_name[:3]} {value.day}"


def period_display_text(
    period_start: datetime, cadence: Cadence | str, locale: str = "en"
) -> str:
    """Render a period for display, e.g. ``March 2024`` or ``Mar 4 - Mar 10``.

    Only English and Spanish month names are available; other locales fall
    back to English.
    """

    cadence = ensure_cadence(cadence)
    language = _language(locale)
    start = to_utc(period_start)

    if cadence is Cadence.MONTHLY:
        month_name = _MONTH_NAMES[language][start.month - 1]
        if language == "es":
            return f"{month_name} de {start.year}"
        return f"{month_name} {start.year}"

    end = period_end(start, cadence)
    return f"{_short_day(start, language)} - {_short_day(end, language)}"
