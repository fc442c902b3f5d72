from datetime import UTC, datetime, timedelta, timezone

import pytest

from budget_core.domain.currency import Currency
from budget_core.domain.errors import UnsupportedCadenceError
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import (
    BIWEEKLY_EPOCH,
    Cadence,
    current_period_start,
    is_in_period,
    monthly_equivalent,
    period_display_text,
    period_end,
    period_window,
    same_period_start,
)


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


def test_monthly_period_starts_on_first_day_at_midnight_utc() -> None:
    assert current_period_start(Cadence.MONTHLY, _utc(2024, 3, 15, 18, 30)) == _utc(
        2024, 3, 1
    )


def test_monthly_period_end_covers_leap_day() -> None:
    assert period_end(_utc(2024, 2, 1), Cadence.MONTHLY) == _utc(
        2024, 2, 29, 23, 59, 59, 999000
    )


def test_weekly_period_starts_on_monday() -> None:
    assert current_period_start(Cadence.WEEKLY, _utc(2024, 3, 6)) == _utc(2024, 3, 4)
    assert current_period_start(Cadence.WEEKLY, _utc(2024, 3, 10, 23)) == _utc(
        2024, 3, 4
    )
    assert period_end(_utc(2024, 3, 4), Cadence.WEEKLY) == _utc(
        2024, 3, 10, 23, 59, 59, 999000
    )


@pytest.mark.parametrize(
    ("reference", "expected_start"),
    [
        (_utc(2024, 1, 1), _utc(2024, 1, 1)),
        (_utc(2024, 1, 14, 23, 59), _utc(2024, 1, 1)),
        (_utc(2024, 1, 15), _utc(2024, 1, 15)),
        (_utc(2024, 3, 15), _utc(2024, 3, 11)),
        (_utc(2023, 12, 31), _utc(2023, 12, 18)),
    ],
)
def test_biweekly_periods_are_counted_from_fixed_epoch(
    reference: datetime, expected_start: datetime
) -> None:
    assert current_period_start(Cadence.BIWEEKLY, reference) == expected_start


def test_biweekly_boundaries_do_not_depend_on_reference_within_period() -> None:
    starts = {
        current_period_start(Cadence.BIWEEKLY, BIWEEKLY_EPOCH + timedelta(hours=hour))
        for hour in range(0, 14 * 24, 7)
    }

    assert starts == {BIWEEKLY_EPOCH}


def test_reference_is_normalized_to_utc_before_bucketing() -> None:
    costa_rica = timezone(timedelta(hours=-6))
    reference = datetime(2024, 3, 31, 23, 30, tzinfo=costa_rica)

    assert current_period_start(Cadence.MONTHLY, reference) == _utc(2024, 4, 1)


def test_naive_reference_is_read_as_utc() -> None:
    window = period_window("WEEKLY", datetime(2024, 3, 6, 12))

    assert window.start == _utc(2024, 3, 4)
    assert window.contains(datetime(2024, 3, 10, 23, 59))


def test_is_in_period_includes_both_bounds() -> None:
    start = _utc(2024, 3, 1)
    end = period_end(start, Cadence.MONTHLY)

    assert is_in_period(start, start, Cadence.MONTHLY)
    assert is_in_period(end, start, Cadence.MONTHLY)
    assert not is_in_period(end + timedelta(milliseconds=1), start, Cadence.MONTHLY)
    assert not is_in_period(start - timedelta(milliseconds=1), start, Cadence.MONTHLY)


def test_same_period_start_compares_utc_dates() -> None:
    assert same_period_start(_utc(2024, 3, 1), datetime(2024, 3, 1, 0, 0, 1))
    assert not same_period_start(_utc(2024, 3, 1), _utc(2024, 2, 29))


def test_unknown_cadence_raises() -> None:
    with pytest.raises(UnsupportedCadenceError) as exc_info:
        current_period_start("DAILY", _utc(2024, 3, 1))

    assert exc_info.value.cadence == "DAILY"


def test_monthly_equivalent_scales_by_cadence() -> None:
    assert monthly_equivalent(MoneyAmount(10000, Currency.USD), Cadence.WEEKLY) == (
        MoneyAmount(43300, Currency.USD)
    )
    assert monthly_equivalent(MoneyAmount(10001, Currency.USD), "BIWEEKLY") == (
        MoneyAmount(21702, Currency.USD)
    )
    assert monthly_equivalent(MoneyAmount(777, Currency.CRC), Cadence.MONTHLY) == (
        MoneyAmount(777, Currency.CRC)
    )


@pytest.mark.parametrize(
    ("cadence", "locale", "expected"),
    [
        (Cadence.MONTHLY, "en", "March 2024"),
        (Cadence.MONTHLY, "es-CR", "marzo de 2024"),
        (Cadence.WEEKLY, "en-US", "Mar 4 - Mar 10"),
        (Cadence.WEEKLY, "es", "4 mar - 10 mar"),
        (Cadence.MONTHLY, "fr", "March 2024"),
    ],
)
def test_period_display_text(cadence: Cadence, locale: str, expected: str) -> None:
    start = current_period_start(cadence, _utc(2024, 3, 6))

    assert period_display_text(start, cadence, locale) == expected


def test_biweekly_display_text_spans_two_weeks() -> None:
    assert period_display_text(_utc(2024, 3, 11), Cadence.BIWEEKLY) == (
        "Mar 11 - Mar 24"
    )
