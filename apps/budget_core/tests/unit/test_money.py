from decimal import Decimal

import pytest

from budget_core.domain.currency import Currency, currency_display, currency_divisor
from budget_core.domain.errors import InvalidRequestError
from budget_core.domain.money import (
    MoneyAmount,
    format_money,
    parse_money_input,
    to_decimal,
    to_minor_units,
)


def test_to_minor_units_rounds_half_away_from_zero() -> None:
    assert to_minor_units(Decimal("10.005"), Currency.USD) == 1001
    assert to_minor_units(Decimal("10.004"), Currency.USD) == 1000
    assert to_minor_units(Decimal("-0.005"), Currency.USD) == -1


def test_to_minor_units_reads_floats_through_their_repr() -> None:
    assert to_minor_units(0.1 + 0.2, Currency.USD) == 30
    assert to_minor_units(19.99, Currency.CAD) == 1999


def test_to_decimal_is_exact_inverse_for_stored_values() -> None:
    assert to_decimal(1234, Currency.USD) == Decimal("12.34")
    assert to_minor_units(to_decimal(5_000_000, Currency.CRC), Currency.CRC) == (
        5_000_000
    )


@pytest.mark.parametrize("currency", list(Currency))
@pytest.mark.parametrize("minor_units", [-1, 0, 1, -5_000_005, 10**12 + 7])
def test_to_minor_units_reverses_to_decimal(
    currency: Currency, minor_units: int
) -> None:
    assert to_minor_units(to_decimal(minor_units, currency), currency) == minor_units


def test_currency_metadata_uses_two_decimal_places() -> None:
    assert currency_divisor(Currency.CRC) == 100
    assert currency_display(Currency.CRC) == "₡ CRC"


def test_money_amount_rejects_non_integer_minor_units() -> None:
    with pytest.raises(TypeError):
        MoneyAmount(12.5, Currency.USD)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        MoneyAmount(True, Currency.USD)


def test_money_amount_arithmetic_requires_same_currency() -> None:
    total = MoneyAmount(1500, Currency.USD) + MoneyAmount(250, Currency.USD)

    assert total == MoneyAmount(1750, Currency.USD)
    assert -total == MoneyAmount(-1750, Currency.USD)
    with pytest.raises(ValueError, match="without conversion"):
        _ = total - MoneyAmount(100, Currency.CRC)


def test_money_amount_from_decimal_and_zero() -> None:
    assert MoneyAmount.from_decimal("35.00", Currency.USD).minor_units == 3500
    assert MoneyAmount.zero(Currency.CAD) == MoneyAmount(0, Currency.CAD)


def test_format_money_hides_colon_cents() -> None:
    assert format_money(5_000_000, Currency.CRC) == "₡50,000"
    assert format_money(150, Currency.CRC) == "₡2"


def test_format_money_keeps_decimals_and_sign_for_other_currencies() -> None:
    assert format_money(-1200, Currency.USD) == "-$12.00"
    assert MoneyAmount(123456, Currency.CAD).format() == "CA$1,234.56"


@pytest.mark.parametrize(
    ("text", "currency", "expected"),
    [
        ("₡50,000", Currency.CRC, 5_000_000),
        ("$ 35.00", Currency.USD, 3500),
        ("CA$1,234.56", Currency.CAD, 123456),
        ("10.005", Currency.USD, 1001),
    ],
)
def test_parse_money_input_strips_symbols_and_separators(
    text: str, currency: Currency, expected: int
) -> None:
    assert parse_money_input(text, currency) == expected


@pytest.mark.parametrize("text", ["", "abc", "NaN", "1.2.3"])
def test_parse_money_input_rejects_invalid_amounts(text: str) -> None:
    with pytest.raises(InvalidRequestError) as exc_info:
        parse_money_input(text, Currency.USD)

    assert exc_info.value.code == "INVALID_REQUEST"
