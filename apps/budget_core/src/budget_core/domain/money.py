"""Money helpers storing amounts as integer minor units per currency."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from budget_core.domain.currency import (
    CURRENCY_CONFIG,
    Currency,
    currency_decimals,
    currency_divisor,
    currency_symbol,
)
from budget_core.domain.errors import InvalidRequestError, compose_error_message

WHOLE_UNIT = Decimal("1")

_SYMBOL_PATTERN = re.compile(
    "|".join(
        re.escape(config.symbol)
        for config in sorted(
            CURRENCY_CONFIG.values(), key=lambda item: len(item.symbol), reverse=True
        )
    )
)
_NOISE_PATTERN = re.compile(r"[,\s]")


def _as_decimal(value: Decimal | int | str | float) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_half_up(value: Decimal) -> int:
    """Round a decimal to the nearest integer, halves away from zero."""

    return int(value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP))


def to_minor_units(amount: Decimal | int | str | float, currency: Currency) -> int:
    """Convert a human-entered amount to integer minor units.

    Rounds half away from zero, so ``0.005 USD`` becomes ``1`` cent and
    ``-0.005 USD`` becomes ``-1``.
    """

    return round_half_up(_as_decimal(amount) * currency_divisor(currency))


def to_decimal(minor_units: int, currency: Currency) -> Decimal:
    """Return the exact major-unit decimal for an amount in minor units."""

    return Decimal(minor_units).scaleb(-currency_decimals(currency))


@dataclass(frozen=True, slots=True)
class MoneyAmount:
    """An amount in integer minor units tagged with its currency."""

    minor_units: int
    currency: Currency

    def __post_init__(self) -> None:
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError("Money minor units must be an integer")
        object.__setattr__(self, "currency", Currency(self.currency))

    @classmethod
    def from_decimal(
        cls, amount: Decimal | int | str | float, currency: Currency
    ) -> MoneyAmount:
        """Create a money value from a major-unit amount."""
        return cls(minor_units=to_minor_units(amount, currency), currency=currency)

    @classmethod
    def zero(cls, currency: Currency) -> MoneyAmount:
        return cls(minor_units=0, currency=currency)

    def _require_same_currency(self, other: MoneyAmount) -> None:
        if other.currency != self.currency:
            msg = (
                f"Cannot combine {self.currency.value} with {other.currency.value} "
                "without conversion"
            )
            raise ValueError(msg)

    def __add__(self, other: MoneyAmount) -> MoneyAmount:
        self._require_same_currency(other)
        return MoneyAmount(self.minor_units + other.minor_units, self.currency)

    def __sub__(self, other: MoneyAmount) -> MoneyAmount:
        self._require_same_currency(other)
        return MoneyAmount(self.minor_units - other.minor_units, self.currency)

    def __neg__(self) -> MoneyAmount:
        return MoneyAmount(-self.minor_units, self.currency)

    def to_decimal(self) -> Decimal:
        """Return the amount in major units."""
        return to_decimal(self.minor_units, self.currency)

    def format(self) -> str:
        return format_money(self.minor_units, self.currency)


def format_money(minor_units: int, currency: Currency) -> str:
    """Render an amount with its symbol and thousands separators.

    CRC is shown without decimals since céntimos are rarely used in practice.
    """

    currency = Currency(currency)
    value = to_decimal(minor_units, currency)
    digits = 0 if currency == Currency.CRC else currency_decimals(currency)
    value = value.quantize(WHOLE_UNIT.scaleb(-digits), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{currency_symbol(currency)}{abs(value):,.{digits}f}"


def parse_money_input(text: str, currency: Currency) -> int:
    """Parse user input such as ``"₡50,000"`` or ``"35.00"`` to minor units."""

    cleaned = _NOISE_PATTERN.sub("", _SYMBOL_PATTERN.sub("", text))
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as exc:
        raise InvalidRequestError(
            message=compose_error_message(
                cause=f"'{text}' is not a valid amount.",
                action="Send a decimal number such as 1500.50.",
            )
        ) from exc
    if not amount.is_finite():
        raise InvalidRequestError(
            message=compose_error_message(
                cause=f"'{text}' is not a finite amount.",
                action="Send a decimal number such as 1500.50.",
            )
        )
    return to_minor_units(amount, currency)
