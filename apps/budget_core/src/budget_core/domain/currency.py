"""ISO 4217 metadata for the compiled-in set of supported currencies."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType


class Currency(enum.StrEnum):
    """Supported currencies.

    Declaration order is significant: chain conversion tries intermediate
    currencies in this order.
    """

    USD = "USD"
    CRC = "CRC"
    CAD = "CAD"


@dataclass(frozen=True, slots=True)
class CurrencyConfig:
    """Fixed metadata for one currency."""

    code: Currency
    numeric_code: str
    minor_unit: int
    symbol: str
    name: str

    @property
    def divisor(self) -> int:
        """Return 10 ** minor_unit, the minor units per major unit."""
        return 10**self.minor_unit


BASE_CURRENCY = Currency.CRC

CURRENCY_CONFIG = MappingProxyType(
    {
        Currency.CRC: CurrencyConfig(
            code=Currency.CRC,
            numeric_code="188",
            minor_unit=2,
            symbol="₡",
            name="Costa Rican Colón",
        ),
        Currency.USD: CurrencyConfig(
            code=Currency.USD,
            numeric_code="840",
            minor_unit=2,
            symbol="$",
            name="US Dollar",
        ),
        Currency.CAD: CurrencyConfig(
            code=Currency.CAD,
            numeric_code="124",
            minor_unit=2,
            symbol="CA$",
            name="Canadian Dollar",
        ),
    }
)


def currency_config(currency: Currency) -> CurrencyConfig:
    """Return compiled-in metadata for a currency."""

    return CURRENCY_CONFIG[Currency(currency)]


def currency_decimals(currency: Currency) -> int:
    """Return the minor-unit exponent of a currency."""

    return currency_config(currency).minor_unit


def currency_divisor(currency: Currency) -> int:
    """Return the minor units per major unit of a currency."""

    return currency_config(currency).divisor


def currency_symbol(currency: Currency) -> str:
    return currency_config(currency).symbol


def currency_display(currency: Currency) -> str:
    """Return symbol and code, e.g. ``"₡ CRC"``."""

    return f"{currency_symbol(currency)} {Currency(currency).value}"
