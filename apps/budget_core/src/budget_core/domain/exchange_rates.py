"""Exchange rate records and the rate lookup table built from them."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import NamedTuple

from budget_core.domain.currency import Currency


class RateType(enum.StrEnum):
    """Bank side of an exchange rate.

    BUY (compra) is what the bank pays for foreign currency, SELL (venta) is
    what it charges.
    """

    BUY = "BUY"
    SELL = "SELL"

    def opposite(self) -> RateType:
        return RateType.SELL if self is RateType.BUY else RateType.BUY


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """One published rate: 1 unit of from_currency = rate units of to_currency."""

    from_currency: Currency
    to_currency: Currency
    rate: Decimal
    effective_date: date
    rate_type: RateType | None = None
    owner_id: str | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "from_currency", Currency(self.from_currency))
        object.__setattr__(self, "to_currency", Currency(self.to_currency))
        if self.rate_type is not None:
            object.__setattr__(self, "rate_type", RateType(self.rate_type))
        if self.from_currency == self.to_currency:
            raise ValueError("Exchange rate currencies must differ")
        if not isinstance(self.rate, Decimal):
            object.__setattr__(self, "rate", Decimal(str(self.rate)))
        if not self.rate.is_finite() or self.rate <= 0:
            raise ValueError("Exchange rate must be greater than zero")

    @property
    def is_global(self) -> bool:
        return self.owner_id is None


class RateKey(NamedTuple):
    """Lookup key; a missing rate_type addresses the legacy per-pair rate."""

    from_currency: Currency
    to_currency: Currency
    rate_type: RateType | None = None


RateTable = Mapping[RateKey, Decimal]

EMPTY_RATE_TABLE: RateTable = MappingProxyType({})


def build_rate_table(ordered_rates: Iterable[ExchangeRate]) -> RateTable:
    """Build a read-only rate table from rates ordered most-recent-first.

    Each rate fills its typed key and the legacy pair key, first write wins,
    so the freshest rate of a pair also becomes its legacy default.
    """

    table: dict[RateKey, Decimal] = {}
    for rate in ordered_rates:
        if rate.rate_type is not None:
            table.setdefault(
                RateKey(rate.from_currency, rate.to_currency, rate.rate_type),
                rate.rate,
            )
        table.setdefault(RateKey(rate.from_currency, rate.to_currency), rate.rate)
    return MappingProxyType(table)


def select_rate_snapshot(
    rates: Iterable[ExchangeRate], owner_id: str | None = None
) -> list[ExchangeRate]:
    """Return the owner's and global rates in lookup-table build order.

    Owner rates come before global ones so they win any shared key; within
    each scope the most recent effective_date comes first.
    """

    visible = [
        rate for rate in rates if rate.is_global or rate.owner_id == owner_id
    ]
    owned = [rate for rate in visible if not rate.is_global]
    shared = [rate for rate in visible if rate.is_global]
    owned.sort(key=lambda rate: rate.effective_date, reverse=True)
    shared.sort(key=lambda rate: rate.effective_date, reverse=True)
    return owned + shared
