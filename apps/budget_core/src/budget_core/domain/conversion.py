"""Currency conversion over a rate table with buy/sell and chain fallbacks.

The resolver is pure: it never logs and never raises for a missing rate.
A conversion that cannot be resolved comes back tagged ``UNRESOLVED`` with
the original amount, so aggregate computations can still complete and the
caller decides how to surface the gap.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from budget_core.domain.currency import BASE_CURRENCY, Currency, currency_divisor
from budget_core.domain.exchange_rates import RateKey, RateTable, RateType
from budget_core.domain.money import MoneyAmount, round_half_up

MISSING_RATE_REASON = "missing_rate"


class ConversionMethod(enum.StrEnum):
    """How a converted amount was obtained."""

    DIRECT = "direct"
    REVERSED = "reversed"
    CHAIN = "chain"
    UNRESOLVED = "unresolved"

    @property
    def is_direct_like(self) -> bool:
        """Forward and reversed lookups are both single-rate conversions."""
        return self in (ConversionMethod.DIRECT, ConversionMethod.REVERSED)


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    """Converted amount plus provenance."""

    amount: MoneyAmount
    method: ConversionMethod
    source_currency: Currency
    target_currency: Currency
    chain: tuple[Currency, ...] | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.method != ConversionMethod.UNRESOLVED


@dataclass(frozen=True, slots=True)
class _ResolvedRate:
    rate: Decimal
    reversed: bool


def rate_type_for_conversion(
    from_currency: Currency,
    to_currency: Currency,
    local_currency: Currency = BASE_CURRENCY,
) -> RateType:
    """Pick the bank side for a conversion direction.

    Sides are always taken from the point of view of the local bank currency,
    never from the currency a total is displayed in. Into the local currency
    the bank buys foreign currency from you (BUY); out of it the bank sells to
    you (SELL). Between two foreign currencies BUY is used.
    """

    if to_currency == local_currency:
        return RateType.BUY
    if from_currency == local_currency:
        return RateType.SELL
    return RateType.BUY


class ConversionResolver:
    """Resolves conversions against one immutable rate table snapshot."""

    def __init__(
        self,
        rate_table: RateTable,
        *,
        local_currency: Currency = BASE_CURRENCY,
    ) -> None:
        self._rates = rate_table
        self._local_currency = Currency(local_currency)

    @property
    def local_currency(self) -> Currency:
        return self._local_currency

    def lookup_rate(
        self, from_currency: Currency, to_currency: Currency
    ) -> Decimal | None:
        """Return the effective single-hop rate for a pair, if any."""

        resolved = self._resolve_rate(from_currency, to_currency)
        return resolved.rate if resolved is not None else None

    def convert(
        self, amount: MoneyAmount, to_currency: Currency
    ) -> ConversionOutcome:
        """Convert an amount into ``to_currency``.

        Order of attempts: forward typed rate, forward legacy rate, reverse
        rate of the opposite type, reverse legacy rate, then chain conversion
        through each other currency in declaration order.
        """

        to_currency = Currency(to_currency)
        from_currency = amount.currency
        if from_currency == to_currency:
            return ConversionOutcome(
                amount=amount,
                method=ConversionMethod.DIRECT,
                source_currency=from_currency,
                target_currency=to_currency,
            )

        resolved = self._resolve_rate(from_currency, to_currency)
        if resolved is not None:
            return ConversionOutcome(
                amount=self._apply(amount, to_currency, resolved.rate),
                method=(
                    ConversionMethod.REVERSED
                    if resolved.reversed
                    else ConversionMethod.DIRECT
                ),
                source_currency=from_currency,
                target_currency=to_currency,
            )

        for intermediate in Currency:
            if intermediate in (from_currency, to_currency):
                continue
            first_leg = self._resolve_rate(from_currency, intermediate)
            second_leg = self._resolve_rate(intermediate, to_currency)
            if first_leg is None or second_leg is None:
                continue
            return ConversionOutcome(
                amount=self._apply(
                    amount, to_currency, first_leg.rate * second_leg.rate
                ),
                method=ConversionMethod.CHAIN,
                source_currency=from_currency,
                target_currency=to_currency,
                chain=(from_currency, intermediate, to_currency),
            )

        return ConversionOutcome(
            amount=amount,
            method=ConversionMethod.UNRESOLVED,
            source_currency=from_currency,
            target_currency=to_currency,
            reason=MISSING_RATE_REASON,
        )

    def convert_many(
        self, amounts: Iterable[MoneyAmount], to_currency: Currency
    ) -> ConversionBatch:
        """Convert and sum amounts; unresolved ones are added unconverted."""

        to_currency = Currency(to_currency)
        outcomes = [self.convert(amount, to_currency) for amount in amounts]
        total = sum(
            (outcome.amount.minor_units for outcome in outcomes), start=0
        )
        return ConversionBatch(
            total=MoneyAmount(total, to_currency),
            outcomes=outcomes,
            warnings=collect_conversion_warnings(outcomes),
        )

    def _resolve_rate(
        self, from_currency: Currency, to_currency: Currency
    ) -> _ResolvedRate | None:
        rate_type = rate_type_for_conversion(
            from_currency, to_currency, self._local_currency
        )
        forward_keys = (
            RateKey(from_currency, to_currency, rate_type),
            RateKey(from_currency, to_currency),
        )
        for key in forward_keys:
            rate = self._rates.get(key)
            if rate:
                return _ResolvedRate(rate=rate, reversed=False)

        # A BUY rate one way is economically the SELL rate the other way.
        reverse_keys = (
            RateKey(to_currency, from_currency, rate_type.opposite()),
            RateKey(to_currency, from_currency),
        )
        for key in reverse_keys:
            rate = self._rates.get(key)
            if rate:
                return _ResolvedRate(rate=Decimal(1) / rate, reversed=True)
        return None

    @staticmethod
    def _apply(
        amount: MoneyAmount, to_currency: Currency, rate: Decimal
    ) -> MoneyAmount:
        major = Decimal(amount.minor_units) / currency_divisor(amount.currency)
        converted = major * rate * currency_divisor(to_currency)
        return MoneyAmount(round_half_up(converted), to_currency)


class WarningKind(enum.StrEnum):
    MISSING = "missing"
    CHAIN = "chain"


@dataclass(frozen=True, slots=True)
class ConversionWarning:
    """User-facing note about one (from, to) currency pair."""

    from_currency: Currency
    to_currency: Currency
    kind: WarningKind
    chain: tuple[Currency, ...] | None = None

    def label(self) -> str:
        return f"{self.from_currency.value} → {self.to_currency.value}"


def collect_conversion_warnings(
    outcomes: Iterable[ConversionOutcome], *, include_chain: bool = False
) -> list[ConversionWarning]:
    """Return one warning per (from, to) pair in first-seen order.

    Chain conversions are a silent fallback and only reported when
    ``include_chain`` is set.
    """

    warnings: list[ConversionWarning] = []
    seen: set[tuple[Currency, Currency, WarningKind]] = set()
    for outcome in outcomes:
        if outcome.method == ConversionMethod.UNRESOLVED:
            kind = WarningKind.MISSING
        elif outcome.method == ConversionMethod.CHAIN and include_chain:
            kind = WarningKind.CHAIN
        else:
            continue
        key = (outcome.source_currency, outcome.target_currency, kind)
        if key in seen:
            continue
        seen.add(key)
        warnings.append(
            ConversionWarning(
                from_currency=outcome.source_currency,
                to_currency=outcome.target_currency,
                kind=kind,
                chain=outcome.chain,
            )
        )
    return warnings


@dataclass(frozen=True, slots=True)
class ConversionBatch:
    """Aggregate of several conversions into one target currency."""

    total: MoneyAmount
    outcomes: Sequence[ConversionOutcome] = field(default_factory=tuple)
    warnings: Sequence[ConversionWarning] = field(default_factory=tuple)

    @property
    def unresolved_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)
