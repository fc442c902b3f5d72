"""Dashboard aggregation of obligations in the owner's base currency."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.domain.conversion import (
    ConversionMethod,
    ConversionOutcome,
    ConversionResolver,
    ConversionWarning,
    collect_conversion_warnings,
)
from budget_core.domain.currency import BASE_CURRENCY, Currency
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import Cadence, PeriodWindow, monthly_equivalent
from budget_core.services.obligation_ledger import ObligationLedger

logger = logging.getLogger(__name__)


class ObligationRepositoryProtocol(Protocol):
    """Obligation repository contract consumed by summary service."""

    def list_active(self, owner_id: str) -> list[Obligation]: ...


class ResolverFactoryProtocol(Protocol):
    """Source of conversion resolvers over an owner's rate snapshot."""

    def resolver_for(self, owner_id: str | None) -> ConversionResolver: ...


@dataclass(slots=True, frozen=True)
class ObligationSummaryItem:
    """One obligation with its converted amount and current paid state."""

    obligation_id: UUID
    name: str
    kind: ObligationKind
    cadence: Cadence
    amount: MoneyAmount
    conversion: ConversionOutcome
    paid: bool
    period: PeriodWindow


@dataclass(slots=True, frozen=True)
class BudgetSummary:
    """Totals for one owner, all expressed in base_currency."""

    base_currency: Currency
    total: MoneyAmount
    paid_total: MoneyAmount
    pending_total: MoneyAmount
    monthly_projection: MoneyAmount
    paid_count: int
    items: list[ObligationSummaryItem]
    warnings: list[ConversionWarning]


class BudgetSummaryService:
    """Builds the obligations part of the budget dashboard."""

    def __init__(
        self,
        *,
        obligation_repository: ObligationRepositoryProtocol,
        rate_service: ResolverFactoryProtocol,
        ledger: ObligationLedger,
    ) -> None:
        self._obligation_repository = obligation_repository
        self._rate_service = rate_service
        self._ledger = ledger

    def get_summary(
        self,
        *,
        owner_id: str,
        base_currency: Currency = BASE_CURRENCY,
        now: datetime | None = None,
    ) -> BudgetSummary:
        """Convert every active obligation and split totals by paid state.

        Amounts that cannot be converted are counted unconverted and reported
        once per currency pair in ``warnings``. ``base_currency`` is only the
        conversion target; BUY and SELL sides are picked by the resolver.
        """

        obligations = self._obligation_repository.list_active(owner_id)
        resolver = self._rate_service.resolver_for(owner_id)
        paid_map = self._ledger.is_paid_for_current_periods(
            [obligation.id for obligation in obligations],
            {obligation.id: obligation.cadence for obligation in obligations},
            now,
        )

        items: list[ObligationSummaryItem] = []
        for obligation in obligations:
            outcome = resolver.convert(obligation.money, base_currency)
            if outcome.method == ConversionMethod.CHAIN:
                logger.debug(
                    "obligation_converted_by_chain",
                    extra={
                        "obligation_id": str(obligation.id),
                        "chain": [currency.value for currency in outcome.chain or ()],
                    },
                )
            items.append(
                ObligationSummaryItem(
                    obligation_id=obligation.id,
                    name=obligation.name,
                    kind=obligation.kind,
                    cadence=obligation.cadence,
                    amount=obligation.money,
                    conversion=outcome,
                    paid=paid_map.get(obligation.id, False),
                    period=ObligationLedger.current_window(obligation.cadence, now),
                )
            )

        warnings = collect_conversion_warnings(item.conversion for item in items)
        if warnings:
            logger.warning(
                "conversion_rates_missing",
                extra={
                    "owner_id": owner_id,
                    "pairs": [warning.label() for warning in warnings],
                },
            )

        paid_items = [item for item in items if item.paid]
        return BudgetSummary(
            base_currency=base_currency,
            total=self._sum(items, base_currency),
            paid_total=self._sum(paid_items, base_currency),
            pending_total=self._sum(
                [item for item in items if not item.paid], base_currency
            ),
            monthly_projection=MoneyAmount(
                sum(
                    monthly_equivalent(item.conversion.amount, item.cadence).minor_units
                    for item in items
                ),
                base_currency,
            ),
            paid_count=len(paid_items),
            items=items,
            warnings=warnings,
        )

    @staticmethod
    def _sum(
        items: Sequence[ObligationSummaryItem], base_currency: Currency
    ) -> MoneyAmount:
        # Unresolved amounts stay in their own currency and are counted as-is.
        return MoneyAmount(
            sum(item.conversion.amount.minor_units for item in items), base_currency
        )
