"""Schemas for the budget summary endpoint."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from budget_core.db.models.obligation import ObligationKind
from budget_core.domain.conversion import ConversionMethod, ConversionWarning
from budget_core.domain.currency import Currency
from budget_core.domain.periods import Cadence
from budget_core.services.budget_summary_service import (
    BudgetSummary,
    ObligationSummaryItem,
)


class SummaryItemResponse(BaseModel):
    obligation_id: UUID
    name: str
    kind: ObligationKind
    cadence: Cadence
    amount_minor: int
    currency: Currency
    converted_minor: int
    conversion_method: ConversionMethod
    paid: bool
    period_start: datetime
    period_end: datetime

    @classmethod
    def from_item(cls, item: ObligationSummaryItem) -> SummaryItemResponse:
        return cls(
            obligation_id=item.obligation_id,
            name=item.name,
            kind=item.kind,
            cadence=item.cadence,
            amount_minor=item.amount.minor_units,
            currency=item.amount.currency,
            converted_minor=item.conversion.amount.minor_units,
            conversion_method=item.conversion.method,
            paid=item.paid,
            period_start=item.period.start,
            period_end=item.period.end,
        )


class ConversionWarningResponse(BaseModel):
    from_currency: Currency
    to_currency: Currency
    kind: str
    label: str

    @classmethod
    def from_warning(cls, warning: ConversionWarning) -> ConversionWarningResponse:
        return cls(
            from_currency=warning.from_currency,
            to_currency=warning.to_currency,
            kind=warning.kind.value,
            label=warning.label(),
        )


class BudgetSummaryResponse(BaseModel):
    """Obligation totals in the base currency."""

    base_currency: Currency
    total_minor: int
    paid_total_minor: int
    pending_total_minor: int
    monthly_projection_minor: int
    total_display: str
    paid_count: int
    obligation_count: int
    items: list[SummaryItemResponse]
    warnings: list[ConversionWarningResponse]

    @classmethod
    def from_summary(cls, summary: BudgetSummary) -> BudgetSummaryResponse:
        return cls(
            base_currency=summary.base_currency,
            total_minor=summary.total.minor_units,
            paid_total_minor=summary.paid_total.minor_units,
            pending_total_minor=summary.pending_total.minor_units,
            monthly_projection_minor=summary.monthly_projection.minor_units,
            total_display=summary.total.format(),
            paid_count=summary.paid_count,
            obligation_count=len(summary.items),
            items=[SummaryItemResponse.from_item(item) for item in summary.items],
            warnings=[
                ConversionWarningResponse.from_warning(warning)
                for warning in summary.warnings
            ],
        )
