"""Schemas for the conversion endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field

from budget_core.domain.conversion import ConversionMethod, ConversionOutcome
from budget_core.domain.currency import Currency


class ConvertRequest(BaseModel):
    """Payload for converting an amount of minor units."""

    amount_minor: int
    currency: Currency
    to_currency: Currency
    owner_id: str | None = Field(default=None, min_length=1, max_length=64)


class ConversionResponse(BaseModel):
    """Converted amount with how it was obtained."""

    amount_minor: int
    currency: Currency
    display: str
    method: ConversionMethod
    source_currency: Currency
    chain: list[Currency] | None = None
    reason: str | None = None

    @classmethod
    def from_outcome(cls, outcome: ConversionOutcome) -> ConversionResponse:
        return cls(
            amount_minor=outcome.amount.minor_units,
            currency=outcome.amount.currency,
            display=outcome.amount.format(),
            method=outcome.method,
            source_currency=outcome.source_currency,
            chain=list(outcome.chain) if outcome.chain else None,
            reason=outcome.reason,
        )
