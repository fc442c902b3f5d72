"""Schemas for exchange rate endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, Field, field_validator, model_validator

from budget_core.domain.currency import Currency
from budget_core.domain.exchange_rates import ExchangeRate, RateType


class CreateRateRequest(BaseModel):
    """Payload for registering one exchange rate."""

    from_currency: Currency
    to_currency: Currency
    rate: str = Field(pattern=r"^[0-9]+(\.[0-9]{1,6})?$")
    rate_type: RateType | None = None
    effective_date: date
    owner_id: str | None = Field(default=None, min_length=1, max_length=64)
    source: str | None = Field(default=None, max_length=120)

    @field_validator("rate")
    @classmethod
    def validate_rate(cls, value: str) -> str:
        try:
            rate = Decimal(value)
        except InvalidOperation as exc:
            raise ValueError("Rate must be a decimal number.") from exc
        if rate <= Decimal("0"):
            raise ValueError("Rate must be greater than zero.")
        return value

    @model_validator(mode="after")
    def validate_distinct_currencies(self) -> CreateRateRequest:
        if self.from_currency == self.to_currency:
            raise ValueError("from_currency and to_currency must differ.")
        return self


class RateResponse(BaseModel):
    """Serialized exchange rate."""

    from_currency: Currency
    to_currency: Currency
    rate: str
    rate_type: RateType | None
    effective_date: date
    owner_id: str | None
    source: str | None

    @classmethod
    def from_domain(cls, rate: ExchangeRate) -> RateResponse:
        return cls(
            from_currency=rate.from_currency,
            to_currency=rate.to_currency,
            rate=format(rate.rate.normalize(), "f"),
            rate_type=rate.rate_type,
            effective_date=rate.effective_date,
            owner_id=rate.owner_id,
            source=rate.source,
        )


class RateListResponse(BaseModel):
    items: list[RateResponse]

    @classmethod
    def from_domain(cls, rates: list[ExchangeRate]) -> RateListResponse:
        return cls(items=[RateResponse.from_domain(rate) for rate in rates])
