"""Schemas for obligation and payment endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from budget_core.application.ports.repositories import PaymentInstanceRecord
from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.domain.currency import Currency
from budget_core.domain.periods import Cadence
from budget_core.services.obligation_service import PaidStatus


class CreateObligationRequest(BaseModel):
    """Payload for registering a recurring payment or subscription."""

    owner_id: str = Field(min_length=1, max_length=64)
    kind: ObligationKind = ObligationKind.RECURRING_PAYMENT
    name: str = Field(min_length=1, max_length=120)
    category: str = Field(min_length=1, max_length=80)
    amount_minor: int = Field(gt=0)
    currency: Currency
    cadence: Cadence
    due_day: int | None = Field(default=None, ge=1, le=31)

    @field_validator("owner_id", "name", "category")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value cannot be blank.")
        return trimmed


class ObligationResponse(BaseModel):
    """Serialized obligation returned by API."""

    id: UUID
    owner_id: str
    kind: ObligationKind
    name: str
    category: str
    amount_minor: int
    currency: Currency
    display_amount: str
    cadence: Cadence
    due_day: int | None
    active: bool

    @classmethod
    def from_model(cls, obligation: Obligation) -> ObligationResponse:
        return cls(
            id=obligation.id,
            owner_id=obligation.owner_id,
            kind=obligation.kind,
            name=obligation.name,
            category=obligation.category,
            amount_minor=obligation.amount_minor,
            currency=obligation.currency,
            display_amount=obligation.money.format(),
            cadence=obligation.cadence,
            due_day=obligation.due_day,
            active=obligation.active,
        )


class ObligationListResponse(BaseModel):
    items: list[ObligationResponse]
    total: int

    @classmethod
    def from_models(cls, obligations: list[Obligation]) -> ObligationListResponse:
        return cls(
            items=[ObligationResponse.from_model(item) for item in obligations],
            total=len(obligations),
        )


class PaymentInstanceResponse(BaseModel):
    """Payment recorded for the current period."""

    id: UUID | None
    obligation_id: UUID
    period_start: datetime
    amount_minor: int
    currency: Currency
    paid_at: datetime

    @classmethod
    def from_record(cls, record: PaymentInstanceRecord) -> PaymentInstanceResponse:
        return cls(
            id=record.id,
            obligation_id=record.obligation_id,
            period_start=record.period_start,
            amount_minor=record.amount.minor_units,
            currency=record.amount.currency,
            paid_at=record.paid_at,
        )


class PaidStatusResponse(BaseModel):
    """Paid state of an obligation for its current period."""

    obligation_id: UUID
    paid: bool
    period_start: datetime
    period_end: datetime

    @classmethod
    def from_status(cls, status: PaidStatus) -> PaidStatusResponse:
        return cls(
            obligation_id=status.obligation_id,
            paid=status.paid,
            period_start=status.period.start,
            period_end=status.period.end,
        )


class PaidStatusMapResponse(BaseModel):
    """Paid flags keyed by obligation id."""

    items: dict[UUID, bool]
