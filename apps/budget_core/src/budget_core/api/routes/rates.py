"""Exchange rate routes."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from budget_core.api.dependencies import get_rate_service
from budget_core.api.schemas.rates import (
    CreateRateRequest,
    RateListResponse,
    RateResponse,
)
from budget_core.services.rate_service import CreateRateInput, RateService

router = APIRouter(prefix="/rates", tags=["Exchange Rates"])


@router.post(
    "",
    response_model=RateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid payload"},
    },
)
def create_rate(
    payload: CreateRateRequest,
    service: Annotated[RateService, Depends(get_rate_service)],
) -> RateResponse:
    """Register an owner-scoped or global exchange rate."""

    rate = service.create_rate(
        CreateRateInput(
            from_currency=payload.from_currency,
            to_currency=payload.to_currency,
            rate=Decimal(payload.rate),
            rate_type=payload.rate_type,
            effective_date=payload.effective_date,
            owner_id=payload.owner_id,
            source=payload.source,
        )
    )
    return RateResponse.from_domain(rate)


@router.get("", response_model=RateListResponse)
def list_rates(
    service: Annotated[RateService, Depends(get_rate_service)],
    owner_id: Annotated[str | None, Query(min_length=1, max_length=64)] = None,
) -> RateListResponse:
    """List visible rates in lookup precedence order."""

    return RateListResponse.from_domain(service.list_rates(owner_id))
