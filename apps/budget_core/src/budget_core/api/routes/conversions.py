"""Conversion routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from budget_core.api.dependencies import get_rate_service
from budget_core.api.schemas.conversions import ConversionResponse, ConvertRequest
from budget_core.domain.money import MoneyAmount
from budget_core.services.rate_service import RateService

router = APIRouter(prefix="/conversions", tags=["Conversions"])


@router.post(
    "",
    response_model=ConversionResponse,
    responses={
        400: {"description": "Invalid payload"},
    },
)
def convert_amount(
    payload: ConvertRequest,
    service: Annotated[RateService, Depends(get_rate_service)],
) -> ConversionResponse:
    """Convert an amount using the latest visible rates.

    A missing rate is not an error: the response carries the original amount
    with method ``unresolved``.
    """

    outcome = service.convert(
        MoneyAmount(payload.amount_minor, payload.currency),
        payload.to_currency,
        owner_id=payload.owner_id,
    )
    return ConversionResponse.from_outcome(outcome)
