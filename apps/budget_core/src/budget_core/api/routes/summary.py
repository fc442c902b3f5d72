"""Budget summary routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from budget_core.api.dependencies import get_budget_summary_service
from budget_core.api.schemas.summary import BudgetSummaryResponse
from budget_core.domain.currency import BASE_CURRENCY, Currency
from budget_core.services.budget_summary_service import BudgetSummaryService

router = APIRouter(prefix="/summary", tags=["Summary"])


@router.get("", response_model=BudgetSummaryResponse)
def get_budget_summary(
    owner_id: Annotated[str, Query(min_length=1, max_length=64)],
    service: Annotated[BudgetSummaryService, Depends(get_budget_summary_service)],
    base_currency: Annotated[Currency, Query()] = BASE_CURRENCY,
) -> BudgetSummaryResponse:
    """Return obligation totals converted into the base currency."""

    summary = service.get_summary(owner_id=owner_id, base_currency=base_currency)
    return BudgetSummaryResponse.from_summary(summary)
