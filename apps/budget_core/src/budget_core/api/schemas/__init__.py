"""API request and response schemas."""

from budget_core.api.schemas.conversions import ConversionResponse, ConvertRequest
from budget_core.api.schemas.obligations import (
    CreateObligationRequest,
    ObligationListResponse,
    ObligationResponse,
    PaidStatusResponse,
    PaymentInstanceResponse,
)
from budget_core.api.schemas.periods import PeriodResponse
from budget_core.api.schemas.rates import CreateRateRequest, RateListResponse
from budget_core.api.schemas.summary import BudgetSummaryResponse

__all__ = [
    "BudgetSummaryResponse",
    "ConversionResponse",
    "ConvertRequest",
    "CreateObligationRequest",
    "CreateRateRequest",
    "ObligationListResponse",
    "ObligationResponse",
    "PaidStatusResponse",
    "PaymentInstanceResponse",
    "PeriodResponse",
    "RateListResponse",
]
