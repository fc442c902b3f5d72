"""Obligation and paid-state routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response, status

from budget_core.api.dependencies import get_obligation_service
from budget_core.api.schemas.obligations import (
    CreateObligationRequest,
    ObligationListResponse,
    ObligationResponse,
    PaidStatusMapResponse,
    PaidStatusResponse,
    PaymentInstanceResponse,
)
from budget_core.services.obligation_service import (
    CreateObligationInput,
    ObligationService,
)

router = APIRouter(prefix="/obligations", tags=["Obligations"])

ObligationId = Annotated[UUID, Path()]


@router.post(
    "",
    response_model=ObligationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid payload"},
    },
)
def create_obligation(
    payload: CreateObligationRequest,
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> ObligationResponse:
    """Register a recurring payment or subscription."""

    obligation = service.create_obligation(
        CreateObligationInput(
            owner_id=payload.owner_id,
            kind=payload.kind,
            name=payload.name,
            category=payload.category,
            amount_minor=payload.amount_minor,
            currency=payload.currency,
            cadence=payload.cadence,
            due_day=payload.due_day,
        )
    )
    return ObligationResponse.from_model(obligation)


@router.get("", response_model=ObligationListResponse)
def list_obligations(
    owner_id: Annotated[str, Query(min_length=1, max_length=64)],
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> ObligationListResponse:
    """List an owner's active obligations."""

    return ObligationListResponse.from_models(service.list_obligations(owner_id))


@router.get("/paid-status", response_model=PaidStatusMapResponse)
def get_paid_status_map(
    owner_id: Annotated[str, Query(min_length=1, max_length=64)],
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> PaidStatusMapResponse:
    """Return current-period paid flags for all of an owner's obligations."""

    return PaidStatusMapResponse(items=service.paid_status_map(owner_id))


@router.post(
    "/{obligation_id}/payments/current",
    response_model=PaymentInstanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Obligation not found"},
        409: {"description": "Already paid for the current period"},
    },
)
def mark_current_paid(
    obligation_id: ObligationId,
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> PaymentInstanceResponse:
    """Mark the obligation as paid for its current billing period."""

    record = service.mark_current_paid(obligation_id)
    return PaymentInstanceResponse.from_record(record)


@router.delete(
    "/{obligation_id}/payments/current",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Obligation not found"},
    },
)
def unmark_current_paid(
    obligation_id: ObligationId,
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> Response:
    """Remove the current-period payment; succeeds when there is none."""

    service.unmark_current_paid(obligation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{obligation_id}/payments/current",
    response_model=PaidStatusResponse,
    responses={
        404: {"description": "Obligation not found"},
    },
)
def get_current_paid_status(
    obligation_id: ObligationId,
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> PaidStatusResponse:
    """Return whether the obligation is paid for its current period."""

    return PaidStatusResponse.from_status(service.current_paid_status(obligation_id))


@router.post(
    "/{obligation_id}/payments/current/toggle",
    response_model=PaidStatusResponse,
    responses={
        404: {"description": "Obligation not found"},
    },
)
def toggle_current_paid(
    obligation_id: ObligationId,
    service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> PaidStatusResponse:
    """Flip the current-period paid state."""

    return PaidStatusResponse.from_status(service.toggle_current_paid(obligation_id))
