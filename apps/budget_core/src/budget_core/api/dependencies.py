"""API dependency providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from budget_core.db.session import get_db_session
from budget_core.repositories.exchange_rate_repository import ExchangeRateRepository
from budget_core.repositories.obligation_repository import ObligationRepository
from budget_core.repositories.payment_instance_repository import (
    PaymentInstanceRepository,
)
from budget_core.services.budget_summary_service import BudgetSummaryService
from budget_core.services.obligation_ledger import ObligationLedger
from budget_core.services.obligation_service import ObligationService
from budget_core.services.rate_service import RateService


def get_obligation_ledger(
    session: Annotated[Session, Depends(get_db_session)],
) -> ObligationLedger:
    """Build obligation ledger with per-request session."""

    return ObligationLedger(
        payment_repository=PaymentInstanceRepository(session),
        session=session,
    )


def get_obligation_service(
    session: Annotated[Session, Depends(get_db_session)],
    ledger: Annotated[ObligationLedger, Depends(get_obligation_ledger)],
) -> ObligationService:
    """Build obligation service sharing the request session with the ledger."""

    return ObligationService(
        obligation_repository=ObligationRepository(session),
        ledger=ledger,
        session=session,
    )


def get_rate_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> RateService:
    """Build rate service with per-request session."""

    return RateService(
        exchange_rate_repository=ExchangeRateRepository(session),
        session=session,
    )


def get_budget_summary_service(
    session: Annotated[Session, Depends(get_db_session)],
    ledger: Annotated[ObligationLedger, Depends(get_obligation_ledger)],
    rate_service: Annotated[RateService, Depends(get_rate_service)],
) -> BudgetSummaryService:
    """Build budget summary service over obligations, rates and ledger."""

    return BudgetSummaryService(
        obligation_repository=ObligationRepository(session),
        rate_service=rate_service,
        ledger=ledger,
    )
