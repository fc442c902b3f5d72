"""Obligation registration and paid-state operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from budget_core.application.ports.repositories import PaymentInstanceRecord
from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.domain.currency import Currency
from budget_core.domain.errors import (
    InvalidRequestError,
    ObligationNotFoundError,
    compose_error_message,
)
from budget_core.domain.periods import Cadence, PeriodWindow
from budget_core.services.obligation_ledger import ObligationLedger

logger = logging.getLogger(__name__)


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by this service."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class ObligationRepositoryProtocol(Protocol):
    """Obligation repository contract consumed by service."""

    def get(self, obligation_id: UUID) -> Obligation | None: ...

    def list_active(self, owner_id: str) -> list[Obligation]: ...

    def add(
        self,
        *,
        owner_id: str,
        kind: ObligationKind,
        name: str,
        category: str,
        amount_minor: int,
        currency: Currency,
        cadence: Cadence,
        due_day: int | None,
    ) -> Obligation: ...


@dataclass(slots=True, frozen=True)
class CreateObligationInput:
    """Input model for registering a recurring payment or subscription."""

    owner_id: str
    kind: ObligationKind
    name: str
    category: str
    amount_minor: int
    currency: Currency
    cadence: Cadence
    due_day: int | None = None


@dataclass(slots=True, frozen=True)
class PaidStatus:
    """Paid state of one obligation for the period containing a moment."""

    obligation_id: UUID
    paid: bool
    period: PeriodWindow


class ObligationService:
    """Resolves obligations and delegates paid-state changes to the ledger."""

    def __init__(
        self,
        *,
        obligation_repository: ObligationRepositoryProtocol,
        ledger: ObligationLedger,
        session: SessionProtocol,
    ) -> None:
        self._obligation_repository = obligation_repository
        self._ledger = ledger
        self._session = session

    def create_obligation(self, payload: CreateObligationInput) -> Obligation:
        if payload.amount_minor <= 0:
            raise InvalidRequestError(
                message=compose_error_message(
                    cause="Amount must be a positive integer of minor units.",
                    action="Send amount_minor greater than zero.",
                )
            )

        try:
            obligation = self._obligation_repository.add(
                owner_id=payload.owner_id.strip(),
                kind=payload.kind,
                name=payload.name.strip(),
                category=payload.category.strip(),
                amount_minor=payload.amount_minor,
                currency=payload.currency,
                cadence=payload.cadence,
                due_day=payload.due_day,
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "obligation_created",
            extra={
                "obligation_id": str(obligation.id),
                "owner_id": obligation.owner_id,
                "cadence": obligation.cadence.value,
            },
        )
        return obligation

    def list_obligations(self, owner_id: str) -> list[Obligation]:
        return self._obligation_repository.list_active(owner_id)

    def get_obligation(self, obligation_id: UUID) -> Obligation:
        obligation = self._obligation_repository.get(obligation_id)
        if obligation is None:
            raise ObligationNotFoundError(
                details={"obligation_id": str(obligation_id)}
            )
        return obligation

    def mark_current_paid(
        self, obligation_id: UUID, now: datetime | None = None
    ) -> PaymentInstanceRecord:
        """Record the obligation's own amount as paid for its current period."""

        obligation = self.get_obligation(obligation_id)
        return self._ledger.mark_paid(
            obligation.id, obligation.cadence, obligation.money, now
        )

    def unmark_current_paid(
        self, obligation_id: UUID, now: datetime | None = None
    ) -> int:
        obligation = self.get_obligation(obligation_id)
        return self._ledger.unmark_paid(obligation.id, obligation.cadence, now)

    def toggle_current_paid(
        self, obligation_id: UUID, now: datetime | None = None
    ) -> PaidStatus:
        obligation = self.get_obligation(obligation_id)
        paid = self._ledger.toggle_paid(
            obligation.id, obligation.cadence, obligation.money, now
        )
        return PaidStatus(
            obligation_id=obligation.id,
            paid=paid,
            period=self._ledger.current_window(obligation.cadence, now),
        )

    def current_paid_status(
        self, obligation_id: UUID, now: datetime | None = None
    ) -> PaidStatus:
        obligation = self.get_obligation(obligation_id)
        return PaidStatus(
            obligation_id=obligation.id,
            paid=self._ledger.is_paid_for_current_period(
                obligation.id, obligation.cadence, now
            ),
            period=self._ledger.current_window(obligation.cadence, now),
        )

    def paid_status_map(
        self, owner_id: str, now: datetime | None = None
    ) -> dict[UUID, bool]:
        """Return paid flags for all of an owner's active obligations."""

        obligations = self._obligation_repository.list_active(owner_id)
        return self._ledger.is_paid_for_current_periods(
            [obligation.id for obligation in obligations],
            {obligation.id: obligation.cadence for obligation in obligations},
            now,
        )
