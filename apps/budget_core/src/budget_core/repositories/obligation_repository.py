"""Obligation persistence operations."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.domain.currency import Currency
from budget_core.domain.periods import Cadence


class ObligationRepository:
    """Repository for recurring payments and subscriptions."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, obligation_id: UUID) -> Obligation | None:
        statement = select(Obligation).where(Obligation.id == obligation_id)
        return self._session.scalar(statement)

    def list_active(self, owner_id: str) -> list[Obligation]:
        """Return the owner's active obligations, oldest first."""

        statement = (
            select(Obligation)
            .where(Obligation.owner_id == owner_id, Obligation.active.is_(True))
            .order_by(Obligation.created_at.asc(), Obligation.name.asc())
        )
        return list(self._session.scalars(statement).all())

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
    ) -> Obligation:
        obligation = Obligation(
            owner_id=owner_id,
            kind=kind,
            name=name,
            category=category,
            amount_minor=amount_minor,
            currency=currency,
            cadence=cadence,
            due_day=due_day,
            active=True,
        )
        self._session.add(obligation)
        self._session.flush()
        return obligation
