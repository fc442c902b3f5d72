"""Exchange rate persistence operations."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from budget_core.db.models.exchange_rate import ExchangeRateEntry
from budget_core.domain.currency import Currency
from budget_core.domain.exchange_rates import ExchangeRate, RateType


def _to_domain(entry: ExchangeRateEntry) -> ExchangeRate:
    return ExchangeRate(
        from_currency=entry.from_currency,
        to_currency=entry.to_currency,
        rate=Decimal(entry.rate),
        effective_date=entry.effective_date,
        rate_type=entry.rate_type,
        owner_id=entry.owner_id,
        source=entry.source,
    )


class ExchangeRateRepository:
    """Repository for owner-scoped and global exchange rates."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_visible(self, owner_id: str | None) -> list[ExchangeRate]:
        """Return global rates plus the owner's, most recent first."""

        scope = ExchangeRateEntry.owner_id.is_(None)
        if owner_id is not None:
            scope = or_(scope, ExchangeRateEntry.owner_id == owner_id)
        statement = (
            select(ExchangeRateEntry)
            .where(scope)
            .order_by(
                ExchangeRateEntry.effective_date.desc(),
                ExchangeRateEntry.created_at.desc(),
            )
        )
        return [_to_domain(entry) for entry in self._session.scalars(statement)]

    def add(
        self,
        *,
        owner_id: str | None,
        from_currency: Currency,
        to_currency: Currency,
        rate_type: RateType | None,
        rate: Decimal,
        effective_date: date,
        source: str | None,
    ) -> ExchangeRate:
        entry = ExchangeRateEntry(
            owner_id=owner_id,
            from_currency=from_currency,
            to_currency=to_currency,
            rate_type=rate_type,
            rate=rate,
            effective_date=effective_date,
            source=source,
        )
        self._session.add(entry)
        self._session.flush()
        return _to_domain(entry)
