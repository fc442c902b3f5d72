"""Exchange rate registration and resolver construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from budget_core.domain.conversion import ConversionOutcome, ConversionResolver
from budget_core.domain.currency import BASE_CURRENCY, Currency
from budget_core.domain.errors import InvalidRequestError, compose_error_message
from budget_core.domain.exchange_rates import (
    ExchangeRate,
    RateType,
    build_rate_table,
    select_rate_snapshot,
)
from budget_core.domain.money import MoneyAmount

logger = logging.getLogger(__name__)


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by this service."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class ExchangeRateRepositoryProtocol(Protocol):
    """Exchange rate repository contract consumed by service."""

    def list_visible(self, owner_id: str | None) -> list[ExchangeRate]: ...

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
    ) -> ExchangeRate: ...


@dataclass(slots=True, frozen=True)
class CreateRateInput:
    """Input model for registering one exchange rate."""

    from_currency: Currency
    to_currency: Currency
    rate: Decimal
    effective_date: date
    rate_type: RateType | None = None
    owner_id: str | None = None
    source: str | None = None


class RateService:
    """Stores rates and builds conversion resolvers over rate snapshots."""

    def __init__(
        self,
        *,
        exchange_rate_repository: ExchangeRateRepositoryProtocol,
        session: SessionProtocol,
    ) -> None:
        self._exchange_rate_repository = exchange_rate_repository
        self._session = session

    def create_rate(self, payload: CreateRateInput) -> ExchangeRate:
        if payload.from_currency == payload.to_currency:
            raise InvalidRequestError(
                message=compose_error_message(
                    cause="from_currency and to_currency must differ.",
                    action="Choose two different currencies for the rate.",
                )
            )
        if payload.rate <= 0:
            raise InvalidRequestError(
                message=compose_error_message(
                    cause="Rate must be greater than zero.",
                    action="Provide a positive decimal rate.",
                )
            )

        try:
            created = self._exchange_rate_repository.add(
                owner_id=payload.owner_id,
                from_currency=payload.from_currency,
                to_currency=payload.to_currency,
                rate_type=payload.rate_type,
                rate=payload.rate,
                effective_date=payload.effective_date,
                source=payload.source,
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "exchange_rate_created",
            extra={
                "pair": f"{created.from_currency.value}_{created.to_currency.value}",
                "rate_type": created.rate_type.value if created.rate_type else None,
                "owner_id": created.owner_id,
                "effective_date": created.effective_date.isoformat(),
            },
        )
        return created

    def list_rates(self, owner_id: str | None) -> list[ExchangeRate]:
        """Return the rates visible to an owner in lookup precedence order."""

        return select_rate_snapshot(
            self._exchange_rate_repository.list_visible(owner_id), owner_id
        )

    def resolver_for(self, owner_id: str | None) -> ConversionResolver:
        """Return a resolver over the owner's current rate snapshot.

        BUY and SELL sides stay anchored on the local bank currency whatever
        currency the caller converts into.
        """

        table = build_rate_table(self.list_rates(owner_id))
        return ConversionResolver(table, local_currency=BASE_CURRENCY)

    def convert(
        self,
        amount: MoneyAmount,
        to_currency: Currency,
        *,
        owner_id: str | None = None,
    ) -> ConversionOutcome:
        outcome = self.resolver_for(owner_id).convert(amount, to_currency)
        if not outcome.succeeded:
            logger.warning(
                "conversion_rate_missing",
                extra={
                    "from_currency": outcome.source_currency.value,
                    "to_currency": outcome.target_currency.value,
                    "owner_id": owner_id,
                },
            )
        return outcome
