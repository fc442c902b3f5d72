"""Paid/unpaid ledger for recurring obligations per billing period."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from budget_core.application.ports.repositories import (
    PaymentInstanceRecord,
    PaymentInstanceRepositoryProtocol,
)
from budget_core.domain.errors import (
    AlreadyPaidError,
    UnsupportedCadenceError,
    compose_error_message,
)
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import (
    Cadence,
    PeriodWindow,
    current_period_start,
    ensure_cadence,
    period_window,
    to_utc,
)

logger = logging.getLogger(__name__)


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by this service."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(tz=UTC)
    return to_utc(now)


class ObligationLedger:
    """Marks obligations paid for their current period, at most once each."""

    def __init__(
        self,
        *,
        payment_repository: PaymentInstanceRepositoryProtocol,
        session: SessionProtocol,
    ) -> None:
        self._payment_repository = payment_repository
        self._session = session

    @staticmethod
    def current_window(
        cadence: Cadence | str, now: datetime | None = None
    ) -> PeriodWindow:
        """Return the billing window containing now."""

        return period_window(cadence, _resolve_now(now))

    def mark_paid(
        self,
        obligation_id: UUID,
        cadence: Cadence | str,
        amount: MoneyAmount,
        now: datetime | None = None,
    ) -> PaymentInstanceRecord:
        """Record a payment for the current period.

        Raises AlreadyPaidError when the period already has a payment; the
        existing record is left untouched.
        """

        paid_at = _resolve_now(now)
        period_start = current_period_start(cadence, paid_at)

        existing = self._payment_repository.find_instance(obligation_id, period_start)
        if existing is not None:
            logger.info(
                "payment_already_marked",
                extra={
                    "obligation_id": str(obligation_id),
                    "period_start": period_start.isoformat(),
                },
            )
            raise self._already_paid(obligation_id, period_start)

        try:
            created = self._payment_repository.create_instance(
                PaymentInstanceRecord(
                    obligation_id=obligation_id,
                    period_start=period_start,
                    amount=amount,
                    paid_at=paid_at,
                )
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "payment_marked",
            extra={
                "obligation_id": str(obligation_id),
                "period_start": period_start.isoformat(),
                "amount_minor": amount.minor_units,
                "currency": amount.currency.value,
            },
        )
        return created

    def unmark_paid(
        self,
        obligation_id: UUID,
        cadence: Cadence | str,
        now: datetime | None = None,
    ) -> int:
        """Delete any payment recorded for the current period.

        Deleting nothing is not an error; the removed count is returned.
        """

        period_start = current_period_start(cadence, _resolve_now(now))
        try:
            deleted = self._payment_repository.delete_instances(
                obligation_id, period_start
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "payment_unmarked",
            extra={
                "obligation_id": str(obligation_id),
                "period_start": period_start.isoformat(),
                "deleted": deleted,
            },
        )
        return deleted

    def toggle_paid(
        self,
        obligation_id: UUID,
        cadence: Cadence | str,
        amount: MoneyAmount,
        now: datetime | None = None,
    ) -> bool:
        """Flip the paid state for the current period and return the new state."""

        now = _resolve_now(now)
        if self.is_paid_for_current_period(obligation_id, cadence, now):
            self.unmark_paid(obligation_id, cadence, now)
            return False
        self.mark_paid(obligation_id, cadence, amount, now)
        return True

    def is_paid_for_current_period(
        self,
        obligation_id: UUID,
        cadence: Cadence | str,
        now: datetime | None = None,
    ) -> bool:
        period_start = current_period_start(cadence, _resolve_now(now))
        return (
            self._payment_repository.find_instance(obligation_id, period_start)
            is not None
        )

    def is_paid_for_current_periods(
        self,
        obligation_ids: Sequence[UUID],
        cadence_by_obligation: Mapping[UUID, Cadence | str],
        now: datetime | None = None,
    ) -> dict[UUID, bool]:
        """Return paid flags for many obligations using a single fetch.

        Each obligation is tested against its own current period start since
        cadences differ.
        """

        if not obligation_ids:
            return {}

        now = _resolve_now(now)
        period_starts: dict[UUID, date] = {}
        for obligation_id in obligation_ids:
            if obligation_id not in cadence_by_obligation:
                raise UnsupportedCadenceError(None)
            cadence = ensure_cadence(cadence_by_obligation[obligation_id])
            period_starts[obligation_id] = current_period_start(cadence, now).date()

        paid_keys = {
            (instance.obligation_id, to_utc(instance.period_start).date())
            for instance in self._payment_repository.list_instances(
                list(obligation_ids)
            )
        }
        return {
            obligation_id: (obligation_id, period_starts[obligation_id]) in paid_keys
            for obligation_id in obligation_ids
        }

    @staticmethod
    def _already_paid(obligation_id: UUID, period_start: datetime) -> AlreadyPaidError:
        return AlreadyPaidError(
            message=compose_error_message(
                cause="Payment for this period is already marked as paid.",
                action="Unmark the current payment before recording it again.",
            ),
            details={
                "obligation_id": str(obligation_id),
                "period_start": period_start.date().isoformat(),
            },
        )
