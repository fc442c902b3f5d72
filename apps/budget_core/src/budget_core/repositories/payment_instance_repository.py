"""Payment instance persistence operations."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, time, timedelta
from uuid import UUID

from sqlalchemy import ColumnElement, and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_core.application.ports.repositories import PaymentInstanceRecord
from budget_core.db.models.payment_instance import (
    PAYMENT_PERIOD_UNIQUE_INDEX,
    PaymentInstance,
)
from budget_core.domain.errors import AlreadyPaidError
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import to_utc

# SQLite reports the violated columns instead of the index name.
_DUPLICATE_MARKERS = (
    PAYMENT_PERIOD_UNIQUE_INDEX,
    "payment_instances.obligation_id, payment_instances.period_start",
)


def is_duplicate_payment_error(exc: IntegrityError) -> bool:
    """Return whether an integrity error comes from the period unique index."""

    error_text = str(exc.orig)
    return any(marker in error_text for marker in _DUPLICATE_MARKERS)


def _to_record(instance: PaymentInstance) -> PaymentInstanceRecord:
    return PaymentInstanceRecord(
        id=instance.id,
        obligation_id=instance.obligation_id,
        period_start=to_utc(instance.period_start),
        amount=MoneyAmount(instance.amount_minor, instance.currency),
        paid_at=to_utc(instance.paid_at),
    )


def _same_period(obligation_id: UUID, period_start: datetime) -> ColumnElement[bool]:
    """Match instances of an obligation whose period starts on the same UTC date."""

    day_start = datetime.combine(to_utc(period_start).date(), time.min, tzinfo=UTC)
    return and_(
        PaymentInstance.obligation_id == obligation_id,
        PaymentInstance.period_start >= day_start,
        PaymentInstance.period_start < day_start + timedelta(days=1),
    )


class PaymentInstanceRepository:
    """SQL implementation of the payment instance port."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_instance(
        self, obligation_id: UUID, period_start: datetime
    ) -> PaymentInstanceRecord | None:
        statement = (
            select(PaymentInstance)
            .where(_same_period(obligation_id, period_start))
            .order_by(PaymentInstance.paid_at)
        )
        instance = self._session.scalars(statement).first()
        return _to_record(instance) if instance is not None else None

    def create_instance(self, record: PaymentInstanceRecord) -> PaymentInstanceRecord:
        """Insert one instance; a concurrent duplicate raises AlreadyPaidError."""

        instance = PaymentInstance(
            obligation_id=record.obligation_id,
            period_start=record.period_start,
            amount_minor=record.amount.minor_units,
            currency=record.amount.currency,
            paid_at=record.paid_at,
        )
        try:
            with self._session.begin_nested():
                self._session.add(instance)
                self._session.flush()
        except IntegrityError as exc:
            if not is_duplicate_payment_error(exc):
                raise
            raise AlreadyPaidError(
                details={
                    "obligation_id": str(record.obligation_id),
                    "period_start": record.period_start.date().isoformat(),
                }
            ) from exc
        return _to_record(instance)

    def delete_instances(self, obligation_id: UUID, period_start: datetime) -> int:
        statement = (
            delete(PaymentInstance)
            .where(_same_period(obligation_id, period_start))
            .execution_options(synchronize_session="fetch")
        )
        result = self._session.execute(statement)
        return int(result.rowcount or 0)

    def list_instances(
        self, obligation_ids: Sequence[UUID]
    ) -> list[PaymentInstanceRecord]:
        if not obligation_ids:
            return []
        statement = select(PaymentInstance).where(
            PaymentInstance.obligation_id.in_(list(obligation_ids))
        )
        return [_to_record(instance) for instance in self._session.scalars(statement)]
