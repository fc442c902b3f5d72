from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from budget_core.application.ports.repositories import PaymentInstanceRecord
from budget_core.db.models.obligation import Obligation
from budget_core.db.models.payment_instance import PaymentInstance
from budget_core.domain.currency import Currency
from budget_core.domain.errors import AlreadyPaidError
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import Cadence
from budget_core.repositories.payment_instance_repository import (
    PaymentInstanceRepository,
)
from budget_core.services.obligation_ledger import ObligationLedger

MARCH = datetime(2024, 3, 1, tzinfo=UTC)


def _record(obligation: Obligation) -> PaymentInstanceRecord:
    return PaymentInstanceRecord(
        obligation_id=obligation.id,
        period_start=MARCH,
        amount=obligation.money,
        paid_at=datetime(2024, 3, 15, tzinfo=UTC),
    )


def test_unique_index_turns_duplicate_insert_into_already_paid(
    sqlite_session_factory: sessionmaker[Session],
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory()

    with sqlite_session_factory() as session:
        repository = PaymentInstanceRepository(session)
        repository.create_instance(_record(obligation))
        session.commit()

        with pytest.raises(AlreadyPaidError) as exc_info:
            repository.create_instance(_record(obligation))
        session.rollback()

    assert exc_info.value.details["period_start"] == "2024-03-01"
    with sqlite_session_factory() as session:
        count = session.scalar(select(func.count()).select_from(PaymentInstance))
    assert count == 1


def test_records_come_back_with_utc_period_start(
    sqlite_session_factory: sessionmaker[Session],
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory(currency=Currency.USD, amount_minor=1599)

    with sqlite_session_factory() as session:
        repository = PaymentInstanceRepository(session)
        repository.create_instance(_record(obligation))
        session.commit()

    with sqlite_session_factory() as session:
        repository = PaymentInstanceRepository(session)
        found = repository.find_instance(obligation.id, MARCH)
        listed = repository.list_instances([obligation.id])

    assert found is not None
    assert found.period_start == MARCH
    assert found.amount == MoneyAmount(1599, Currency.USD)
    assert listed == [found]


def test_ledger_round_trip_over_sql_storage(
    sqlite_session_factory: sessionmaker[Session],
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory(cadence=Cadence.WEEKLY)

    with sqlite_session_factory() as session:
        ledger = ObligationLedger(
            payment_repository=PaymentInstanceRepository(session), session=session
        )
        ledger.mark_paid(
            obligation.id,
            obligation.cadence,
            obligation.money,
            datetime(2024, 3, 6, 10, tzinfo=UTC),
        )
        with pytest.raises(AlreadyPaidError):
            ledger.mark_paid(
                obligation.id,
                obligation.cadence,
                obligation.money,
                datetime(2024, 3, 8, tzinfo=UTC),
            )

        paid = ledger.is_paid_for_current_periods(
            [obligation.id],
            {obligation.id: obligation.cadence},
            datetime(2024, 3, 10, 23, tzinfo=UTC),
        )
        deleted = ledger.unmark_paid(
            obligation.id, obligation.cadence, datetime(2024, 3, 4, tzinfo=UTC)
        )

    assert paid == {obligation.id: True}
    assert deleted == 1


def test_ledger_matches_stored_period_start_by_utc_date(
    sqlite_session_factory: sessionmaker[Session],
    obligation_factory: Callable[..., Obligation],
) -> None:
    obligation = obligation_factory()
    now = datetime(2024, 3, 15, tzinfo=UTC)

    with sqlite_session_factory() as session:
        session.add(
            PaymentInstance(
                obligation_id=obligation.id,
                period_start=datetime(2024, 3, 1, 5, 30),
                amount_minor=obligation.amount_minor,
                currency=obligation.currency,
                paid_at=datetime(2024, 3, 2, tzinfo=UTC),
            )
        )
        session.commit()

    with sqlite_session_factory() as session:
        ledger = ObligationLedger(
            payment_repository=PaymentInstanceRepository(session), session=session
        )
        single = ledger.is_paid_for_current_period(
            obligation.id, obligation.cadence, now
        )
        batch = ledger.is_paid_for_current_periods(
            [obligation.id], {obligation.id: obligation.cadence}, now
        )
        with pytest.raises(AlreadyPaidError):
            ledger.mark_paid(obligation.id, obligation.cadence, obligation.money, now)
        deleted = ledger.unmark_paid(obligation.id, obligation.cadence, now)

    assert single is True
    assert batch == {obligation.id: True}
    assert deleted == 1
    with sqlite_session_factory() as session:
        count = session.scalar(select(func.count()).select_from(PaymentInstance))
    assert count == 0
