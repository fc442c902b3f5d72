from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from budget_core.application.ports.repositories import PaymentInstanceRecord
from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.domain.conversion import ConversionMethod, ConversionResolver
from budget_core.domain.currency import Currency
from budget_core.domain.exchange_rates import RateKey, RateType
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import Cadence
from budget_core.services.budget_summary_service import BudgetSummaryService
from budget_core.services.obligation_ledger import ObligationLedger

NOW = datetime(2024, 3, 15, 12, tzinfo=UTC)


class FakeSession:
    def commit(self) -> None:
        return None

    def rollback(self) -> None:
        return None


@dataclass
class FakePaymentInstanceRepository:
    instances: list[PaymentInstanceRecord] = field(default_factory=list)

    def find_instance(
        self, obligation_id: UUID, period_start: datetime
    ) -> PaymentInstanceRecord | None:
        return next(
            (
                instance
                for instance in self.instances
                if instance.obligation_id == obligation_id
                and instance.period_start == period_start
            ),
            None,
        )

    def create_instance(self, record: PaymentInstanceRecord) -> PaymentInstanceRecord:
        stored = replace(record, id=uuid4())
        self.instances.append(stored)
        return stored

    def delete_instances(self, obligation_id: UUID, period_start: datetime) -> int:
        return 0

    def list_instances(
        self, obligation_ids: Sequence[UUID]
    ) -> list[PaymentInstanceRecord]:
        return [i for i in self.instances if i.obligation_id in obligation_ids]


@dataclass
class FakeObligationRepository:
    obligations: list[Obligation]

    def list_active(self, owner_id: str) -> list[Obligation]:
        return [item for item in self.obligations if item.owner_id == owner_id]


class FakeRateService:
    def __init__(self, rates: dict[RateKey, Decimal]) -> None:
        self._rates = rates

    def resolver_for(self, owner_id: str | None) -> ConversionResolver:
        return ConversionResolver(self._rates)


def _obligation(
    name: str, amount_minor: int, currency: Currency, cadence: Cadence
) -> Obligation:
    return Obligation(
        id=uuid4(),
        owner_id="ana",
        kind=ObligationKind.SUBSCRIPTION,
        name=name,
        category="Hogar",
        amount_minor=amount_minor,
        currency=currency,
        cadence=cadence,
        active=True,
    )


@pytest.fixture
def rent() -> Obligation:
    return _obligation("Alquiler", 5_000_000, Currency.CRC, Cadence.MONTHLY)


@pytest.fixture
def service(rent: Obligation) -> tuple[BudgetSummaryService, ObligationLedger]:
    obligations = [
        rent,
        _obligation("Netflix", 1500, Currency.USD, Cadence.MONTHLY),
        _obligation("Gimnasio", 2000, Currency.CAD, Cadence.WEEKLY),
    ]
    ledger = ObligationLedger(
        payment_repository=FakePaymentInstanceRepository(), session=FakeSession()
    )
    summary_service = BudgetSummaryService(
        obligation_repository=FakeObligationRepository(obligations),
        rate_service=FakeRateService(
            {RateKey(Currency.USD, Currency.CRC, RateType.BUY): Decimal("500")}
        ),
        ledger=ledger,
    )
    return summary_service, ledger


def test_summary_converts_and_splits_totals_by_paid_state(
    service: tuple[BudgetSummaryService, ObligationLedger],
    rent: Obligation,
) -> None:
    summary_service, ledger = service
    ledger.mark_paid(rent.id, rent.cadence, rent.money, NOW)

    summary = summary_service.get_summary(owner_id="ana", now=NOW)

    assert summary.base_currency == Currency.CRC
    assert summary.total == MoneyAmount(5_752_000, Currency.CRC)
    assert summary.paid_total == MoneyAmount(5_000_000, Currency.CRC)
    assert summary.pending_total == MoneyAmount(752_000, Currency.CRC)
    assert summary.monthly_projection == MoneyAmount(5_758_660, Currency.CRC)
    assert summary.paid_count == 1
    assert [item.conversion.method for item in summary.items] == [
        ConversionMethod.DIRECT,
        ConversionMethod.DIRECT,
        ConversionMethod.UNRESOLVED,
    ]


def test_summary_reports_missing_rates_once_per_pair(
    service: tuple[BudgetSummaryService, ObligationLedger],
    caplog: pytest.LogCaptureFixture,
) -> None:
    summary_service, _ = service

    with caplog.at_level(logging.WARNING, logger="budget_core"):
        summary = summary_service.get_summary(owner_id="ana", now=NOW)

    assert [warning.label() for warning in summary.warnings] == ["CAD → CRC"]
    assert summary.paid_count == 0
    assert summary.paid_total == MoneyAmount.zero(Currency.CRC)
    assert [record.getMessage() for record in caplog.records] == [
        "conversion_rates_missing"
    ]


def test_summary_items_carry_their_own_period_window(
    service: tuple[BudgetSummaryService, ObligationLedger],
) -> None:
    summary_service, _ = service

    summary = summary_service.get_summary(owner_id="ana", now=NOW)

    periods = {item.name: item.period.start for item in summary.items}
    assert periods["Alquiler"] == datetime(2024, 3, 1, tzinfo=UTC)
    assert periods["Gimnasio"] == datetime(2024, 3, 11, tzinfo=UTC)


def test_summary_for_owner_without_obligations_is_empty(
    service: tuple[BudgetSummaryService, ObligationLedger],
) -> None:
    summary_service, _ = service

    summary = summary_service.get_summary(owner_id="bia", now=NOW)

    assert summary.items == []
    assert summary.total == MoneyAmount.zero(Currency.CRC)
    assert summary.warnings == []


def test_summary_in_foreign_base_keeps_local_rate_sides() -> None:
    ledger = ObligationLedger(
        payment_repository=FakePaymentInstanceRepository(), session=FakeSession()
    )
    summary_service = BudgetSummaryService(
        obligation_repository=FakeObligationRepository(
            [_obligation("Alquiler", 5_200_000, Currency.CRC, Cadence.MONTHLY)]
        ),
        rate_service=FakeRateService(
            {
                RateKey(Currency.USD, Currency.CRC, RateType.BUY): Decimal("500"),
                RateKey(Currency.USD, Currency.CRC, RateType.SELL): Decimal("520"),
            }
        ),
        ledger=ledger,
    )

    summary = summary_service.get_summary(
        owner_id="ana", base_currency=Currency.USD, now=NOW
    )

    assert summary.base_currency == Currency.USD
    assert summary.total == MoneyAmount(10400, Currency.USD)
    assert summary.items[0].conversion.method == ConversionMethod.REVERSED
