"""Repository ports for the obligation ledger."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from budget_core.domain.money import MoneyAmount


@dataclass(frozen=True, slots=True)
class PaymentInstanceRecord:
    """One obligation marked paid for one billing period."""

    obligation_id: UUID
    period_start: datetime
    amount: MoneyAmount
    paid_at: datetime
    id: UUID | None = None


class PaymentInstanceRepositoryProtocol(Protocol):
    """Port for payment instance persistence.

    Implementations should enforce uniqueness of
    ``(obligation_id, period_start)`` and raise ``AlreadyPaidError`` from
    ``create_instance`` when it is violated.

    Lookups and deletes match ``period_start`` by its UTC calendar date, so a
    stored start that lost or changed its time zone still belongs to the
    same period.
    """

    def find_instance(
        self, obligation_id: UUID, period_start: datetime
    ) -> PaymentInstanceRecord | None:
        """Return the instance recorded for an obligation and period."""

    def create_instance(self, record: PaymentInstanceRecord) -> PaymentInstanceRecord:
        """Persist a new instance and return the stored value."""

    def delete_instances(self, obligation_id: UUID, period_start: datetime) -> int:
        """Delete instances for an obligation and period, returning the count."""

    def list_instances(
        self, obligation_ids: Sequence[UUID]
    ) -> list[PaymentInstanceRecord]:
        """Return all instances recorded for the given obligations."""
