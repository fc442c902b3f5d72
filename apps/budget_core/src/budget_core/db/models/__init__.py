"""ORM models for the budget_core domain."""

from budget_core.db.models.exchange_rate import ExchangeRateEntry
from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.db.models.payment_instance import PaymentInstance

__all__ = [
    "ExchangeRateEntry",
    "Obligation",
    "ObligationKind",
    "PaymentInstance",
]
