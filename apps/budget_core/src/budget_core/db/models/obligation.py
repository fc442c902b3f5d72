"""Recurring obligation ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    SmallInteger,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_core.db.base import Base
from budget_core.domain.currency import Currency
from budget_core.domain.money import MoneyAmount
from budget_core.domain.periods import Cadence


class ObligationKind(enum.StrEnum):
    """Kinds of recurring obligations tracked for paid status."""

    RECURRING_PAYMENT = "recurring_payment"
    SUBSCRIPTION = "subscription"


class Obligation(Base):
    """Represents a recurring payment or subscription of one owner."""

    __tablename__ = "obligations"
    __table_args__ = (
        CheckConstraint("amount_minor > 0", name="ck_obligations_amount_positive"),
        CheckConstraint(
            "due_day IS NULL OR due_day BETWEEN 1 AND 31",
            name="ck_obligations_due_day_range",
        ),
        Index("ix_obligations_owner_active", "owner_id", "active"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    kind: Mapped[ObligationKind] = mapped_column(
        Enum(
            ObligationKind,
            name="obligation_kind",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    category: Mapped[str] = mapped_column(String(80), nullable=False)
    amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[Currency] = mapped_column(
        Enum(
            Currency,
            name="currency",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    cadence: Mapped[Cadence] = mapped_column(
        Enum(
            Cadence,
            name="payment_cadence",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    due_day: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    payment_instances: Mapped[list[Any]] = relationship(
        "PaymentInstance",
        back_populates="obligation",
        cascade="all, delete-orphan",
    )

    @property
    def money(self) -> MoneyAmount:
        return MoneyAmount(self.amount_minor, self.currency)
