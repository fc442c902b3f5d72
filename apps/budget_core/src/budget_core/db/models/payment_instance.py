"""Payment instance ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_core.db.base import Base
from budget_core.domain.currency import Currency

PAYMENT_PERIOD_UNIQUE_INDEX = "uq_payment_instances_obligation_period"


class PaymentInstance(Base):
    """Records one obligation as paid for one billing period."""

    __tablename__ = "payment_instances"
    __table_args__ = (
        Index(
            PAYMENT_PERIOD_UNIQUE_INDEX,
            "obligation_id",
            "period_start",
            unique=True,
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    obligation_id: Mapped[UUID] = mapped_column(
        ForeignKey("obligations.id", ondelete="CASCADE"),
        nullable=False,
    )
    period_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
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
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    obligation: Mapped[Any] = relationship(
        "Obligation",
        back_populates="payment_instances",
    )
