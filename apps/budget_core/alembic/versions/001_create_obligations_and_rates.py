"""Create obligation, payment instance and exchange rate tables.

Revision ID: 001_create_obligations_and_rates
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_obligations_and_rates"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


currency_enum = postgresql.ENUM("USD", "CRC", "CAD", name="currency", create_type=False)
payment_cadence_enum = postgresql.ENUM(
    "MONTHLY", "WEEKLY", "BIWEEKLY", name="payment_cadence", create_type=False
)
obligation_kind_enum = postgresql.ENUM(
    "recurring_payment", "subscription", name="obligation_kind", create_type=False
)
rate_type_enum = postgresql.ENUM("BUY", "SELL", name="rate_type", create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (
        currency_enum,
        payment_cadence_enum,
        obligation_kind_enum,
        rate_type_enum,
    ):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "obligations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("kind", obligation_kind_enum, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("amount_minor", sa.BigInteger(), nullable=False),
        sa.Column("currency", currency_enum, nullable=False),
        sa.Column("cadence", payment_cadence_enum, nullable=False),
        sa.Column("due_day", sa.SmallInteger(), nullable=True),
        sa.Column(
            "active", sa.Boolean(), nullable=False, server_default=sa.text("true")
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("amount_minor > 0", name="ck_obligations_amount_positive"),
        sa.CheckConstraint(
            "due_day IS NULL OR due_day BETWEEN 1 AND 31",
            name="ck_obligations_due_day_range",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_obligations_owner_active",
        "obligations",
        ["owner_id", "active"],
        unique=False,
    )

    op.create_table(
        "payment_instances",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("obligation_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("amount_minor", sa.BigInteger(), nullable=False),
        sa.Column("currency", currency_enum, nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["obligation_id"],
            ["obligations.id"],
            name="fk_payment_instances_obligation_id",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_payment_instances_obligation_period",
        "payment_instances",
        ["obligation_id", "period_start"],
        unique=True,
    )

    op.create_table(
        "exchange_rates",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=True),
        sa.Column("from_currency", currency_enum, nullable=False),
        sa.Column("to_currency", currency_enum, nullable=False),
        sa.Column("rate_type", rate_type_enum, nullable=True),
        sa.Column("rate", sa.Numeric(18, 6), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=False),
        sa.Column("source", sa.String(length=120), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("rate > 0", name="ck_exchange_rates_rate_positive"),
        sa.CheckConstraint(
            "from_currency != to_currency",
            name="ck_exchange_rates_distinct_currencies",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_exchange_rates_owner_effective",
        "exchange_rates",
        ["owner_id", "effective_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_exchange_rates_owner_effective", table_name="exchange_rates")
    op.drop_table("exchange_rates")

    op.drop_index(
        "uq_payment_instances_obligation_period", table_name="payment_instances"
    )
    op.drop_table("payment_instances")

    op.drop_index("ix_obligations_owner_active", table_name="obligations")
    op.drop_table("obligations")

    bind = op.get_bind()
    rate_type_enum.drop(bind, checkfirst=True)
    obligation_kind_enum.drop(bind, checkfirst=True)
    payment_cadence_enum.drop(bind, checkfirst=True)
    currency_enum.drop(bind, checkfirst=True)
