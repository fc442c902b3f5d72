from __future__ import annotations

import logging
import sys
from logging.config import fileConfig
from pathlib import Path
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

if TYPE_CHECKING:
    from sqlalchemy import MetaData

APP_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = APP_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

logger = logging.getLogger("budget_core.alembic")


def _budget_core_metadata() -> MetaData:
    from budget_core.db.base import Base, import_orm_models

    import_orm_models()
    return Base.metadata


def _database_url() -> str:
    # An explicit -x url=... wins over DATABASE_URL from the environment.
    override = context.get_x_argument(as_dictionary=True).get("url")
    if override:
        return override

    from budget_core.core.settings import get_settings

    return get_settings().database_url


config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = _budget_core_metadata()
database_url = _database_url()


def run_migrations_offline() -> None:
    logger.info("migrations_offline")
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(database_url, poolclass=pool.NullPool)

    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
