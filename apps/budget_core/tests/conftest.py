from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from budget_core.api.app import create_app
from budget_core.db.base import Base, import_orm_models
from budget_core.db.models.obligation import Obligation, ObligationKind
from budget_core.db.session import get_db_session
from budget_core.domain.currency import Currency
from budget_core.domain.periods import Cadence


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    import_orm_models()
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)


def seed_obligation(
    session: Session,
    *,
    owner_id: str = "ana",
    name: str = "Alquiler",
    amount_minor: int = 5_000_000,
    currency: Currency = Currency.CRC,
    cadence: Cadence = Cadence.MONTHLY,
    kind: ObligationKind = ObligationKind.RECURRING_PAYMENT,
) -> Obligation:
    obligation = Obligation(
        owner_id=owner_id,
        kind=kind,
        name=name,
        category="Vivienda",
        amount_minor=amount_minor,
        currency=currency,
        cadence=cadence,
        active=True,
    )
    session.add(obligation)
    session.commit()
    return obligation


@pytest.fixture
def client(
    sqlite_session_factory: sessionmaker[Session],
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db_session() -> Generator[Session, None, None]:
        with sqlite_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def obligation_factory(
    sqlite_session_factory: sessionmaker[Session],
) -> Callable[..., Obligation]:
    def create(**overrides: Any) -> Obligation:
        with sqlite_session_factory() as session:
            return seed_obligation(session, **overrides)

    return create
