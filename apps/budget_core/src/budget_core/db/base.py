"""Declarative base and the registry of ORM model modules."""

from importlib import import_module

from sqlalchemy.orm import DeclarativeBase

ORM_MODEL_MODULES = (
    "budget_core.db.models.obligation",
    "budget_core.db.models.payment_instance",
    "budget_core.db.models.exchange_rate",
)


class Base(DeclarativeBase):
    pass


def import_orm_models() -> None:
    """Import every model module so ``Base.metadata`` knows all tables."""

    for module_name in ORM_MODEL_MODULES:
        import_module(module_name)
