"""FastAPI application factory for the budget core API."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_core.api.error_handlers import register_error_handlers
from budget_core.api.routes import v1_router
from budget_core.core.logging_setup import configure_logging
from budget_core.core.settings import get_settings
from budget_core.db.session import get_db_session

logger = logging.getLogger(__name__)

health_router = APIRouter(prefix="/health", include_in_schema=False)


@health_router.get("/live")
def health_live() -> dict[str, str]:
    return {"status": "alive"}


@health_router.get("/ready")
def health_ready(
    db_session: Annotated[Session, Depends(get_db_session)],
) -> dict[str, str]:
    """Report ready only when the database answers a trivial query."""

    try:
        db_session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("database_unavailable", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is unavailable",
        ) from exc
    return {"status": "ready"}


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Budget Core API", version="0.1.0")
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(v1_router)
    return app


app = create_app()
