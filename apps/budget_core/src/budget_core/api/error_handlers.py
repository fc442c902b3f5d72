"""Exception handlers rendering every failure as ``{code, message, details?}``."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from budget_core.domain.errors import (
    AlreadyPaidError,
    DomainError,
    InvalidRequestError,
    compose_error_message,
)
from budget_core.repositories.payment_instance_repository import (
    is_duplicate_payment_error,
)

logger = logging.getLogger(__name__)


def _json_error(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"code": code, "message": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _from_integrity_error(exc: IntegrityError) -> DomainError:
    if is_duplicate_payment_error(exc):
        return AlreadyPaidError()
    return DomainError(
        code="PERSISTENCE_ERROR",
        message=compose_error_message(
            cause="Stored data rejected the change.",
            action="Check the request against existing records and retry.",
        ),
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
    )


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "domain_error",
        extra={"code": exc.code, "path": request.url.path},
    )
    return _json_error(exc.status_code, exc.code, exc.message, exc.details)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report payload and query validation failures as INVALID_REQUEST."""

    error = InvalidRequestError(
        message=compose_error_message(
            cause="Some request fields are missing or malformed.",
            action="Correct the fields listed in details and resend.",
        ),
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return await handle_domain_error(request, error)


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Surface constraint violations that escaped the repositories."""

    return await handle_domain_error(request, _from_integrity_error(exc))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unexpected_error",
        extra={"error_type": type(exc).__name__, "path": request.url.path},
    )
    return _json_error(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        compose_error_message(
            cause="The server failed while handling the request.",
            action="Retry later; report the problem if it keeps happening.",
        ),
        {"error_type": type(exc).__name__},
    )


def register_error_handlers(app: FastAPI) -> None:
    handlers: tuple[tuple[type[Exception], Any], ...] = (
        (DomainError, handle_domain_error),
        (RequestValidationError, handle_validation_error),
        (IntegrityError, handle_integrity_error),
        (Exception, handle_unexpected_error),
    )
    for exception_class, handler in handlers:
        app.add_exception_handler(exception_class, cast(Any, handler))
