"""Domain exceptions shared by services, repositories and the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, ClassVar


def compose_error_message(*, cause: str, action: str) -> str:
    """Build a user-facing error message with cause and corrective action."""

    return f"Cause: {cause} Action: {action}"


@dataclass(slots=True)
class DomainError(Exception):
    """Base exception for predictable domain failures."""

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class _PresetError(DomainError):
    """Domain error whose code, status and default wording are fixed."""

    preset_code: ClassVar[str]
    preset_status: ClassVar[HTTPStatus]
    preset_cause: ClassVar[str]
    preset_action: ClassVar[str]

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=self.preset_code,
            message=message
            or compose_error_message(
                cause=self.preset_cause, action=self.preset_action
            ),
            status_code=self.preset_status,
            details=details or {},
        )


class InvalidRequestError(_PresetError):
    preset_code = "INVALID_REQUEST"
    preset_status = HTTPStatus.BAD_REQUEST
    preset_cause = "Request data violates business rules."
    preset_action = "Adjust the input fields and try again."


class AlreadyPaidError(_PresetError):
    """Raised when an obligation already has a payment for its current period."""

    preset_code = "ALREADY_PAID"
    preset_status = HTTPStatus.CONFLICT
    preset_cause = "Payment for this period is already marked as paid."
    preset_action = "Unmark the current payment first if it must be recorded again."


class ObligationNotFoundError(_PresetError):
    preset_code = "OBLIGATION_NOT_FOUND"
    preset_status = HTTPStatus.NOT_FOUND
    preset_cause = "No obligation exists with the provided identifier."
    preset_action = "Check the obligation id and retry."


class UnsupportedCadenceError(ValueError):
    """Raised when a billing cadence outside the supported set reaches the core."""

    def __init__(self, cadence: object) -> None:
        super().__init__(f"Unsupported billing cadence: {cadence!r}")
        self.cadence = cadence
