"""Billing period routes."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Query

from budget_core.api.schemas.periods import PeriodResponse
from budget_core.core.settings import get_settings
from budget_core.domain.periods import Cadence, period_display_text, period_window

router = APIRouter(prefix="/periods", tags=["Periods"])


@router.get("/current", response_model=PeriodResponse)
def get_current_period(
    cadence: Annotated[Cadence, Query()],
    at: Annotated[datetime | None, Query()] = None,
    locale: Annotated[str | None, Query(min_length=2, max_length=16)] = None,
) -> PeriodResponse:
    """Return the billing window containing ``at`` (defaults to now)."""

    reference = at or datetime.now(tz=UTC)
    window = period_window(cadence, reference)
    return PeriodResponse.from_window(
        cadence=cadence,
        window=window,
        display_text=period_display_text(
            window.start, cadence, locale or get_settings().default_locale
        ),
    )
