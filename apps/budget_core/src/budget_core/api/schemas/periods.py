"""Schemas for billing period endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from budget_core.domain.periods import Cadence, PeriodWindow


class PeriodResponse(BaseModel):
    """Billing window of one cadence."""

    cadence: Cadence
    start: datetime
    end: datetime
    display_text: str

    @classmethod
    def from_window(
        cls, *, cadence: Cadence, window: PeriodWindow, display_text: str
    ) -> PeriodResponse:
        return cls(
            cadence=cadence,
            start=window.start,
            end=window.end,
            display_text=display_text,
        )
