"""Invocation envelope model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from riderange.models.calendar import CalendarMonth


class InvocationEvent(BaseModel):
    """Trigger payload.

    ``input_ride_month`` restricts the scan to a single ``"YYYY-MM"`` month.
    Absent, ``null`` or blank means every recognized month. Other keys of the
    trigger envelope are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    input_ride_month: CalendarMonth | None = None

    @field_validator("input_ride_month", mode="before")
    @classmethod
    def _parse_month(cls, value: Any) -> CalendarMonth | None:
        if value is None or isinstance(value, CalendarMonth):
            return value
        if isinstance(value, str):
            if not value.strip():
                return None
            return CalendarMonth.parse(value)
        raise ValueError(f"expected YYYY-MM, got {value!r}")
