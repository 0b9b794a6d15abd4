"""Aggregate and response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from riderange.models.calendar import CalendarMonth


class RideRangeOutput(BaseModel):
    """One entry of the invocation response."""

    model_config = ConfigDict(frozen=True)

    imei: str
    ride_month: str
    total_range: float


class MonthlyAggregate(BaseModel):
    """Largest contiguous trip distance of a device within one month."""

    model_config = ConfigDict(frozen=True)

    imei: str
    month: CalendarMonth
    max_distance: float

    def to_output(self) -> RideRangeOutput:
        return RideRangeOutput(imei=self.imei, ride_month=str(self.month), total_range=self.max_distance)


class YearlyAggregate(BaseModel):
    """Largest contiguous trip distance of a device across the recognized years."""

    model_config = ConfigDict(frozen=True)

    imei: str
    max_distance: float


class RangeReport(BaseModel):
    """Result of one driver run.

    Parameters
    ----------
    monthly : list of MonthlyAggregate
        Per ``(imei, month)`` maxima, in store iteration order.
    yearly : list of YearlyAggregate
        Per-device maxima, one for every processed device.
    devices : int
        Number of devices scanned.
    events : int
        Number of ride events fetched across all devices.
    skipped_records : int
        Malformed records dropped (lenient mode only).
    monthly_writes : int
        Monthly aggregates persisted.
    """

    model_config = ConfigDict(frozen=True)

    monthly: list[MonthlyAggregate] = Field(default_factory=list)
    yearly: list[YearlyAggregate] = Field(default_factory=list)
    devices: int = 0
    events: int = 0
    skipped_records: int = 0
    monthly_writes: int = 0

    def outputs(self) -> list[RideRangeOutput]:
        return [aggregate.to_output() for aggregate in self.monthly]

    def payload(self) -> list[dict[str, Any]]:
        """JSON-ready response body: one dict per monthly aggregate."""
        return [output.model_dump() for output in self.outputs()]
