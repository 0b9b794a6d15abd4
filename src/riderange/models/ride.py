"""Ride event model.

Mapped from items of the ``ride_data`` table, projected to
``ride_type``, ``ride_start`` and ``ride_stats``.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from riderange.ingestion.normalize import distance_or_zero, parse_epoch_seconds
from riderange.models.calendar import CalendarMonth

EpochSeconds = Annotated[datetime, BeforeValidator(parse_epoch_seconds)]
"""Annotated type that coerces epoch seconds (int, Decimal or str) to UTC datetimes."""


class RideKind(StrEnum):
    """Event kind stored in ``ride_type``.

    Unmapped values resolve to ``OTHER``, which the segmentation scan ignores.
    """

    TRIP = "trip"
    CHARGING = "charging"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> RideKind:
        return cls.OTHER


class RideEvent(BaseModel):
    """One stored ride or charging event for a device.

    ``distance`` is ``None`` when the record carries no
    ``ride_stats.ride_distance`` at all; a present but non-numeric value
    becomes ``0.0``. All original data is available in the ``raw`` dict.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    kind: RideKind = Field(validation_alias=AliasChoices("ride_type", "kind"))
    """Event kind."""
    start_time: EpochSeconds = Field(validation_alias=AliasChoices("ride_start", "start_time"))
    """Event start, UTC."""
    distance: float | None = None
    """Trip distance; only meaningful for ``RideKind.TRIP``."""

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original storage record."""

    @property
    def month(self) -> CalendarMonth:
        """Calendar month this event is bucketed into."""
        return CalendarMonth.from_instant(self.start_time)

    @model_validator(mode="before")
    @classmethod
    def _flatten_ride_stats(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        if "distance" not in merged:
            stats = merged.get("ride_stats")
            if isinstance(stats, dict) and "ride_distance" in stats:
                merged["distance"] = stats["ride_distance"]
        return merged

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> RideKind:
        if not isinstance(value, str):
            raise ValueError(f"ride_type must be a string, got {value!r}")
        return RideKind(value)

    @field_validator("distance", mode="before")
    @classmethod
    def _coerce_distance(cls, value: Any) -> float | None:
        if value is None:
            return None
        return distance_or_zero(value)
