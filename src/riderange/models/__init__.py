"""Data models for ride events and range aggregates."""

from riderange.models.aggregates import MonthlyAggregate, RangeReport, RideRangeOutput, YearlyAggregate
from riderange.models.calendar import CalendarMonth
from riderange.models.invocation import InvocationEvent
from riderange.models.ride import EpochSeconds, RideEvent, RideKind

__all__ = [
    "CalendarMonth",
    "EpochSeconds",
    "InvocationEvent",
    "MonthlyAggregate",
    "RangeReport",
    "RideEvent",
    "RideKind",
    "RideRangeOutput",
    "YearlyAggregate",
]
