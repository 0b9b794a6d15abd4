"""Deterministic in-memory aggregate store.

This is the only component allowed to merge range maxima.
"""

from __future__ import annotations

from collections.abc import Iterator

from riderange.models.aggregates import MonthlyAggregate, YearlyAggregate
from riderange.models.calendar import CalendarMonth


def _max_merge(existing: float | None, candidate: float) -> float:
    """Merge policy: keep the larger value, never sum."""
    if existing is None:
        existing = 0.0
    return candidate if candidate > existing else existing


class AggregateStore:
    """Per-invocation store of monthly and yearly range maxima.

    Given the same sequence of upserts it produces the same contents in any
    call order; iteration follows first insertion of each key.
    """

    def __init__(self) -> None:
        self._monthly: dict[tuple[str, CalendarMonth], float] = {}
        self._yearly: dict[str, float] = {}

    def upsert_monthly(self, imei: str, month: CalendarMonth, value: float) -> float:
        """Merge *value* into ``(imei, month)`` and return the stored maximum."""
        key = (imei, month)
        merged = _max_merge(self._monthly.get(key), value)
        self._monthly[key] = merged
        return merged

    def upsert_yearly(self, imei: str, value: float) -> float:
        """Merge *value* into the device's yearly maximum and return it."""
        merged = _max_merge(self._yearly.get(imei), value)
        self._yearly[imei] = merged
        return merged

    def get_monthly(self, imei: str, month: CalendarMonth) -> float | None:
        return self._monthly.get((imei, month))

    def get_yearly(self, imei: str) -> float | None:
        return self._yearly.get(imei)

    def monthly(self) -> Iterator[MonthlyAggregate]:
        for (imei, month), value in self._monthly.items():
            yield MonthlyAggregate(imei=imei, month=month, max_distance=value)

    def yearly(self) -> Iterator[YearlyAggregate]:
        for imei, value in self._yearly.items():
            yield YearlyAggregate(imei=imei, max_distance=value)

    def __len__(self) -> int:
        return len(self._monthly)
