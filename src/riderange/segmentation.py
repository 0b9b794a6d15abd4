"""Trip segmentation and range aggregation.

A device's ride log is read as a sequence of trip segments separated by
charging events. Within a segment, trip distances add up; the largest
segment total seen in a calendar month (and across the recognized years)
is the device's maximum range for that window.

The scan is a single pass over events already ordered by start time.
Events outside :data:`~riderange._constants.RECOGNIZED_YEARS` or the
optional month filter are invisible to it: they neither contribute
distance nor close a segment.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass

from riderange._constants import RECOGNIZED_YEARS
from riderange.exceptions import RangeRecordError
from riderange.models.calendar import CalendarMonth
from riderange.models.ride import RideEvent, RideKind
from riderange.state.store import AggregateStore

_logger = logging.getLogger(__name__)


@dataclass
class SegmentState:
    """Running accumulators for one device scan."""

    in_trip: bool = False
    running_distance: float = 0.0
    running_distance_yearly: float = 0.0
    max_distance_month: float = 0.0
    max_distance_yearly: float = 0.0
    current_month: CalendarMonth | None = None
    qualifying_events: int = 0

    def fold_month(self) -> None:
        if self.in_trip and self.running_distance > self.max_distance_month:
            self.max_distance_month = self.running_distance

    def fold_year(self) -> None:
        if self.in_trip and self.running_distance_yearly > self.max_distance_yearly:
            self.max_distance_yearly = self.running_distance_yearly

    def close_trip(self) -> None:
        """Charging ends the open segment, if any."""
        if self.in_trip:
            self.fold_month()
            self.fold_year()
            self.running_distance = 0.0
            self.running_distance_yearly = 0.0
        self.in_trip = False

    def add_trip(self, distance: float) -> None:
        self.in_trip = True
        self.running_distance += distance
        self.running_distance_yearly += distance


def _flush_month(state: SegmentState, store: AggregateStore, imei: str, month: CalendarMonth) -> None:
    """Close out ``state.current_month`` and start accumulating *month*.

    An open trip keeps running into the new month; only its distance so far
    is credited to the month being closed.
    """
    if state.current_month is not None and month != state.current_month:
        state.fold_month()
        store.upsert_monthly(imei, state.current_month, state.max_distance_month)
        _logger.debug(
            "Closed %s for %s at %.3f (trip open=%s)",
            state.current_month,
            imei,
            state.max_distance_month,
            state.in_trip,
        )
        state.running_distance = 0.0
        state.max_distance_month = 0.0
    state.current_month = month


def segment_device(
    imei: str,
    events: Iterable[RideEvent],
    store: AggregateStore,
    *,
    month_filter: CalendarMonth | None = None,
    recognized_years: Collection[int] = RECOGNIZED_YEARS,
) -> SegmentState:
    """Scan one device's events and merge its maxima into *store*.

    Parameters
    ----------
    imei : str
        Device identifier used as the aggregate key.
    events : iterable of RideEvent
        Events in non-decreasing ``start_time`` order.
    store : AggregateStore
        Receives one monthly upsert per qualifying month and exactly one
        yearly upsert (``0.0`` when nothing qualified).
    month_filter : CalendarMonth or None
        Only events bucketed into this month are considered.
    recognized_years : collection of int
        Year gate applied before anything else.

    Returns
    -------
    SegmentState
        Final accumulator state, mainly useful for logging and tests.

    Raises
    ------
    RangeRecordError
        A qualifying trip event has no ``ride_stats.ride_distance``.
    """
    state = SegmentState()

    for event in events:
        month = event.month
        if month.year not in recognized_years:
            continue
        if month_filter is not None and month != month_filter:
            continue

        state.qualifying_events += 1
        _flush_month(state, store, imei, month)

        if event.kind is RideKind.CHARGING:
            state.close_trip()
        elif event.kind is RideKind.TRIP:
            if event.distance is None:
                raise RangeRecordError(
                    f"Trip record for {imei} at {event.start_time.isoformat()} has no ride_stats.ride_distance",
                    imei=imei,
                    record=event.raw,
                )
            state.add_trip(event.distance)

    # A trip still open at the end of the log counts without a closing charge.
    state.fold_month()
    state.fold_year()
    if state.current_month is not None:
        store.upsert_monthly(imei, state.current_month, state.max_distance_month)
    store.upsert_yearly(imei, state.max_distance_yearly)

    _logger.debug(
        "Segmented %s: %d qualifying events, yearly max %.3f",
        imei,
        state.qualifying_events,
        state.max_distance_yearly,
    )
    return state
