"""Ride event fetching.

Reads every stored record for one device, validates each into a
:class:`~riderange.models.RideEvent` and returns them in start-time order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from riderange._storage import RideBackend
from riderange.exceptions import RangeRecordError
from riderange.models.ride import RideEvent, RideKind

_logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Events for one device plus the number of records dropped."""

    imei: str
    events: list[RideEvent] = field(default_factory=list)
    skipped: int = 0


def parse_ride_record(imei: str, record: dict[str, Any]) -> RideEvent:
    """Validate one storage record.

    Raises
    ------
    RangeRecordError
        ``ride_type`` or ``ride_start`` is missing or unusable.
    """
    try:
        return RideEvent.model_validate(record)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise RangeRecordError(
            f"Malformed ride record for {imei}: invalid {', '.join(fields) or 'record'}",
            imei=imei,
            record=record,
        ) from exc


async def fetch_ride_events(backend: RideBackend, imei: str, *, strict: bool = True) -> FetchResult:
    """Fetch and parse all ride events for *imei*, oldest first.

    Parameters
    ----------
    backend : RideBackend
        Storage backend.
    imei : str
        Device identifier.
    strict : bool
        When ``True`` the first malformed record aborts with
        :class:`RangeRecordError`. When ``False`` malformed records, and trips
        without a ``ride_distance``, are dropped and counted.

    Raises
    ------
    RangeFetchError
        The backend query failed.
    RangeRecordError
        A record is malformed and *strict* is set.
    """
    records = await backend.query_rides(imei)
    result = FetchResult(imei=imei)

    for record in records:
        try:
            event = parse_ride_record(imei, record)
        except RangeRecordError as exc:
            if strict:
                raise
            _logger.warning("Skipping record: %s", exc)
            result.skipped += 1
            continue
        if not strict and event.kind is RideKind.TRIP and event.distance is None:
            _logger.warning("Skipping trip record for %s without ride_distance", imei)
            result.skipped += 1
            continue
        result.events.append(event)

    # Storage order is not guaranteed to follow ride_start; sorted() is stable.
    result.events = sorted(result.events, key=lambda event: event.start_time)

    _logger.info("Fetched %d events for %s (%d skipped)", len(result.events), imei, result.skipped)
    return result
