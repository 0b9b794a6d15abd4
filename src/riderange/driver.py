"""Invocation driver: fetch, segment, merge, persist, respond."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from riderange._constants import EMPTY_IMEI_MESSAGE
from riderange._storage import DynamoRideBackend, RideBackend
from riderange.config import RangeConfig
from riderange.exceptions import RangeConfigError, RangeError
from riderange.ingestion.rides import fetch_ride_events
from riderange.models.aggregates import RangeReport
from riderange.models.invocation import InvocationEvent
from riderange.persistence import write_monthly_ranges, write_yearly_ranges
from riderange.segmentation import segment_device
from riderange.state.store import AggregateStore

_logger = logging.getLogger(__name__)


class RangeDriver:
    """Runs one range aggregation over the configured devices.

    Usage::

        async with RangeDriver(config) as driver:
            report = await driver.run({"input_ride_month": "2023-07"})
    """

    def __init__(self, config: RangeConfig, *, backend: RideBackend | None = None) -> None:
        self._config = config
        self._backend = backend

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RangeDriver:
        if self._backend is None:
            self._backend = DynamoRideBackend(self._config)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    @property
    def config(self) -> RangeConfig:
        return self._config

    def _require_backend(self) -> RideBackend:
        if self._backend is None:
            raise RangeError("Driver not initialized. Use 'async with RangeDriver(...) as driver:'")
        return self._backend

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self, event: InvocationEvent | Mapping[str, Any] | None = None) -> RangeReport:
        """Aggregate all configured devices and persist the monthly maxima.

        Devices are processed one after another; the first fetch, record or
        write failure aborts the run.

        Raises
        ------
        RangeConfigError
            No IMEIs are configured. Raised before any storage call.
        RangeFetchError
            Reading a device's events failed.
        RangeRecordError
            A stored record is malformed (strict mode).
        RangePersistError
            Writing an aggregate failed.
        """
        if not self._config.imeis:
            raise RangeConfigError(EMPTY_IMEI_MESSAGE)

        if event is None:
            invocation = InvocationEvent()
        elif isinstance(event, InvocationEvent):
            invocation = event
        else:
            invocation = InvocationEvent.model_validate(dict(event))

        backend = self._require_backend()
        month_filter = invocation.input_ride_month
        store = AggregateStore()
        events = 0
        skipped = 0

        _logger.info(
            "Range run over %d devices (month filter: %s)",
            len(self._config.imeis),
            month_filter if month_filter is not None else "none",
        )

        for imei in self._config.imeis:
            fetched = await fetch_ride_events(backend, imei, strict=self._config.strict_records)
            events += len(fetched.events)
            skipped += fetched.skipped
            state = segment_device(imei, fetched.events, store, month_filter=month_filter)
            _logger.info(
                "Device %s: %d qualifying events, yearly max range %.3f",
                imei,
                state.qualifying_events,
                state.max_distance_yearly,
            )

        monthly = list(store.monthly())
        yearly = list(store.yearly())

        writes = await write_monthly_ranges(backend, monthly)
        if self._config.persist_yearly:
            await write_yearly_ranges(backend, yearly)

        return RangeReport(
            monthly=monthly,
            yearly=yearly,
            devices=len(self._config.imeis),
            events=events,
            skipped_records=skipped,
            monthly_writes=writes,
        )
