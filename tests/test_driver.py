"""End-to-end driver tests against an in-memory ride backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytest
from pydantic import ValidationError

from riderange._constants import RIDE_MONTH_OFFSET
from riderange.config import RangeConfig
from riderange.driver import RangeDriver
from riderange.exceptions import RangeConfigError, RangeError, RangeFetchError, RangePersistError, RangeRecordError
from riderange.models.invocation import InvocationEvent

IMEI_A = "867530900000001"
IMEI_B = "867530900000002"


def _ts(year: int, month: int, day: int = 10) -> int:
    return int(datetime(year, month, day, 12, tzinfo=RIDE_MONTH_OFFSET).timestamp())


def _trip(start: int, distance: float) -> dict[str, Any]:
    return {"ride_type": "trip", "ride_start": start, "ride_stats": {"ride_distance": str(distance)}}


def _charging(start: int) -> dict[str, Any]:
    return {"ride_type": "charging", "ride_start": start}


@dataclass
class FakeRideBackend:
    records: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    monthly_writes: list[tuple[str, str, float]] = field(default_factory=list)
    yearly_writes: list[tuple[str, float]] = field(default_factory=list)
    fail_query_for: str | None = None
    fail_put_after: int | None = None

    async def query_rides(self, imei: str) -> list[dict[str, Any]]:
        self.calls.append(("query", imei))
        if imei == self.fail_query_for:
            raise RangeFetchError(f"Querying ride_data for {imei} failed", imei=imei, operation="Query")
        return list(self.records.get(imei, []))

    async def put_monthly_range(self, imei: str, ride_month: str, max_range: float) -> None:
        self.calls.append(("put_monthly", imei))
        if self.fail_put_after is not None and len(self.monthly_writes) >= self.fail_put_after:
            raise RangePersistError("write failed", imei=imei, operation="PutItem")
        self.monthly_writes.append((imei, ride_month, max_range))

    async def put_yearly_range(self, imei: str, max_range: float) -> None:
        self.calls.append(("put_yearly", imei))
        self.yearly_writes.append((imei, max_range))


@pytest.fixture
def backend() -> FakeRideBackend:
    return FakeRideBackend(
        records={
            IMEI_A: [
                _trip(_ts(2023, 1, 5), 10),
                _trip(_ts(2023, 1, 6), 5),
                _charging(_ts(2023, 1, 7)),
                _trip(_ts(2023, 7, 1), 30),
                _charging(_ts(2023, 7, 2)),
                _trip(_ts(2023, 7, 3), 12),
            ],
            IMEI_B: [
                _trip(_ts(2022, 7, 1), 999),
                _trip(_ts(2023, 7, 1), 8),
                _trip(_ts(2023, 8, 1), 9),
            ],
        }
    )


@pytest.mark.asyncio
async def test_run_aggregates_persists_and_reports(backend: FakeRideBackend) -> None:
    config = RangeConfig(imeis=(IMEI_A, IMEI_B))

    async with RangeDriver(config, backend=backend) as driver:
        report = await driver.run()

    expected = [
        (IMEI_A, "2023-01", 15.0),
        (IMEI_A, "2023-07", 30.0),
        (IMEI_B, "2023-07", 8.0),
        (IMEI_B, "2023-08", 9.0),
    ]
    assert sorted(backend.monthly_writes) == expected
    assert sorted((o.imei, o.ride_month, o.total_range) for o in report.outputs()) == expected
    assert {y.imei: y.max_distance for y in report.yearly} == {IMEI_A: 30.0, IMEI_B: 17.0}
    assert backend.yearly_writes == []
    assert report.devices == 2
    assert report.events == 9
    assert report.monthly_writes == 4


@pytest.mark.asyncio
async def test_devices_are_processed_sequentially_before_writes(backend: FakeRideBackend) -> None:
    config = RangeConfig(imeis=(IMEI_A, IMEI_B))

    async with RangeDriver(config, backend=backend) as driver:
        await driver.run()

    assert backend.calls[:2] == [("query", IMEI_A), ("query", IMEI_B)]
    assert all(kind == "put_monthly" for kind, _ in backend.calls[2:])


@pytest.mark.asyncio
async def test_month_filter_restricts_every_device(backend: FakeRideBackend) -> None:
    config = RangeConfig(imeis=(IMEI_A, IMEI_B))

    async with RangeDriver(config, backend=backend) as driver:
        report = await driver.run({"input_ride_month": "2023-07"})

    assert {o.ride_month for o in report.outputs()} == {"2023-07"}
    assert sorted(backend.monthly_writes) == [(IMEI_A, "2023-07", 30.0), (IMEI_B, "2023-07", 8.0)]


@pytest.mark.asyncio
async def test_month_filter_accepts_model(backend: FakeRideBackend) -> None:
    config = RangeConfig(imeis=(IMEI_B,))

    async with RangeDriver(config, backend=backend) as driver:
        report = await driver.run(InvocationEvent.model_validate({"input_ride_month": "2023-08"}))

    assert report.payload() == [{"imei": IMEI_B, "ride_month": "2023-08", "total_range": 9.0}]


@pytest.mark.asyncio
async def test_empty_device_list_makes_no_storage_calls(backend: FakeRideBackend) -> None:
    async with RangeDriver(RangeConfig(imeis=()), backend=backend) as driver:
        with pytest.raises(RangeConfigError, match="IMEI cannot be empty"):
            await driver.run()

    assert backend.calls == []


@pytest.mark.asyncio
async def test_invalid_month_is_rejected_before_storage_calls(backend: FakeRideBackend) -> None:
    async with RangeDriver(RangeConfig(imeis=(IMEI_A,)), backend=backend) as driver:
        with pytest.raises(ValidationError):
            await driver.run({"input_ride_month": "July"})

    assert backend.calls == []


@pytest.mark.asyncio
async def test_fetch_error_aborts_without_writes(backend: FakeRideBackend) -> None:
    backend.fail_query_for = IMEI_B

    async with RangeDriver(RangeConfig(imeis=(IMEI_A, IMEI_B)), backend=backend) as driver:
        with pytest.raises(RangeFetchError):
            await driver.run()

    assert backend.monthly_writes == []


@pytest.mark.asyncio
async def test_persist_error_stops_remaining_writes(backend: FakeRideBackend) -> None:
    backend.fail_put_after = 1

    async with RangeDriver(RangeConfig(imeis=(IMEI_A, IMEI_B)), backend=backend) as driver:
        with pytest.raises(RangePersistError):
            await driver.run()

    assert len(backend.monthly_writes) == 1
    assert [kind for kind, _ in backend.calls].count("put_monthly") == 2


@pytest.mark.asyncio
async def test_malformed_record_fails_in_strict_mode(backend: FakeRideBackend) -> None:
    backend.records[IMEI_A].append({"ride_start": _ts(2023, 9, 1)})

    async with RangeDriver(RangeConfig(imeis=(IMEI_A,)), backend=backend) as driver:
        with pytest.raises(RangeRecordError):
            await driver.run()

    assert backend.monthly_writes == []


@pytest.mark.asyncio
async def test_malformed_record_skipped_in_lenient_mode(backend: FakeRideBackend) -> None:
    backend.records[IMEI_A].append({"ride_start": _ts(2023, 9, 1)})
    config = RangeConfig(imeis=(IMEI_A,), strict_records=False)

    async with RangeDriver(config, backend=backend) as driver:
        report = await driver.run()

    assert report.skipped_records == 1
    assert report.events == 6


@pytest.mark.asyncio
async def test_yearly_sink_is_opt_in(backend: FakeRideBackend) -> None:
    config = RangeConfig(imeis=(IMEI_A, IMEI_B), persist_yearly=True)

    async with RangeDriver(config, backend=backend) as driver:
        await driver.run()

    assert backend.yearly_writes == [(IMEI_A, 30.0), (IMEI_B, 17.0)]


@pytest.mark.asyncio
async def test_device_without_qualifying_events_reports_zero_yearly() -> None:
    backend = FakeRideBackend(records={IMEI_A: [_trip(_ts(2021, 1, 1), 40)]})

    async with RangeDriver(RangeConfig(imeis=(IMEI_A,)), backend=backend) as driver:
        report = await driver.run()

    assert report.monthly == []
    assert [(y.imei, y.max_distance) for y in report.yearly] == [(IMEI_A, 0.0)]
    assert backend.monthly_writes == []


@pytest.mark.asyncio
async def test_run_requires_context_manager() -> None:
    driver = RangeDriver(RangeConfig(imeis=(IMEI_A,)))

    with pytest.raises(RangeError, match="not initialized"):
        await driver.run()
