"""Custom exception hierarchy for riderange."""

from __future__ import annotations

from typing import Any


class RangeError(Exception):
    """Base exception for all riderange errors."""


class RangeConfigError(RangeError):
    """Invalid or missing configuration (e.g. no IMEIs to process)."""


class RangeStorageError(RangeError):
    """DynamoDB call failed."""

    def __init__(
        self,
        message: str,
        *,
        imei: str = "",
        table: str = "",
        operation: str = "",
    ) -> None:
        self.imei = imei
        self.table = table
        self.operation = operation
        super().__init__(message)


class RangeFetchError(RangeStorageError):
    """Ride events could not be read for a device.

    Fatal: the whole invocation is aborted and no partial results are returned.
    """


class RangePersistError(RangeStorageError):
    """An aggregate could not be written.

    Writes already issued are not rolled back.
    """


class RangeRecordError(RangeError):
    """A stored ride record is missing a field the scan cannot do without."""

    def __init__(
        self,
        message: str,
        *,
        imei: str = "",
        record: dict[str, Any] | None = None,
    ) -> None:
        self.imei = imei
        self.record = record if record is not None else {}
        super().__init__(message)
