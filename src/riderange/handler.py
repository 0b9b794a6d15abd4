"""AWS Lambda entrypoint.

Configuration is read from the environment once per invocation and passed
into :class:`~riderange.driver.RangeDriver`. A missing device list or a
malformed month filter is answered with ``{"error": ...}``; every other
failure propagates and fails the invocation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from riderange._constants import INVALID_MONTH_MESSAGE
from riderange.config import RangeConfig
from riderange.driver import RangeDriver
from riderange.exceptions import RangeConfigError
from riderange.models.invocation import InvocationEvent

_logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Apply *level* to the package logger (the Lambda runtime owns handlers)."""
    logging.getLogger("riderange").setLevel(level.upper())


async def handle(config: RangeConfig, event: Any) -> list[dict[str, Any]] | dict[str, str]:
    """Run one invocation and shape the response body."""
    payload: dict[str, Any] = event if isinstance(event, dict) else {}

    async with RangeDriver(config) as driver:
        # An empty device list is reported ahead of a bad month filter.
        invocation: InvocationEvent | None = None
        if config.imeis:
            try:
                invocation = InvocationEvent.model_validate(payload)
            except ValidationError:
                _logger.warning("Rejected input_ride_month %r", payload.get("input_ride_month"))
                return {"error": INVALID_MONTH_MESSAGE}
        try:
            report = await driver.run(invocation)
        except RangeConfigError as exc:
            _logger.warning("Invocation rejected: %s", exc)
            return {"error": str(exc)}

    _logger.info(
        "Range run complete: %d devices, %d events, %d monthly aggregates",
        report.devices,
        report.events,
        len(report.monthly),
    )
    return report.payload()


def lambda_handler(event: Any, context: Any) -> list[dict[str, Any]] | dict[str, str]:
    config = RangeConfig.from_env()
    configure_logging(config.log_level)
    return asyncio.run(handle(config, event))
