"""Aggregate persistence.

Writes are issued sequentially, one per aggregate, and the first failure
aborts the remaining ones. Nothing already written is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from riderange._storage import RideBackend
from riderange.models.aggregates import MonthlyAggregate, YearlyAggregate

_logger = logging.getLogger(__name__)


async def write_monthly_ranges(backend: RideBackend, aggregates: Iterable[MonthlyAggregate]) -> int:
    """Persist every monthly aggregate and return the number written."""
    written = 0
    for aggregate in aggregates:
        await backend.put_monthly_range(aggregate.imei, str(aggregate.month), aggregate.max_distance)
        written += 1
    _logger.info("Persisted %d monthly range aggregates", written)
    return written


async def write_yearly_ranges(backend: RideBackend, aggregates: Iterable[YearlyAggregate]) -> int:
    """Persist every yearly aggregate and return the number written."""
    written = 0
    for aggregate in aggregates:
        await backend.put_yearly_range(aggregate.imei, aggregate.max_distance)
        written += 1
    _logger.info("Persisted %d yearly range aggregates", written)
    return written
