"""Normalization helpers.

Centralizes defensive parsing of DynamoDB attribute values.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, InvalidOperation):
        return None
    if math.isnan(result):
        return None
    return result


def distance_or_zero(value: Any) -> float:
    """Parse a string-encoded ride distance, treating garbage as ``0.0``."""
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return 0.0
    return parsed


def parse_epoch_seconds(value: Any) -> datetime:
    """Convert an integer epoch (seconds) to a UTC datetime.

    DynamoDB numbers arrive as :class:`~decimal.Decimal` through the boto3
    resource layer, and as strings through the low-level client; both are
    accepted. Raises :class:`ValueError` for anything that is not a
    non-negative whole number.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bool) or value is None:
        raise ValueError(f"ride_start must be epoch seconds, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"ride_start must be epoch seconds, got {value!r}") from exc
    if not number.is_finite() or number != number.to_integral_value() or number < 0:
        raise ValueError(f"ride_start must be epoch seconds, got {value!r}")
    try:
        return datetime.fromtimestamp(int(number), tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError(f"ride_start out of range, got {value!r}") from exc
