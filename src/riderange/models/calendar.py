"""Calendar month bucketing."""

from __future__ import annotations

import dataclasses
import re
from datetime import UTC, datetime, tzinfo

from riderange._constants import RIDE_MONTH_OFFSET

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclasses.dataclass(frozen=True, order=True)
class CalendarMonth:
    """A ``(year, month)`` bucket, rendered as ``"YYYY-MM"``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @classmethod
    def from_instant(cls, instant: datetime, offset: tzinfo = RIDE_MONTH_OFFSET) -> CalendarMonth:
        """Bucket *instant* by its calendar month on the *offset* clock.

        Naive datetimes are taken to be UTC. Instants whose local time falls
        outside the ``datetime`` range are clamped to the first or last
        representable month.
        """
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        try:
            local = instant.astimezone(offset)
        except OverflowError:
            edge = datetime.min if instant.year == datetime.min.year else datetime.max
            return cls(edge.year, edge.month)
        return cls(local.year, local.month)

    @classmethod
    def parse(cls, value: str) -> CalendarMonth:
        """Parse ``"YYYY-MM"``. Raises :class:`ValueError` on any other shape."""
        match = _MONTH_RE.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise ValueError(f"expected YYYY-MM, got {value!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
