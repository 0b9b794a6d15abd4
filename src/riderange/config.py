"""Job configuration for riderange."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from riderange._constants import (
    DEFAULT_REGION,
    MONTHLY_RANGE_TABLE,
    RIDES_TABLE,
    YEARLY_RANGE_TABLE,
)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def parse_imeis(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated IMEI list, dropping blank entries."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class RangeConfig:
    """Job configuration.

    Parameters
    ----------
    imeis : tuple of str
        Devices to process, in order. Empty means there is nothing to do
        and the invocation answers with a soft error payload.
    region : str
        AWS region of the DynamoDB tables.
    rides_table : str
        Table holding ride/charging events, partitioned by ``imei``.
    monthly_table : str
        Destination table for per-month maximum ranges.
    yearly_table : str
        Destination table for per-device maximum ranges. Only written
        when ``persist_yearly`` is set.
    persist_yearly : bool
        Also persist the yearly aggregate.
    strict_records : bool
        Abort on a malformed ride record (missing ``ride_type`` or
        ``ride_start``). When ``False`` such records are skipped and counted.
    log_level : str
        Level applied to the ``riderange`` logger by the Lambda entrypoint.
    """

    imeis: tuple[str, ...] = ()
    region: str = DEFAULT_REGION
    rides_table: str = RIDES_TABLE
    monthly_table: str = MONTHLY_RANGE_TABLE
    yearly_table: str = YEARLY_RANGE_TABLE
    persist_yearly: bool = False
    strict_records: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> RangeConfig:
        """Create configuration from environment variables.

        Reads ``IMEIS`` plus the optional ``RANGE_*`` variables. ``AWS_REGION``
        is honoured when ``RANGE_AWS_REGION`` is not set. Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {"imeis": parse_imeis(env.get("IMEIS"))}

        region = env.get("RANGE_AWS_REGION") or env.get("AWS_REGION")
        if region:
            config_kwargs["region"] = region

        _ENV_CONFIG_MAP = {
            "RANGE_RIDES_TABLE": "rides_table",
            "RANGE_MONTHLY_TABLE": "monthly_table",
            "RANGE_YEARLY_TABLE": "yearly_table",
            "RANGE_LOG_LEVEL": "log_level",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        if "persist_yearly" not in overrides:
            config_kwargs["persist_yearly"] = _env_bool(env.get("RANGE_PERSIST_YEARLY"), False)

        if "strict_records" not in overrides:
            config_kwargs["strict_records"] = _env_bool(env.get("RANGE_STRICT_RECORDS"), True)

        imeis_override = overrides.pop("imeis", None)
        if isinstance(imeis_override, str):
            config_kwargs["imeis"] = parse_imeis(imeis_override)
        elif imeis_override is not None:
            config_kwargs["imeis"] = tuple(str(imei).strip() for imei in imeis_override if str(imei).strip())

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
