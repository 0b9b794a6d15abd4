#!/usr/bin/env python3
"""Run a range aggregation against DynamoDB from the command line.

Uses the same configuration as the Lambda (``IMEIS`` and ``RANGE_*``
environment variables) and prints the monthly and yearly maxima.
Monthly maxima are persisted exactly as the Lambda would.

Usage
-----
Set environment variables and run::

    export IMEIS="867530900000001,867530900000002"
    python scripts/run_local.py

Options::

    --month YYYY-MM     Only aggregate this month
    --imei IMEI         Process this IMEI (repeatable; overrides IMEIS)
    --json              Output as machine-readable JSON
    --lenient           Skip malformed records instead of aborting
    --verbose           DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import ValidationError  # noqa: E402

from riderange import RangeConfig, RangeDriver, RangeError, RangeReport  # noqa: E402


def _format_report(report: RangeReport) -> str:
    lines = [
        f"devices={report.devices} events={report.events} "
        f"skipped={report.skipped_records} writes={report.monthly_writes}",
        "",
        f"{'IMEI':<20} {'MONTH':<8} {'MAX RANGE':>12}",
    ]
    for aggregate in sorted(report.monthly, key=lambda a: (a.imei, a.month)):
        lines.append(f"{aggregate.imei:<20} {str(aggregate.month):<8} {aggregate.max_distance:>12.3f}")
    lines.append("")
    lines.append(f"{'IMEI':<20} {'YEARLY MAX':>21}")
    for yearly in report.yearly:
        lines.append(f"{yearly.imei:<20} {yearly.max_distance:>21.3f}")
    return "\n".join(lines)


async def _run(config: RangeConfig, event: dict[str, Any]) -> RangeReport:
    async with RangeDriver(config) as driver:
        return await driver.run(event)


def main() -> int:
    parser = argparse.ArgumentParser(description="Compute monthly/yearly maximum trip range per device.")
    parser.add_argument("--month", type=str, default=None, help="Only aggregate this YYYY-MM month")
    parser.add_argument("--imei", action="append", default=None, help="IMEI to process (repeatable)")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--lenient", action="store_true", help="Skip malformed records")
    parser.add_argument("--verbose", action="store_true", help="DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.imei:
        overrides["imeis"] = args.imei
    if args.lenient:
        overrides["strict_records"] = False
    config = RangeConfig.from_env(**overrides)

    event: dict[str, Any] = {}
    if args.month:
        event["input_ride_month"] = args.month

    try:
        report = asyncio.run(_run(config, event))
    except (RangeError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        body = {
            "monthly": report.payload(),
            "yearly": [y.model_dump() for y in report.yearly],
        }
        print(json.dumps(body, indent=2))
    else:
        print(_format_report(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
