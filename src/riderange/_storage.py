"""DynamoDB storage backend for ride events and range aggregates."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from riderange._constants import ATTR_DATE, ATTR_IMEI, ATTR_MAX_RANGE, RIDES_PROJECTION
from riderange.config import RangeConfig
from riderange.exceptions import RangeFetchError, RangePersistError

_logger = logging.getLogger(__name__)


class RideBackend(Protocol):
    """Structural storage interface used by the fetcher, writer and driver.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`DynamoRideBackend`) concrete.
    """

    async def query_rides(self, imei: str) -> list[dict[str, Any]]: ...

    async def put_monthly_range(self, imei: str, ride_month: str, max_range: float) -> None: ...

    async def put_yearly_range(self, imei: str, max_range: float) -> None: ...


def _to_dynamo_number(value: float) -> Decimal:
    # The boto3 resource layer rejects floats.
    return Decimal(str(value))


class DynamoRideBackend:
    """boto3-backed :class:`RideBackend`.

    Calls are blocking and run in a worker thread, one at a time; each is
    attempted once and any botocore failure is wrapped in a
    :class:`~riderange.exceptions.RangeStorageError` subclass.
    """

    def __init__(self, config: RangeConfig, *, resource: Any | None = None) -> None:
        self._config = config
        self._resource = resource

    def _table(self, name: str) -> Any:
        if self._resource is None:
            self._resource = boto3.resource("dynamodb", region_name=self._config.region)
        return self._resource.Table(name)

    def _query_all(self, imei: str) -> list[dict[str, Any]]:
        table = self._table(self._config.rides_table)
        items: list[dict[str, Any]] = []
        query_kwargs: dict[str, Any] = {
            "KeyConditionExpression": "#imei = :imei",
            "ExpressionAttributeNames": {"#imei": ATTR_IMEI},
            "ExpressionAttributeValues": {":imei": imei},
            "ProjectionExpression": RIDES_PROJECTION,
        }

        while True:
            resp = table.query(**query_kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                break
            query_kwargs["ExclusiveStartKey"] = last_key

        return items

    async def query_rides(self, imei: str) -> list[dict[str, Any]]:
        """Return every stored ride record for *imei* (all pages)."""
        table = self._config.rides_table
        _logger.debug("Query %s for %s", table, imei)
        try:
            items = await asyncio.to_thread(self._query_all, imei)
        except (ClientError, BotoCoreError) as exc:
            raise RangeFetchError(
                f"Querying {table} for {imei} failed: {exc}",
                imei=imei,
                table=table,
                operation="Query",
            ) from exc
        _logger.debug("Query %s for %s returned %d items", table, imei, len(items))
        return items

    async def _put(self, table_name: str, item: dict[str, Any]) -> None:
        imei = str(item.get(ATTR_IMEI, ""))
        _logger.debug("PutItem %s %s", table_name, item)
        try:
            await asyncio.to_thread(self._table(table_name).put_item, Item=item)
        except (ClientError, BotoCoreError) as exc:
            raise RangePersistError(
                f"Writing {table_name} for {imei} failed: {exc}",
                imei=imei,
                table=table_name,
                operation="PutItem",
            ) from exc

    async def put_monthly_range(self, imei: str, ride_month: str, max_range: float) -> None:
        """Upsert the ``(imei, "YYYY-MM")`` monthly maximum."""
        await self._put(
            self._config.monthly_table,
            {
                ATTR_IMEI: imei,
                ATTR_DATE: ride_month,
                ATTR_MAX_RANGE: _to_dynamo_number(max_range),
            },
        )

    async def put_yearly_range(self, imei: str, max_range: float) -> None:
        """Upsert the device's maximum across the recognized years."""
        await self._put(
            self._config.yearly_table,
            {
                ATTR_IMEI: imei,
                ATTR_MAX_RANGE: _to_dynamo_number(max_range),
            },
        )
