"""riderange - Monthly and yearly maximum trip range per device, from DynamoDB ride logs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("riderange")
except PackageNotFoundError:
    __version__ = "0+local"
from riderange.config import RangeConfig
from riderange.driver import RangeDriver
from riderange.exceptions import (
    RangeConfigError,
    RangeError,
    RangeFetchError,
    RangePersistError,
    RangeRecordError,
    RangeStorageError,
)
from riderange.models import (
    CalendarMonth,
    InvocationEvent,
    MonthlyAggregate,
    RangeReport,
    RideEvent,
    RideKind,
    RideRangeOutput,
    YearlyAggregate,
)
from riderange.segmentation import SegmentState, segment_device
from riderange.state.store import AggregateStore

__all__ = [
    "__version__",
    "AggregateStore",
    "CalendarMonth",
    "InvocationEvent",
    "MonthlyAggregate",
    "RangeConfig",
    "RangeConfigError",
    "RangeDriver",
    "RangeError",
    "RangeFetchError",
    "RangePersistError",
    "RangeRecordError",
    "RangeReport",
    "RangeStorageError",
    "RideEvent",
    "RideKind",
    "RideRangeOutput",
    "SegmentState",
    "YearlyAggregate",
    "segment_device",
]
