"""Internal constants shared across the library."""

from datetime import timedelta, timezone

DEFAULT_REGION = "ap-south-1"

# ------------------------------------------------------------------
# Calendar bucketing
# ------------------------------------------------------------------

#: Rides are bucketed into months on the fleet's local clock (UTC+05:30).
RIDE_MONTH_OFFSET = timezone(timedelta(hours=5, minutes=30))

#: Only rides starting in these years take part in range aggregation.
RECOGNIZED_YEARS: frozenset[int] = frozenset({2023, 2024})

# ------------------------------------------------------------------
# DynamoDB layout
# ------------------------------------------------------------------

RIDES_TABLE = "ride_data"
MONTHLY_RANGE_TABLE = "ride_data_monthly_range"
YEARLY_RANGE_TABLE = "ride_data_yearly_range"

RIDES_PROJECTION = "ride_start, ride_stats, ride_type"

ATTR_IMEI = "imei"
ATTR_DATE = "date"
ATTR_MAX_RANGE = "max_range"

EMPTY_IMEI_MESSAGE = "IMEI cannot be empty"
INVALID_MONTH_MESSAGE = "input_ride_month must be in YYYY-MM form"
