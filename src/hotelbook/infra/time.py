"""Time utilities: UTC timestamps and the hotel's local calendar date."""

import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEZONE = "UTC"


def utc_now() -> datetime:
    """Return current UTC timestamp (timezone-aware)."""
    return datetime.now(timezone.utc)


def hotel_timezone() -> ZoneInfo:
    """Timezone from HOTEL_TIMEZONE. Falls back to UTC when unset or invalid."""
    tz_name = os.environ.get("HOTEL_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid HOTEL_TIMEZONE %s, falling back to UTC", tz_name)
        return ZoneInfo(DEFAULT_TIMEZONE)


def hotel_today() -> date:
    """Today's date as seen at the front desk."""
    return utc_now().astimezone(hotel_timezone()).date()
