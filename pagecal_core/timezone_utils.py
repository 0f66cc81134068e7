"""
Timezone utilities for PageCal.

Events may carry timezone-aware datetimes. Before an event is placed on a
calendar day it is converted to the configured local timezone; naive
datetimes are taken to be local already.
"""

from datetime import datetime
import time as _time
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "UTC"


def set_timezone(timezone_name: str):
    """Set the local timezone used for display."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    return _local_timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Falls back to the system timezone name, then to a fixed offset, when the
    configured name is unknown.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        try:
            return pytz.timezone(_time.tzname[0])
        except pytz.UnknownTimeZoneError:
            if _time.localtime().tm_isdst:
                offset_seconds = -_time.altzone
            else:
                offset_seconds = -_time.timezone
            return pytz.FixedOffset(offset_seconds // 60)


def to_local_datetime(dt: datetime) -> datetime:
    """
    Convert an aware datetime to the local timezone.

    Naive datetimes are returned unchanged.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(get_local_timezone())
    return dt


def to_local_naive(dt: datetime) -> datetime:
    """Convert a datetime to a naive datetime in local time."""
    if dt.tzinfo is not None:
        return to_local_datetime(dt).replace(tzinfo=None)
    return dt


def to_local_hour(dt: datetime) -> float:
    """Local hour of dt as a float (14.5 for 14:30)."""
    local_dt = to_local_datetime(dt)
    return local_dt.hour + local_dt.minute / 60.0
