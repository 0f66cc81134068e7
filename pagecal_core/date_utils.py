"""
Date arithmetic for calendar pages.

All helpers accept either date or datetime values; time of day is ignored
wherever a calendar day is meant. Weekdays are numbered like
date.weekday(): 0 = Monday ... 6 = Sunday.
"""

from datetime import date, datetime, time as dt_time, timedelta
from enum import Enum, IntEnum
from typing import Union

DateLike = Union[date, datetime]

# Default navigation bounds when none are configured
EPOCH_DATE = date(1970, 1, 1)
MAX_DATE = date(2100, 12, 31)


class WeekDay(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: Union[int, str, 'WeekDay']) -> 'WeekDay':
        """Accept an index (0-6), a full name or a three letter abbreviation."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        for day in cls:
            if day.name == name or day.name[:3] == name:
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


class MinuteSlotSize(Enum):
    """Size of one row in the day and week time grids."""
    MINUTES_15 = 15
    MINUTES_30 = 30
    MINUTES_60 = 60

    @property
    def minutes(self) -> int:
        return self.value


def without_time(d: DateLike) -> date:
    """Return the calendar day of d."""
    if isinstance(d, datetime):
        return d.date()
    return d


def is_same_year(a: DateLike, b: DateLike) -> bool:
    return a.year == b.year


def is_same_month(a: DateLike, b: DateLike) -> bool:
    """True if both are in the same month of the same year."""
    return is_same_year(a, b) and a.month == b.month


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return is_same_month(a, b) and a.day == b.day


def is_same_hour(a: datetime, b: datetime) -> bool:
    return is_same_day(a, b) and a.hour == b.hour


def is_same_minute(a: datetime, b: datetime) -> bool:
    return is_same_hour(a, b) and a.minute == b.minute


def is_same_second(a: datetime, b: datetime) -> bool:
    return is_same_minute(a, b) and a.second == b.second


def has_same_time(a: datetime, b: datetime) -> bool:
    """Compare only the time of day, down to microseconds."""
    return a.time() == b.time()


def is_day_start(dt: datetime) -> bool:
    return dt.hour == 0 and dt.minute == 0


def total_minutes(t: Union[datetime, dt_time]) -> int:
    """Minutes since midnight: 12:04 gives 724."""
    return t.hour * 60 + t.minute


def copy_from_minutes(d: DateLike, minutes: int = 0) -> datetime:
    """Datetime on the day of d at the given minutes since midnight."""
    day = without_time(d)
    return datetime(day.year, day.month, day.day, minutes // 60, minutes % 60)


def append_leading_zero(value: int) -> str:
    return f"{value:02d}"


def format_month(d: DateLike) -> str:
    """Month and year as "M-YYYY"."""
    return f"{d.month}-{d.year}"


def first_day_of_week(d: DateLike, start: int = WeekDay.MONDAY) -> date:
    """First day of the week containing d, weeks starting on start."""
    day = without_time(d)
    # % 7 keeps the offset within 0..6 for any start day
    return day - timedelta(days=(day.weekday() - start) % 7)


def last_day_of_week(d: DateLike, start: int = WeekDay.MONDAY) -> date:
    return first_day_of_week(d, start) + timedelta(days=6)


def days_in_week(d: DateLike, start: int = WeekDay.MONDAY) -> list[date]:
    """
    The seven days of the week containing d.

    If d is Wednesday the 8th and weeks start on Monday, the result is
    the 6th (Monday) through the 12th (Sunday).
    """
    first = first_day_of_week(d, start)
    return [first + timedelta(days=i) for i in range(7)]


def month_bounds(d: DateLike) -> tuple[date, date]:
    """First and last day of the month containing d."""
    first = date(d.year, d.month, 1)
    last = add_months(first, 1) - timedelta(days=1)
    return first, last


def add_months(d: DateLike, months: int) -> date:
    """First day of the month that is `months` away from d's month."""
    total = d.year * 12 + (d.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


def row_count(d: DateLike, start: int = WeekDay.MONDAY) -> int:
    """
    Number of week rows (5 or 6) needed to show the month containing d.

    The month is padded to whole weeks on both sides; if the padded span is
    longer than 35 days six rows are needed. A month that fits in four rows
    (February starting on the week start day) is shown with five.
    """
    first, last = month_bounds(d)
    days_before = (first.weekday() - start) % 7
    days_after = (start - 1 - last.weekday()) % 7
    first_to_display = first - timedelta(days=days_before)
    last_to_display = last + timedelta(days=days_after)
    span = (last_to_display - first_to_display).days + 1
    return 6 if span > 35 else 5


def days_in_month_grid(d: DateLike, start: int = WeekDay.MONDAY) -> list[date]:
    """
    Day cells of the month page containing d.

    Includes leading days of the previous month and trailing days of the
    next month, 35 or 42 entries depending on row_count().
    """
    first = first_day_of_week(date(d.year, d.month, 1), start)
    return [first + timedelta(days=i) for i in range(row_count(d, start) * 7)]


def months_between(a: DateLike, b: DateLike) -> int:
    """
    Number of months from a's month to b's month, both included.

    months_between(a, a) is 1; the result does not depend on argument order.
    """
    return abs((b.year - a.year) * 12 + (b.month - a.month)) + 1


def weeks_between(a: DateLike, b: DateLike, start: int = WeekDay.MONDAY) -> int:
    """Number of week starts between the weeks containing a and b (0 for the same week)."""
    delta = first_day_of_week(a, start) - first_day_of_week(b, start)
    return abs(delta.days) // 7


def days_between(a: DateLike, b: DateLike) -> int:
    """Absolute day difference, time of day ignored."""
    return abs((without_time(a) - without_time(b)).days)
