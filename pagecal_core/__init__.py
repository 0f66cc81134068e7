"""
PageCal Core Module

Framework-independent calendar logic:
- Date arithmetic for month/week/day pages (date_utils.py)
- Events and the observable event collection (events.py)
- Sorted insertion of events within a day (ordering.py)
- Page navigation state (navigation.py)
- Externally driven date changes (date_change.py)
- Event tile geometry (layout.py)
- Configuration parsing (config.py)
"""

from .config import Config
from .date_change import DateChangeController
from .date_utils import (
    WeekDay, MinuteSlotSize,
    days_in_month_grid, days_in_week, months_between, weeks_between, days_between,
    row_count,
)
from .events import CalendarEvent, EventCollection, load_ics_events
from .exceptions import (
    CalendarError, ConfigError, InvalidBoundsError, PageOutOfRangeError,
    DateOutOfRangeError, NotInitializedError, EventValidationError, EventNotFoundError,
)
from .navigation import PageNavigator, PageUnit
from .ordering import insert_sorted, default_event_comparator

__all__ = [
    'Config',
    'DateChangeController',
    'WeekDay',
    'MinuteSlotSize',
    'days_in_month_grid',
    'days_in_week',
    'months_between',
    'weeks_between',
    'days_between',
    'row_count',
    'CalendarEvent',
    'EventCollection',
    'load_ics_events',
    'CalendarError',
    'ConfigError',
    'InvalidBoundsError',
    'PageOutOfRangeError',
    'DateOutOfRangeError',
    'NotInitializedError',
    'EventValidationError',
    'EventNotFoundError',
    'PageNavigator',
    'PageUnit',
    'insert_sorted',
    'default_event_comparator',
]
