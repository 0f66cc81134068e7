"""
Ordering of events within a day.

A comparator takes two events and returns a negative number, zero or a
positive number, like the cmp functions of old. The default orders by start
time in minutes since midnight.
"""

from functools import cmp_to_key
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import CalendarEvent

EventComparator = Callable[['CalendarEvent', 'CalendarEvent'], int]


def default_event_comparator(a: 'CalendarEvent', b: 'CalendarEvent') -> int:
    """Order events by start time of day."""
    return a.start_minutes - b.start_minutes


def insert_sorted(
    events: list,
    new_event: 'CalendarEvent',
    comparator: Optional[EventComparator] = None,
) -> list:
    """
    Insert new_event into the already sorted list events.

    The new event goes in front of the first element that sorts strictly
    after it, or at the end if there is none, so events with equal keys stay
    in insertion order. The list is modified in place and returned.
    """
    compare = comparator or default_event_comparator
    for index, existing in enumerate(events):
        if compare(new_event, existing) < 0:
            events.insert(index, new_event)
            return events
    events.append(new_event)
    return events


def sort_events(events: list, comparator: Optional[EventComparator] = None) -> list:
    """Stable sort of events with the given comparator, returning a new list."""
    return sorted(events, key=cmp_to_key(comparator or default_event_comparator))
