"""
Calendar events and the collection that holds them.

CalendarEvent is an immutable value; EventCollection files every event under
each local calendar day it covers and keeps each day's list ordered by start
time. Views subscribe to a collection and re-render whenever it changes.
"""

import uuid
from functools import cmp_to_key
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterator, Optional

from icalendar import Calendar as ICalCalendar, Event as ICalEvent

from .date_utils import is_day_start, total_minutes
from .debug import debug_print
from .exceptions import EventNotFoundError, EventValidationError
from .ordering import EventComparator, default_event_comparator, insert_sorted
from .timezone_utils import to_local_naive

EventFilter = Callable[[date, list['CalendarEvent']], list['CalendarEvent']]


@dataclass(frozen=True, eq=False)
class CalendarEvent:
    """
    A titled occurrence between two points in time.

    Equality and hashing use the uid, so an updated copy made with
    with_changes() still matches the event it replaces.
    """
    title: str
    start: datetime
    end: datetime
    description: str = ""
    color: str = "#4285f4"
    kind: str = ""  # Free-form type tag, e.g. "meeting"
    payload: Any = None
    uid: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.end < self.start:
            raise EventValidationError(
                f"Event {self.title!r} ends before it starts ({self.start} > {self.end})"
            )

    def __hash__(self):
        return hash(self.uid)

    def __eq__(self, other):
        if isinstance(other, CalendarEvent):
            return self.uid == other.uid
        return NotImplemented

    def __repr__(self):
        return f"CalendarEvent(uid={self.uid!r}, title={self.title!r}, start={self.start})"

    # ==================== Local time ====================

    @property
    def local_start(self) -> datetime:
        return to_local_naive(self.start)

    @property
    def local_end(self) -> datetime:
        return to_local_naive(self.end)

    @property
    def start_minutes(self) -> int:
        """Start time as minutes since local midnight."""
        return total_minutes(self.local_start)

    @property
    def end_minutes(self) -> int:
        return total_minutes(self.local_end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def all_day(self) -> bool:
        """Runs from midnight to a later midnight."""
        return (
            self.end > self.start
            and is_day_start(self.local_start)
            and is_day_start(self.local_end)
        )

    @property
    def start_day(self) -> date:
        return self.local_start.date()

    @property
    def end_day(self) -> date:
        """Last day the event covers; an end at midnight does not cover that day."""
        local_end = self.local_end
        if self.end > self.start and is_day_start(local_end):
            return local_end.date() - timedelta(days=1)
        return local_end.date()

    @property
    def is_multi_day(self) -> bool:
        return self.end_day > self.start_day

    def days(self) -> list[date]:
        """Every local day this event covers, in order."""
        count = (self.end_day - self.start_day).days + 1
        return [self.start_day + timedelta(days=i) for i in range(count)]

    def occurs_on(self, day: date) -> bool:
        return self.start_day <= day <= self.end_day

    def with_changes(self, **changes) -> 'CalendarEvent':
        """Copy of this event with some fields replaced; the uid is kept."""
        return replace(self, **changes)

    # ==================== iCalendar ====================

    @classmethod
    def from_ical(cls, vevent: ICalEvent, color: str = "#4285f4") -> 'CalendarEvent':
        """
        Build an event from an icalendar VEVENT.

        All-day events (DATE values) run from midnight to midnight. Without
        DTEND or DURATION an event lasts one hour, or one day if all-day.
        """
        dtstart = vevent.get('DTSTART')
        if dtstart is None:
            raise EventValidationError("VEVENT without DTSTART")

        start = dtstart.dt
        all_day = isinstance(start, date) and not isinstance(start, datetime)
        if all_day:
            start = datetime.combine(start, datetime.min.time())

        dtend = vevent.get('DTEND')
        duration = vevent.get('DURATION')
        if dtend is not None:
            end = dtend.dt
            if isinstance(end, date) and not isinstance(end, datetime):
                end = datetime.combine(end, datetime.min.time())
        elif duration is not None:
            end = start + duration.dt
        else:
            end = start + (timedelta(days=1) if all_day else timedelta(hours=1))

        uid = vevent.get('UID')
        summary = vevent.get('SUMMARY')
        description = vevent.get('DESCRIPTION')
        categories = vevent.get('CATEGORIES')
        if isinstance(categories, list):
            categories = categories[0] if categories else None
        cats = getattr(categories, 'cats', None) or []
        kind = str(cats[0]) if cats else ""

        return cls(
            title=str(summary) if summary else "Untitled",
            start=start,
            end=end,
            description=str(description) if description else "",
            color=color,
            kind=kind,
            payload=vevent,
            uid=str(uid) if uid else str(uuid.uuid4()),
        )


def load_ics_events(ical_text: str, color: str = "#4285f4") -> list[CalendarEvent]:
    """Parse VCALENDAR text into events. Recurrence rules are not expanded."""
    calendar = ICalCalendar.from_ical(ical_text)
    events = [CalendarEvent.from_ical(component, color=color) for component in calendar.walk('VEVENT')]
    debug_print(f"Parsed {len(events)} events from iCalendar data")
    return events


class EventCollection:
    """
    Events grouped by local calendar day.

    Every mutation notifies all subscribers once. Per-day lists are ordered
    with the collection's comparator (start time by default); events with
    equal keys keep the order in which they were added.
    """

    def __init__(
        self,
        events: Optional[list[CalendarEvent]] = None,
        comparator: Optional[EventComparator] = None,
        event_filter: Optional[EventFilter] = None,
    ):
        self._comparator = comparator
        self._event_filter = event_filter
        self._by_day: dict[date, list[CalendarEvent]] = {}
        self._events: dict[str, CalendarEvent] = {}  # uid -> event, insertion order
        self._subscribers: list[Callable[[], None]] = []
        for event in events or []:
            self._insert(event)

    # ==================== Observers ====================

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call callback after every change. Returns a function that unsubscribes."""
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self) -> None:
        # Copy: subscribers may unsubscribe while being notified
        for callback in list(self._subscribers):
            callback()

    # ==================== Mutation ====================

    def _insert(self, event: CalendarEvent) -> None:
        if event.uid in self._events:
            raise EventValidationError(f"Event {event.uid} is already in the collection")
        self._events[event.uid] = event
        for day in event.days():
            insert_sorted(self._by_day.setdefault(day, []), event, self._comparator)

    def _discard(self, event: CalendarEvent) -> CalendarEvent:
        stored = self._events.pop(event.uid, None)
        if stored is None:
            raise EventNotFoundError(event.uid)
        for day in stored.days():
            day_events = self._by_day.get(day)
            if day_events is None:
                continue
            day_events.remove(stored)
            if not day_events:
                del self._by_day[day]
        return stored

    def add(self, event: CalendarEvent) -> None:
        self._insert(event)
        self._notify()

    def add_all(self, events: list[CalendarEvent]) -> None:
        """Add several events with a single notification."""
        for event in events:
            self._insert(event)
        self._notify()

    def remove(self, event: CalendarEvent) -> None:
        self._discard(event)
        self._notify()

    def remove_where(self, predicate: Callable[[CalendarEvent], bool]) -> int:
        """Remove all events matching predicate. Returns the number removed."""
        doomed = [event for event in self._events.values() if predicate(event)]
        for event in doomed:
            self._discard(event)
        if doomed:
            self._notify()
        return len(doomed)

    def update(self, old: CalendarEvent, new: CalendarEvent) -> None:
        """Replace old with new, re-filing new under the days it covers."""
        if old.uid not in self._events:
            raise EventNotFoundError(old.uid)
        # Checked first: a failed replace leaves the collection untouched
        if new.uid != old.uid and new.uid in self._events:
            raise EventValidationError(f"Event {new.uid} is already in the collection")
        self._discard(old)
        self._insert(new)
        self._notify()

    def clear(self) -> None:
        self._events.clear()
        self._by_day.clear()
        self._notify()

    # ==================== Queries ====================

    def events_on(self, day: date, include_all_day: bool = True) -> list[CalendarEvent]:
        """Events covering day, in display order."""
        events = list(self._by_day.get(day, []))
        if not include_all_day:
            events = [event for event in events if not event.all_day]
        if self._event_filter is not None:
            events = self._event_filter(day, events)
        return events

    def events_between(self, start_day: date, end_day: date) -> list[CalendarEvent]:
        """Distinct events touching any day in [start_day, end_day], ordered by start."""
        found: dict[str, CalendarEvent] = {}
        day = start_day
        while day <= end_day:
            for event in self.events_on(day):
                found.setdefault(event.uid, event)
            day += timedelta(days=1)
        return sorted(found.values(), key=lambda event: event.local_start)

    def all_events(self) -> list[CalendarEvent]:
        """All events, ordered by first day and then by the collection's comparator."""
        by_key = cmp_to_key(self._comparator or default_event_comparator)
        return sorted(self._events.values(), key=lambda event: (event.start_day, by_key(event)))

    def days(self) -> list[date]:
        """Days that have at least one event, ascending."""
        return sorted(self._by_day)

    def get(self, uid: str) -> Optional[CalendarEvent]:
        return self._events.get(uid)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event) -> bool:
        return isinstance(event, CalendarEvent) and event.uid in self._events

    def __iter__(self) -> Iterator[CalendarEvent]:
        return iter(list(self._events.values()))
