from datetime import date, datetime, timedelta

import pytest
import pytz

from pagecal_core.events import CalendarEvent, EventCollection, load_ics_events
from pagecal_core.exceptions import EventNotFoundError, EventValidationError
from pagecal_core.timezone_utils import set_timezone, to_local_hour

ICS = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//PageCal//Tests//EN
BEGIN:VEVENT
UID:meeting-1
SUMMARY:Team meeting
DESCRIPTION:Weekly sync
CATEGORIES:Work
DTSTART:20210513T090000Z
DTEND:20210513T100000Z
END:VEVENT
BEGIN:VEVENT
UID:holiday-1
SUMMARY:Holiday
DTSTART;VALUE=DATE:20210514
DTEND;VALUE=DATE:20210516
END:VEVENT
BEGIN:VEVENT
UID:call-1
SUMMARY:Call
DTSTART:20210513T150000Z
DURATION:PT30M
END:VEVENT
BEGIN:VEVENT
UID:reminder-1
DTSTART:20210513T170000Z
END:VEVENT
END:VCALENDAR
"""


def at(day, hour, minute=0):
    return datetime(2021, 5, day, hour, minute)


class TestCalendarEvent:
    def test_end_before_start_is_rejected(self):
        with pytest.raises(EventValidationError):
            CalendarEvent("bad", at(13, 10), at(13, 9))

    def test_minutes_and_duration(self):
        event = CalendarEvent("a", at(13, 12, 4), at(13, 13, 34))
        assert event.start_minutes == 724
        assert event.end_minutes == 814
        assert event.duration == timedelta(minutes=90)

    def test_all_day_and_days(self):
        event = CalendarEvent("trip", datetime(2021, 5, 14), datetime(2021, 5, 16))
        assert event.all_day
        assert event.days() == [date(2021, 5, 14), date(2021, 5, 15)]
        assert event.is_multi_day
        assert not event.occurs_on(date(2021, 5, 16))

    def test_overnight_event_covers_both_days(self):
        event = CalendarEvent("party", at(15, 22), at(16, 2))
        assert not event.all_day
        assert event.days() == [date(2021, 5, 15), date(2021, 5, 16)]

    def test_equality_follows_uid(self):
        event = CalendarEvent("a", at(13, 9), at(13, 10))
        moved = event.with_changes(start=at(13, 11), end=at(13, 12))
        assert moved == event
        assert hash(moved) == hash(event)
        assert moved.start_minutes == 660
        assert CalendarEvent("a", at(13, 9), at(13, 10)) != event

    def test_local_time_conversion(self):
        set_timezone("Europe/Berlin")
        event = CalendarEvent(
            "late", pytz.utc.localize(at(13, 23)), pytz.utc.localize(at(13, 23, 30))
        )
        # 23:00 UTC is 01:00 the next day in Berlin summer time
        assert event.local_start == at(14, 1)
        assert event.start_day == date(2021, 5, 14)


class TestIcsImport:
    def test_load_events(self):
        events = {e.uid: e for e in load_ics_events(ICS, color="#ff0000")}
        assert set(events) == {"meeting-1", "holiday-1", "call-1", "reminder-1"}

        meeting = events["meeting-1"]
        assert meeting.title == "Team meeting"
        assert meeting.description == "Weekly sync"
        assert meeting.kind == "Work"
        assert meeting.color == "#ff0000"
        assert meeting.local_start == at(13, 9)
        assert meeting.payload is not None

        holiday = events["holiday-1"]
        assert holiday.all_day
        assert holiday.days() == [date(2021, 5, 14), date(2021, 5, 15)]

        assert events["call-1"].duration == timedelta(minutes=30)
        assert events["reminder-1"].duration == timedelta(hours=1)
        assert events["reminder-1"].title == "Untitled"


class TestEventCollection:
    def test_events_grouped_and_sorted_by_day(self):
        late = CalendarEvent("late", at(13, 15), at(13, 16))
        early = CalendarEvent("early", at(13, 9), at(13, 10))
        other = CalendarEvent("other", at(14, 9), at(14, 10))
        collection = EventCollection([late, early, other])
        assert collection.events_on(date(2021, 5, 13)) == [early, late]
        assert collection.events_on(date(2021, 5, 14)) == [other]
        assert collection.events_on(date(2021, 5, 15)) == []
        assert collection.days() == [date(2021, 5, 13), date(2021, 5, 14)]
        assert len(collection) == 3

    def test_multi_day_event_is_listed_on_each_day(self):
        trip = CalendarEvent("trip", datetime(2021, 5, 14), datetime(2021, 5, 17))
        collection = EventCollection([trip])
        for day in (14, 15, 16):
            assert collection.events_on(date(2021, 5, day)) == [trip]
        assert collection.events_on(date(2021, 5, 16), include_all_day=False) == []

    def test_every_mutation_notifies(self):
        collection = EventCollection()
        calls = []
        collection.subscribe(lambda: calls.append(len(collection)))

        a = CalendarEvent("a", at(13, 9), at(13, 10))
        b = CalendarEvent("b", at(13, 11), at(13, 12))
        collection.add(a)
        collection.add_all([b, CalendarEvent("c", at(14, 9), at(14, 10))])
        collection.update(a, a.with_changes(start=at(15, 9), end=at(15, 10)))
        collection.remove(b)
        assert collection.remove_where(lambda e: e.title == "c") == 1
        assert collection.remove_where(lambda e: e.title == "zzz") == 0
        collection.clear()

        assert calls == [1, 3, 3, 2, 1, 0]

    def test_update_moves_event_to_new_day(self):
        a = CalendarEvent("a", at(13, 9), at(13, 10))
        collection = EventCollection([a])
        moved = a.with_changes(start=at(15, 9), end=at(15, 10))
        collection.update(a, moved)
        assert collection.events_on(date(2021, 5, 13)) == []
        assert collection.events_on(date(2021, 5, 15))[0].start == at(15, 9)
        assert collection.get(a.uid) is moved

    def test_failed_update_keeps_collection_intact(self):
        a = CalendarEvent("a", at(13, 9), at(13, 10), uid="a")
        b = CalendarEvent("b", at(14, 9), at(14, 10), uid="b")
        collection = EventCollection([a, b])
        calls = []
        collection.subscribe(lambda: calls.append(len(collection)))

        with pytest.raises(EventValidationError):
            collection.update(a, a.with_changes(uid="b"))
        with pytest.raises(EventNotFoundError):
            collection.update(CalendarEvent("c", at(13, 9), at(13, 10), uid="c"), a)

        assert len(collection) == 2
        assert a in collection
        assert collection.events_on(date(2021, 5, 13)) == [a]
        assert collection.get("b") is b
        assert calls == []

    def test_unsubscribe(self):
        collection = EventCollection()
        calls = []
        unsubscribe = collection.subscribe(lambda: calls.append(1))
        assert collection.subscriber_count == 1
        unsubscribe()
        assert collection.subscriber_count == 0
        collection.add(CalendarEvent("a", at(13, 9), at(13, 10)))
        assert calls == []

    def test_duplicate_and_missing_events(self):
        a = CalendarEvent("a", at(13, 9), at(13, 10))
        collection = EventCollection([a])
        with pytest.raises(EventValidationError):
            collection.add(a)
        with pytest.raises(EventNotFoundError):
            collection.remove(CalendarEvent("b", at(13, 9), at(13, 10)))
        with pytest.raises(KeyError):
            collection.remove(CalendarEvent("c", at(13, 9), at(13, 10)))

    def test_custom_comparator_orders_days(self):
        def by_title(a, b):
            return (a.title > b.title) - (a.title < b.title)

        collection = EventCollection(comparator=by_title)
        collection.add_all([
            CalendarEvent("b", at(13, 8), at(13, 9)),
            CalendarEvent("a", at(13, 10), at(13, 11)),
        ])
        assert [e.title for e in collection.events_on(date(2021, 5, 13))] == ["a", "b"]

    def test_event_filter(self):
        work = CalendarEvent("work", at(13, 9), at(13, 10), kind="work")
        home = CalendarEvent("home", at(13, 18), at(13, 19), kind="home")
        collection = EventCollection(
            [work, home],
            event_filter=lambda day, events: [e for e in events if e.kind == "work"],
        )
        assert collection.events_on(date(2021, 5, 13)) == [work]

    def test_events_between_and_all_events(self):
        trip = CalendarEvent("trip", datetime(2021, 5, 14), datetime(2021, 5, 17))
        a = CalendarEvent("a", at(13, 9), at(13, 10))
        b = CalendarEvent("b", at(20, 9), at(20, 10))
        collection = EventCollection([b, trip, a])
        assert collection.events_between(date(2021, 5, 13), date(2021, 5, 16)) == [a, trip]
        assert collection.all_events() == [a, trip, b]
        assert trip in collection
        assert list(collection) == [b, trip, a]


def test_local_hour_follows_timezone():
    set_timezone("Europe/Berlin")
    assert to_local_hour(pytz.utc.localize(at(13, 12, 30))) == 14.5
    # Naive datetimes are already local
    assert to_local_hour(at(13, 12, 30)) == 12.5
