from datetime import datetime

from pagecal_core.events import CalendarEvent
from pagecal_core.ordering import default_event_comparator, insert_sorted, sort_events


def make_event(title, hour, minute=0):
    start = datetime(2021, 5, 13, hour, minute)
    return CalendarEvent(title, start, start.replace(hour=min(hour + 1, 23)))


class TestInsertSorted:
    def test_insert_into_empty_list(self):
        event = make_event("a", 9)
        assert insert_sorted([], event) == [event]

    def test_insert_in_the_middle(self):
        early, late = make_event("early", 8), make_event("late", 12)
        middle = make_event("middle", 10)
        events = [early, late]
        result = insert_sorted(events, middle)
        assert result is events
        assert [e.title for e in result] == ["early", "middle", "late"]

    def test_insert_at_front_and_back(self):
        events = [make_event("b", 10)]
        insert_sorted(events, make_event("a", 9))
        insert_sorted(events, make_event("c", 11))
        assert [e.title for e in events] == ["a", "b", "c"]

    def test_equal_keys_keep_insertion_order(self):
        events = []
        for title in ("first", "second", "third"):
            insert_sorted(events, make_event(title, 10))
        insert_sorted(events, make_event("earlier", 9, 30))
        assert [e.title for e in events] == ["earlier", "first", "second", "third"]

    def test_custom_comparator(self):
        def by_title(a, b):
            return (a.title > b.title) - (a.title < b.title)

        events = []
        for title in ("pear", "apple", "fig"):
            insert_sorted(events, make_event(title, 10), by_title)
        assert [e.title for e in events] == ["apple", "fig", "pear"]

    def test_result_matches_stable_sort(self):
        hours = [14, 9, 9, 17, 11, 9, 14]
        events = [make_event(str(i), h) for i, h in enumerate(hours)]
        inserted = []
        for event in events:
            insert_sorted(inserted, event)
        assert inserted == sort_events(events)


def test_default_comparator_uses_minutes_of_day():
    a = make_event("a", 9, 15)
    b = make_event("b", 9, 45)
    assert default_event_comparator(a, b) == -30
    assert default_event_comparator(b, a) == 30
    assert default_event_comparator(a, a) == 0
