from datetime import date, datetime, timedelta

import pytest

from pagecal_core.events import CalendarEvent
from pagecal_core.layout import (
    DetailPanelState, EventPortion, accent_color, assign_columns,
    detail_panel_row, detail_row_offsets, tile_geometry,
)

DAY = date(2021, 5, 13)


def timed(title, start_hour, end_hour):
    midnight = datetime(2021, 5, 13)
    return CalendarEvent(
        title, midnight + timedelta(hours=start_hour), midnight + timedelta(hours=end_hour)
    )


def portions(*events):
    return [EventPortion.create_for_day(e, DAY) for e in events]


class TestEventPortion:
    def test_overnight_event_is_split(self):
        event = CalendarEvent("late", datetime(2021, 5, 13, 17), datetime(2021, 5, 14, 4))
        first = EventPortion.create_for_day(event, date(2021, 5, 13))
        second = EventPortion.create_for_day(event, date(2021, 5, 14))
        assert (first.visible_start_hour, first.visible_end_hour) == (17.0, 24.0)
        assert (second.visible_start_hour, second.visible_end_hour) == (0.0, 4.0)
        assert EventPortion.create_for_day(event, date(2021, 5, 15)) is None

    def test_short_events_get_minimum_height(self):
        portion = portions(timed("blip", 9, 9.1))[0]
        assert portion.layout_end_hour == pytest.approx(9.5)
        assert portion.start_datetime() == datetime(2021, 5, 13, 9)


class TestAssignColumns:
    def test_separate_events_use_full_width(self):
        slots = assign_columns(portions(timed("a", 9, 10), timed("b", 11, 12)))
        assert [(s.column, s.total_columns) for s in slots] == [(0, 1), (0, 1)]

    def test_overlapping_events_share_width(self):
        slots = assign_columns(portions(
            timed("a", 9, 11), timed("b", 10, 12), timed("c", 11, 13),
        ))
        by_title = {s.portion.event.title: s for s in slots}
        assert by_title["a"].column == 0
        assert by_title["b"].column == 1
        # c starts when a ends and reuses its column
        assert by_title["c"].column == 0
        assert {s.total_columns for s in slots} == {2}

    def test_back_to_back_short_events_do_not_overlap(self):
        slots = assign_columns(portions(timed("a", 9, 9.5), timed("b", 9.5, 10)))
        assert [s.total_columns for s in slots] == [1, 1]

    def test_empty(self):
        assert assign_columns([]) == []

    def test_tile_geometry(self):
        slot = assign_columns(portions(timed("a", 9, 11), timed("b", 10, 12)))[1]
        x, y, w, h = tile_geometry(slot, width=200, hour_height=60)
        assert (x, y, w, h) == (101, 600, 98, 119)


class TestDetailOffsets:
    # Row shifts for a month page of 5 rows, one line per tapped row
    FIVE_ROWS = [
        [0, 3, 3, 3, 3],
        [-1, -1, 2, 2, 2],
        [-2, -2, -2, 1, 1],
        [-3, -3, -3, -3, 0],
        [-3, -3, -3, -3, -3],
    ]
    SIX_ROWS = [
        [0, 4, 4, 4, 4, 4],
        [-1, -1, 3, 3, 3, 3],
        [-2, -2, -2, 2, 2, 2],
        [-3, -3, -3, -3, 1, 1],
        [-4, -4, -4, -4, -4, 0],
        [-4, -4, -4, -4, -4, -4],
    ]

    @pytest.mark.parametrize("row", range(5))
    def test_five_rows(self, row):
        assert detail_row_offsets(5, row) == self.FIVE_ROWS[row]

    @pytest.mark.parametrize("row", range(6))
    def test_six_rows(self, row):
        assert detail_row_offsets(6, row) == self.SIX_ROWS[row]

    def test_panel_sits_below_tapped_row(self):
        for rows in (5, 6):
            for row in range(rows):
                offsets = detail_row_offsets(rows, row)
                assert detail_panel_row(rows, row) == row + offsets[row] + 1

    def test_panel_rows(self):
        assert [detail_panel_row(5, r) for r in range(5)] == [1, 1, 1, 1, 2]
        assert [detail_panel_row(6, r) for r in range(6)] == [1, 1, 1, 1, 1, 2]

    def test_row_out_of_range(self):
        with pytest.raises(IndexError):
            detail_row_offsets(5, 5)


class TestDetailPanelState:
    def test_tap_open_switch_move_close(self):
        state = DetailPanelState(5)
        assert state.offsets() == [0] * 5
        assert state.panel_row() is None

        assert state.tap(date(2021, 6, 9), 1)
        assert state.offsets() == [-1, -1, 2, 2, 2]
        assert state.panel_row() == 1

        # Another day in the same row keeps the layout
        assert state.tap(date(2021, 6, 10), 1)
        assert state.opened_day == date(2021, 6, 10)
        assert state.opened_row == 1

        # A day in another row moves the panel
        assert state.tap(date(2021, 6, 23), 3)
        assert state.panel_row() == 1
        assert state.offsets() == [-3, -3, -3, -3, 0]

        # Tapping the open day closes
        assert not state.tap(date(2021, 6, 23), 3)
        assert not state.is_open
        assert state.offsets() == [0] * 5

    def test_bad_row(self):
        with pytest.raises(IndexError):
            DetailPanelState(5).tap(date(2021, 6, 1), 7)


@pytest.mark.parametrize("color, expected", [
    ("#ffffff", "#000000"),
    ("#4285f4", "#000000"),
    ("#000000", "#ffffff"),
    ("#202060", "#ffffff"),
    ("#fff", "#000000"),
    ("nonsense", "#000000"),
])
def test_accent_color(color, expected):
    assert accent_color(color) == expected
