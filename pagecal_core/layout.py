"""
Geometry of event tiles.

Pure calculations used by the views: the visible part of an event on one
day, side-by-side columns for overlapping events, and the row shifts of a
month page when a day's event list is expanded.
"""

from dataclasses import dataclass
from datetime import date, datetime, time as dt_time
from typing import Optional

from .events import CalendarEvent

# Events shorter than this are laid out as if they lasted this long (hours)
MIN_TILE_HOURS = 0.5


@dataclass
class EventPortion:
    """
    A day-specific portion of a multi-day event.

    An event "Sat 17:00 - Sun 04:00" creates two portions:
    - Saturday: visible 17:00-24:00
    - Sunday: visible 00:00-04:00
    """
    event: CalendarEvent
    display_date: date
    visible_start_hour: float  # 0-24, visible on this day
    visible_end_hour: float    # 0-24, visible on this day

    @staticmethod
    def create_for_day(event: CalendarEvent, day: date) -> Optional['EventPortion']:
        """Portion of event visible on day, or None if it does not appear."""
        if not event.occurs_on(day):
            return None

        local_start = event.local_start
        local_end = event.local_end

        if local_start.date() == day:
            start_hour = local_start.hour + local_start.minute / 60.0
        else:
            start_hour = 0.0  # Started on an earlier day

        if local_end.date() == day:
            end_hour = local_end.hour + local_end.minute / 60.0
        else:
            end_hour = 24.0  # Continues after this day

        return EventPortion(event, day, start_hour, end_hour)

    @property
    def layout_end_hour(self) -> float:
        if self.visible_end_hour - self.visible_start_hour < MIN_TILE_HOURS:
            return min(24.0, self.visible_start_hour + MIN_TILE_HOURS)
        return self.visible_end_hour

    def overlaps(self, other: 'EventPortion') -> bool:
        return (self.visible_start_hour < other.layout_end_hour
                and other.visible_start_hour < self.layout_end_hour)

    def start_datetime(self) -> datetime:
        hours = int(self.visible_start_hour)
        minutes = int(round((self.visible_start_hour - hours) * 60))
        return datetime.combine(self.display_date, dt_time(min(hours, 23), min(minutes, 59)))


@dataclass
class TileSlot:
    """Column assignment of one portion within its overlap group."""
    portion: EventPortion
    column: int
    total_columns: int


def assign_columns(portions: list[EventPortion]) -> list[TileSlot]:
    """
    Place overlapping portions side by side.

    Portions are grouped transitively by overlap. Within a group each
    portion takes the first column whose previous portion has ended; the
    group is as wide as the number of columns it needed.
    """
    if not portions:
        return []

    # Start time first, longer portions first on ties
    ordered = sorted(
        portions,
        key=lambda p: (p.visible_start_hour, -(p.layout_end_hour - p.visible_start_hour)),
    )

    groups: list[list[EventPortion]] = []
    for portion in ordered:
        overlapping = [
            i for i, group in enumerate(groups)
            if any(portion.overlaps(member) for member in group)
        ]
        if not overlapping:
            groups.append([portion])
        elif len(overlapping) == 1:
            groups[overlapping[0]].append(portion)
        else:
            merged = []
            for i in sorted(overlapping, reverse=True):
                merged.extend(groups.pop(i))
            merged.append(portion)
            groups.append(merged)

    slots: list[TileSlot] = []
    for group in groups:
        group.sort(key=lambda p: p.visible_start_hour)
        column_ends: list[float] = []
        assigned: list[tuple[EventPortion, int]] = []
        for portion in group:
            for col_idx, col_end in enumerate(column_ends):
                if portion.visible_start_hour >= col_end:
                    column_ends[col_idx] = portion.layout_end_hour
                    assigned.append((portion, col_idx))
                    break
            else:
                assigned.append((portion, len(column_ends)))
                column_ends.append(portion.layout_end_hour)
        for portion, column in assigned:
            slots.append(TileSlot(portion, column, len(column_ends)))
    return slots


def tile_geometry(slot: TileSlot, width: int, hour_height: int, gap: int = 2) -> tuple[int, int, int, int]:
    """Pixel rectangle (x, y, w, h) of a tile in a day column."""
    col_width = width / slot.total_columns
    x = int(slot.column * col_width) + 1
    y = int(slot.portion.visible_start_hour * hour_height)
    w = max(int(col_width) - gap, 10)
    h = max(int((slot.portion.layout_end_hour - slot.portion.visible_start_hour) * hour_height) - 1, 10)
    return x, y, w, h


def detail_row_offsets(row_count: int, row: int) -> list[int]:
    """
    Vertical shift of each row, in rows, while row's event list is open.

    The open list is row_count - 2 rows high. Rows up to the tapped one move
    up just enough to make room (never more than the list height); the
    remaining rows move down by what is left.
    """
    if not 0 <= row < row_count:
        raise IndexError(f"Row {row} outside 0..{row_count - 1}")
    panel_rows = row_count - 2
    up = min(row, panel_rows)
    return [-up if r <= row else panel_rows - up for r in range(row_count)]


def detail_panel_row(row_count: int, row: int) -> int:
    """Row (counted from the top of the page) at which the open list starts."""
    return row - min(row, row_count - 2) + 1


class DetailPanelState:
    """
    Which day of a month page has its event list expanded.

    Tapping the open day closes it; tapping another day in the same row
    switches the list to that day; tapping a day in another row moves the
    panel there.
    """

    def __init__(self, row_count: int):
        self.row_count = row_count
        self.opened_day: Optional[date] = None
        self.opened_row: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.opened_day is not None

    @property
    def panel_rows(self) -> int:
        return self.row_count - 2

    def tap(self, day: date, row: int) -> bool:
        """Update the state for a tap on day in row. Returns True if a list is open afterwards."""
        if self.opened_day == day:
            self.close()
        elif self.is_open and self.opened_row == row:
            self.opened_day = day
        else:
            if not 0 <= row < self.row_count:
                raise IndexError(f"Row {row} outside 0..{self.row_count - 1}")
            self.opened_day = day
            self.opened_row = row
        return self.is_open

    def close(self) -> None:
        self.opened_day = None
        self.opened_row = None

    def offsets(self) -> list[int]:
        if not self.is_open:
            return [0] * self.row_count
        return detail_row_offsets(self.row_count, self.opened_row)

    def panel_row(self) -> Optional[int]:
        if not self.is_open:
            return None
        return detail_panel_row(self.row_count, self.opened_row)


def accent_color(hex_color: str) -> str:
    """Black text if any channel is at least half intensity, white otherwise."""
    color = hex_color.lstrip('#')
    if len(color) == 3:
        color = ''.join(c * 2 for c in color)
    try:
        channels = [int(color[i:i + 2], 16) for i in (0, 2, 4)]
    except (ValueError, IndexError):
        return "#000000"
    return "#000000" if any(c >= 255 / 2 for c in channels) else "#ffffff"
