"""
Week and day views: hour grids with event tiles.

Timed events are drawn as tiles spanning their duration; overlapping tiles
are placed side by side. All-day events go into a row above the grid.
Both views page through time with PagedView and keep the vertical scroll
position when the page changes.
"""

from datetime import datetime, date, time as dt_time
from typing import Callable, Optional

import pytz
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QScrollArea, QFrame, QApplication, QStyle
)
from PySide6.QtCore import Qt, Signal, QTimer
from PySide6.QtGui import QFontMetrics, QMouseEvent

from pagecal_core.date_utils import copy_from_minutes
from pagecal_core.events import CalendarEvent
from pagecal_core.layout import EventPortion, TileSlot, assign_columns, tile_geometry
from pagecal_core.navigation import PageUnit
from pagecal_core.timezone_utils import to_local_datetime, to_local_hour

from .event_widget import EventWidget, AllDayEventWidget, lighten_color
from .paged_view import PagedView
from .settings import (
    get_colors_config, get_hour_height, get_interface_font,
    get_localization_config, get_view_config
)

# Scroll position of a freshly opened grid, in hours
DEFAULT_SCROLL_HOUR = 7


def _single_line_event_height(widget: QWidget) -> int:
    return QFontMetrics(widget.font()).height() + 8


def _time_column_width() -> int:
    """Time column width from the font metrics of the widest label."""
    sample_label = QLabel("00:00")
    metrics = QFontMetrics(sample_label.font())
    return metrics.horizontalAdvance("00:00") + 15


class AllDayEventCell(QWidget):
    """All-day events of a single day."""

    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)

    def __init__(self, events: list[CalendarEvent], parent=None):
        super().__init__(parent)
        self._events = list(events)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(2)
        layout.setAlignment(Qt.AlignTop)
        colors = get_colors_config()
        self.setStyleSheet(f"background-color: {colors.allday_cell_background}; border-bottom: 1px solid {colors.cell_border};")

        for event in self._events:
            widget = AllDayEventWidget(event, parent=self)
            widget.clicked.connect(self.event_clicked.emit)
            widget.double_clicked.connect(self.event_double_clicked.emit)
            layout.addWidget(widget)

    def event_count(self) -> int:
        return len(self._events)


class AllDayEventsRow(QWidget):
    """Row of all-day events across the days of a page; hidden when empty."""

    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)

    def __init__(self, events_by_day: list[list[CalendarEvent]], parent=None):
        super().__init__(parent)
        self._cells: list[AllDayEventCell] = []

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(1)
        for events in events_by_day:
            cell = AllDayEventCell(events)
            cell.event_clicked.connect(self.event_clicked.emit)
            cell.event_double_clicked.connect(self.event_double_clicked.emit)
            layout.addWidget(cell, 1)
            self._cells.append(cell)
        self.update_height()

    def get_max_events(self) -> int:
        return max((cell.event_count() for cell in self._cells), default=0)

    def update_height(self):
        """Same height for all days, based on the busiest one."""
        max_events = self.get_max_events()
        if max_events == 0:
            self.setFixedHeight(0)
            self.hide()
        else:
            self.setFixedHeight(max_events * _single_line_event_height(self) + 4)
            self.show()


class DayColumnWidget(QWidget):
    """
    A single day column with absolute positioning for event tiles.

    Tiles span their duration; overlapping tiles share the width.
    """

    slot_clicked = Signal(datetime)
    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)

    def __init__(self, for_date: date, events: list[CalendarEvent], parent=None):
        super().__init__(parent)
        self._date = for_date
        self._hour_height = get_hour_height()
        self._slots: list[TileSlot] = []
        self._event_widgets: list[EventWidget] = []

        self._setup_ui()
        self._setup_time_indicator()
        self.set_events(events)

    @property
    def date(self) -> date:
        return self._date

    @property
    def slots(self) -> list[TileSlot]:
        return list(self._slots)

    @property
    def event_widgets(self) -> list[EventWidget]:
        return list(self._event_widgets)

    def _setup_ui(self):
        colors = get_colors_config()
        self.setFixedHeight(24 * self._hour_height)
        self.setStyleSheet(f"background-color: {colors.day_column_background}; border: 1px solid {colors.cell_border};")
        self.setCursor(Qt.PointingHandCursor)

        # Hour lines, plus fainter lines between them for smaller slots
        slot_minutes = get_view_config().minute_slot.minutes
        slot_line = lighten_color(colors.hour_line, 0.5)
        for minutes in range(slot_minutes, 24 * 60, slot_minutes):
            line = QFrame(self)
            line.setFrameStyle(QFrame.HLine | QFrame.Plain)
            line.setStyleSheet(f"background-color: {slot_line if minutes % 60 else colors.hour_line};")
            line.setGeometry(0, minutes * self._hour_height // 60, 2000, 1)

    def _setup_time_indicator(self):
        """Current time line, moved once a minute."""
        self._time_indicator = QFrame(self)
        self._time_indicator.setFrameStyle(QFrame.HLine | QFrame.Plain)
        colors = get_colors_config()
        self._time_indicator.setStyleSheet(f"background-color: {colors.current_time_line};")
        self._time_indicator.setFixedHeight(3)

        self._time_timer = QTimer(self)
        self._time_timer.timeout.connect(self._update_time_indicator)
        self._time_timer.start(60000)
        self._update_time_indicator()

    def _update_time_indicator(self):
        now = to_local_datetime(datetime.now(pytz.utc))
        if self._date != now.date():
            self._time_indicator.hide()
            return
        self._time_indicator.show()
        y_pos = int(to_local_hour(now) * self._hour_height)
        self._time_indicator.setGeometry(0, y_pos, self.width(), 2)
        self._time_indicator.raise_()

    def set_events(self, events: list[CalendarEvent]):
        """Replace the tiles with those of the timed events in events."""
        for widget in self._event_widgets:
            widget.deleteLater()
        self._event_widgets.clear()

        portions = []
        for event in events:
            if event.all_day:
                continue
            portion = EventPortion.create_for_day(event, self._date)
            if portion is not None:
                portions.append(portion)
        self._slots = assign_columns(portions)

        for slot in self._slots:
            widget = EventWidget(slot.portion.event, compact=True, parent=self)
            widget.clicked.connect(self.event_clicked.emit)
            widget.double_clicked.connect(self.event_double_clicked.emit)
            self._event_widgets.append(widget)
            widget.show()

        self._position_event_widgets()
        self._time_indicator.raise_()

    def _position_event_widgets(self):
        available_width = self.width() - 4
        for widget, slot in zip(self._event_widgets, self._slots):
            x, y, w, h = tile_geometry(slot, available_width, self._hour_height)
            widget.setGeometry(x + 2, y + 1, w, h)

    def _y_to_datetime(self, y: float) -> datetime:
        """Start of the minute slot under y."""
        slot_minutes = get_view_config().minute_slot.minutes
        minutes = int(y * 60 / self._hour_height)
        minutes = max(0, min(24 * 60 - slot_minutes, minutes - minutes % slot_minutes))
        return copy_from_minutes(self._date, minutes)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._position_event_widgets()
        self._update_time_indicator()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.slot_clicked.emit(self._y_to_datetime(event.position().y()))
        super().mouseReleaseEvent(event)


class TimeGridPage(QWidget):
    """One page of the week or day view: header, all-day row and hour grid."""

    slot_clicked = Signal(datetime)
    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)
    scrolled = Signal(int)

    def __init__(
        self,
        days: list[date],
        events_for: Callable[[date], list[CalendarEvent]],
        scroll_position: int = 0,
        parent=None
    ):
        super().__init__(parent)
        self._days = list(days)
        self._day_columns: list[DayColumnWidget] = []
        self._setup_ui(events_for)
        self._scroll.verticalScrollBar().setValue(scroll_position)
        self._scroll.verticalScrollBar().valueChanged.connect(self.scrolled.emit)

    @property
    def days(self) -> list[date]:
        return list(self._days)

    @property
    def day_columns(self) -> list[DayColumnWidget]:
        return list(self._day_columns)

    @property
    def all_day_row(self) -> AllDayEventsRow:
        return self._all_day_row

    def _setup_ui(self, events_for: Callable[[date], list[CalendarEvent]]):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        time_col_width = _time_column_width()
        scrollbar_width = QApplication.style().pixelMetric(QStyle.PM_ScrollBarExtent)
        hour_height = get_hour_height()
        colors = get_colors_config()

        main_layout.addWidget(self._build_header(time_col_width, scrollbar_width))

        # All-day events, with a spacer matching the time column
        events_by_day = [events_for(d) for d in self._days]
        all_day_container = QWidget()
        all_day_layout = QHBoxLayout(all_day_container)
        all_day_layout.setContentsMargins(0, 0, scrollbar_width, 0)
        all_day_layout.setSpacing(0)
        all_day_spacer = QWidget()
        all_day_spacer.setStyleSheet(f"background: {colors.header_background};")
        all_day_spacer.setFixedWidth(time_col_width)
        all_day_layout.addWidget(all_day_spacer)
        self._all_day_row = AllDayEventsRow(
            [[e for e in events if e.all_day] for events in events_by_day]
        )
        self._all_day_row.event_clicked.connect(self.event_clicked.emit)
        self._all_day_row.event_double_clicked.connect(self.event_double_clicked.emit)
        all_day_layout.addWidget(self._all_day_row, 1)
        main_layout.addWidget(all_day_container)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        scroll.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOn)

        content = QWidget()
        content_layout = QHBoxLayout(content)
        content_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.setSpacing(0)

        time_widget = QWidget()
        time_widget.setFixedWidth(time_col_width)
        time_widget.setFixedHeight(24 * hour_height)
        time_widget.setStyleSheet(f"background: {colors.header_background};")
        time_layout = QVBoxLayout(time_widget)
        time_layout.setContentsMargins(0, 0, 0, 0)
        time_layout.setSpacing(0)

        # Labels are centred on the hour lines
        top_spacer = QWidget()
        top_spacer.setFixedHeight(hour_height // 2)
        time_layout.addWidget(top_spacer)
        for hour in range(1, 24):
            lbl = QLabel(f"{hour:02d}:00")
            lbl.setFixedHeight(hour_height)
            lbl.setAlignment(Qt.AlignCenter)
            time_layout.addWidget(lbl)
        bot_spacer = QWidget()
        bot_spacer.setFixedHeight(hour_height - hour_height // 2)
        time_layout.addWidget(bot_spacer)
        content_layout.addWidget(time_widget)

        for d, events in zip(self._days, events_by_day):
            col = DayColumnWidget(d, events)
            col.slot_clicked.connect(self.slot_clicked.emit)
            col.event_clicked.connect(self.event_clicked.emit)
            col.event_double_clicked.connect(self.event_double_clicked.emit)
            content_layout.addWidget(col, 1)
            self._day_columns.append(col)

        scroll.setWidget(content)
        self._scroll = scroll
        main_layout.addWidget(scroll, 1)

    def _build_header(self, time_col_width: int, scrollbar_width: int) -> QWidget:
        localization = get_localization_config()
        colors = get_colors_config()
        font_name, font_size = get_interface_font()

        header = QWidget()
        header.setStyleSheet(f"background: {colors.header_background};")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(time_col_width, 0, scrollbar_width, 0)
        header_layout.setSpacing(1)

        self._header_labels = []
        for d in self._days:
            label = QLabel(f"{localization.get_day_name(d.weekday())} {d.day}")
            label.setAlignment(Qt.AlignCenter)
            if d == date.today():
                label.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 8px; background: {colors.today_highlight_background}; color: {colors.today_highlight_text};")
            else:
                label.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 8px; background: {colors.header_background};")
            header_layout.addWidget(label, 1)
            self._header_labels.append(label)
        return header

    @property
    def header_labels(self) -> list[str]:
        return [label.text() for label in self._header_labels]

    def get_scroll_position(self) -> int:
        return self._scroll.verticalScrollBar().value()

    def set_scroll_position(self, position: int):
        self._scroll.verticalScrollBar().setValue(position)


class _TimeGridView(PagedView):
    """Shared paging and scroll handling of the week and day views."""

    slot_clicked = Signal(datetime)

    _scroll_position: Optional[int] = None

    def get_scroll_position(self) -> int:
        if self._scroll_position is None:
            return DEFAULT_SCROLL_HOUR * get_hour_height()
        return self._scroll_position

    def set_scroll_position(self, position: int):
        self._scroll_position = position
        if self._page_widget is not None:
            self._page_widget.set_scroll_position(position)

    def _remember_scroll(self, position: int):
        # Only the visible page drives the shared scroll position
        if self.sender() is self._page_widget:
            self._scroll_position = position

    @property
    def current_grid_page(self) -> Optional[TimeGridPage]:
        return self._page_widget

    def _build_page(self, page_date: date) -> TimeGridPage:
        days = self.UNIT.days_on_page(page_date, self._navigator.week_start)
        page = TimeGridPage(days, self.events_on, self.get_scroll_position())
        page.slot_clicked.connect(self.slot_clicked.emit)
        page.event_clicked.connect(self.event_clicked.emit)
        page.event_double_clicked.connect(self.event_double_clicked.emit)
        page.scrolled.connect(self._remember_scroll)
        return page

    def _page_shown(self, page_date: date) -> None:
        # Range of the scroll bar is only known once the page is laid out
        page = self._page_widget
        QTimer.singleShot(0, lambda: self._restore_scroll(page))

    def _restore_scroll(self, page: Optional[TimeGridPage]):
        if page is not None and page is self._page_widget:
            page.set_scroll_position(self.get_scroll_position())


class WeekView(_TimeGridView):
    """Seven day columns per page, starting on the configured week start."""

    UNIT = PageUnit.WEEK


class DayView(_TimeGridView):
    """One day per page."""

    UNIT = PageUnit.DAY
