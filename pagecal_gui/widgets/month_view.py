"""
Month view: one month per page, padded to complete weeks.

Each page is a grid of 5 or 6 rows of day cells. Tapping a day of the shown
month slides the rows apart and opens a panel listing that day's events;
tapping the same day again closes it.
"""

from datetime import date
from typing import Callable, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QScrollArea, QSizePolicy
)
from PySide6.QtCore import Qt, Signal, QEvent, QObject, QVariantAnimation, QEasingCurve
from PySide6.QtGui import QFontMetrics, QMouseEvent

from pagecal_core.date_utils import days_in_month_grid, days_in_week
from pagecal_core.debug import debug_print
from pagecal_core.events import CalendarEvent
from pagecal_core.layout import DetailPanelState
from pagecal_core.navigation import PageUnit

from .event_widget import EventWidget
from .paged_view import PagedView
from .settings import (
    get_colors_config, get_interface_font, get_labels_config,
    get_localization_config, get_view_config
)

# Duration of the row slide when a day's event list opens or closes
DETAIL_ANIMATION_MS = 350

# cell_builder(day, events, is_current_month) -> QWidget
CellBuilder = Callable[[date, list[CalendarEvent], bool], QWidget]
# detail_builder(day, events) -> QWidget
DetailBuilder = Callable[[date, list[CalendarEvent]], QWidget]
# weekday_builder(weekday) -> QWidget, weekday 0 is Monday
WeekdayBuilder = Callable[[int], QWidget]


def _single_line_event_height(widget: QWidget) -> int:
    return QFontMetrics(widget.font()).height() + 8


class MonthDayCell(QFrame):
    """Single day cell in the month grid."""

    clicked = Signal(date)
    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)

    def __init__(
        self,
        d: date,
        events: list[CalendarEvent],
        is_current_month: bool = True,
        max_events: int = 3,
        parent=None
    ):
        super().__init__(parent)
        self._date = d
        self.is_current_month = is_current_month
        self._event_widgets: list[EventWidget] = []
        self._setup_ui(events if is_current_month else [], max_events)

    @property
    def date(self) -> date:
        return self._date

    @property
    def event_widgets(self) -> list[EventWidget]:
        return list(self._event_widgets)

    def _setup_ui(self, events: list[CalendarEvent], max_events: int):
        view_config = get_view_config()
        self.setFrameStyle(QFrame.Box | QFrame.Plain if view_config.show_border else QFrame.NoFrame)
        if self.is_current_month:
            self.setCursor(Qt.PointingHandCursor)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)

        self._day_label = QLabel(str(self._date.day))
        self._day_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        layout.addWidget(self._day_label)

        event_height = _single_line_event_height(self)
        for event in events[:max_events]:
            widget = EventWidget(event, compact=True, show_time=False)
            widget.setMaximumHeight(event_height)
            widget.clicked.connect(self.event_clicked.emit)
            widget.double_clicked.connect(self.event_double_clicked.emit)
            layout.addWidget(widget)
            self._event_widgets.append(widget)

        self._more_label = None
        hidden = len(events) - max_events
        if hidden > 0:
            self._more_label = QLabel(get_labels_config().more_events.format(hidden))
            self._more_label.setAlignment(Qt.AlignLeft)
            layout.addWidget(self._more_label)
        layout.addStretch()

        self._update_style()

    def _update_style(self):
        colors = get_colors_config()
        bg = colors.month_cell_current if self.is_current_month else colors.month_cell_other
        text = colors.month_text_current if self.is_current_month else colors.month_text_other
        border_size = get_view_config().border_size

        if self._date == date.today():
            self._day_label.setStyleSheet(f"color: {colors.today_highlight_text}; font-weight: bold; background: {colors.today_highlight_background}; border-radius: 10px; padding: 2px 6px;")
        else:
            self._day_label.setStyleSheet(f"color: {text};")

        if get_view_config().show_border:
            self.setStyleSheet(f"MonthDayCell {{ background-color: {bg}; border: {border_size}px solid {colors.cell_border}; }}")
        else:
            self.setStyleSheet(f"MonthDayCell {{ background-color: {bg}; }}")

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton and self.is_current_month:
            self.clicked.emit(self._date)
        super().mouseReleaseEvent(event)


class DayDetailPanel(QFrame):
    """Full list of one day's events, shown between the rows of a month page."""

    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)

    def __init__(self, parent=None):
        super().__init__(parent)
        colors = get_colors_config()
        self.setStyleSheet(f"DayDetailPanel {{ background-color: {colors.detail_background}; border-top: 1px solid {colors.cell_border}; border-bottom: 1px solid {colors.cell_border}; }}")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._scroll.setFrameStyle(QFrame.NoFrame)
        layout.addWidget(self._scroll)

    def show_day(self, day: date, events: list[CalendarEvent]):
        content = QWidget()
        content_layout = QVBoxLayout(content)
        content_layout.setContentsMargins(8, 6, 8, 6)
        content_layout.setSpacing(4)

        if not events:
            label = QLabel(get_labels_config().no_events)
            label.setAlignment(Qt.AlignCenter)
            content_layout.addWidget(label)
        for event in events:
            widget = EventWidget(event, compact=False, show_time=True)
            widget.clicked.connect(self.event_clicked.emit)
            widget.double_clicked.connect(self.event_double_clicked.emit)
            content_layout.addWidget(widget)
        content_layout.addStretch()

        self.set_content(content)

    def set_content(self, content: QWidget):
        old = self._scroll.takeWidget()
        if old is not None:
            old.deleteLater()
        self._scroll.setWidget(content)


class MonthPage(QWidget):
    """
    One month of day cells, positioned by hand.

    Rows are laid out at (row + offset) * row height. While a day's list is
    open the offsets come from DetailPanelState; changes are animated.
    """

    day_opened = Signal(date)
    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)

    def __init__(
        self,
        page_date: date,
        week_start: int,
        events_for: Callable[[date], list[CalendarEvent]],
        max_events: int = 3,
        cell_builder: Optional[CellBuilder] = None,
        detail_builder: Optional[DetailBuilder] = None,
        parent=None
    ):
        super().__init__(parent)
        self._month = (page_date.year, page_date.month)
        self._events_for = events_for
        self._detail_builder = detail_builder
        self._days = days_in_month_grid(page_date, week_start)
        self._state = DetailPanelState(len(self._days) // 7)

        self._offsets = [0.0] * self._state.row_count
        self._from_offsets = list(self._offsets)
        self._to_offsets = list(self._offsets)
        self._panel_row: Optional[int] = None

        self._animation = QVariantAnimation(self)
        self._animation.setStartValue(0.0)
        self._animation.setEndValue(1.0)
        self._animation.setDuration(DETAIL_ANIMATION_MS)
        self._animation.setEasingCurve(QEasingCurve.InOutCubic)
        self._animation.valueChanged.connect(self._on_animation_step)
        self._animation.finished.connect(self._on_animation_finished)

        self._detail = DayDetailPanel(self)
        self._detail.event_clicked.connect(self.event_clicked.emit)
        self._detail.event_double_clicked.connect(self.event_double_clicked.emit)
        self._detail.hide()

        self._cells: list[QWidget] = []
        # Custom cells tap through eventFilter()
        self._tap_targets: dict[QWidget, tuple[date, int]] = {}
        for index, d in enumerate(self._days):
            row = index // 7
            is_current = (d.year, d.month) == self._month
            events = events_for(d) if is_current else []
            if cell_builder is not None:
                cell = cell_builder(d, events, is_current)
                cell.setParent(self)
            else:
                cell = MonthDayCell(d, events, is_current, max_events, parent=self)
                cell.event_clicked.connect(self.event_clicked.emit)
                cell.event_double_clicked.connect(self.event_double_clicked.emit)
            if isinstance(cell, MonthDayCell):
                cell.clicked.connect(lambda day, row=row: self.tap_day(day, row))
            elif is_current:
                cell.installEventFilter(self)
                self._tap_targets[cell] = (d, row)
            self._cells.append(cell)

        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    @property
    def days(self) -> list[date]:
        return list(self._days)

    @property
    def row_count(self) -> int:
        return self._state.row_count

    @property
    def cells(self) -> list[QWidget]:
        return list(self._cells)

    @property
    def detail_state(self) -> DetailPanelState:
        return self._state

    @property
    def detail_panel(self) -> DayDetailPanel:
        return self._detail

    def cell_for(self, d: date) -> Optional[QWidget]:
        try:
            return self._cells[self._days.index(d)]
        except ValueError:
            return None

    def tap_day(self, day: date, row: int) -> None:
        """Open, switch or close the event list for day."""
        was_row = self._state.opened_row
        is_open = self._state.tap(day, row)
        debug_print(f"MonthPage: tap {day} (row {row}), panel {'open' if is_open else 'closed'}")

        if is_open:
            events = self._events_for(day)
            if self._detail_builder is not None:
                self._detail.set_content(self._detail_builder(day, events))
            else:
                self._detail.show_day(day, events)
            self._panel_row = self._state.panel_row()
            self._detail.show()
            self._detail.lower()
            self.day_opened.emit(day)

        if was_row != self._state.opened_row:
            self._animate_offsets(self._state.offsets())
        else:
            self._layout_children()

    def close_detail(self) -> None:
        if self._state.is_open:
            self._state.close()
            self._animate_offsets(self._state.offsets())

    def _animate_offsets(self, target: list[int]) -> None:
        self._animation.stop()
        self._from_offsets = list(self._offsets)
        self._to_offsets = [float(o) for o in target]
        if not self.isVisible():
            self._on_animation_step(1.0)
            self._on_animation_finished()
            return
        self._animation.start()

    def _on_animation_step(self, progress) -> None:
        t = float(progress)
        self._offsets = [
            a + (b - a) * t for a, b in zip(self._from_offsets, self._to_offsets)
        ]
        self._layout_children()

    def _on_animation_finished(self) -> None:
        self._offsets = list(self._to_offsets)
        if not self._state.is_open:
            self._detail.hide()
            self._panel_row = None
        self._layout_children()

    def _layout_children(self) -> None:
        rows = self._state.row_count
        width = self.width()
        row_height = self.height() / rows
        col_width = width / 7

        for index, cell in enumerate(self._cells):
            row, col = divmod(index, 7)
            x = int(col * col_width)
            y = int((row + self._offsets[row]) * row_height)
            cell.setGeometry(x, y, int((col + 1) * col_width) - x, int(row_height) + 1)

        if self._panel_row is not None:
            self._detail.setGeometry(
                0, int(self._panel_row * row_height),
                width, int(self._state.panel_rows * row_height)
            )

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        target = self._tap_targets.get(watched)
        if (target is not None and event.type() == QEvent.MouseButtonRelease
                and event.button() == Qt.LeftButton):
            self.tap_day(*target)
        return super().eventFilter(watched, event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._layout_children()

    def showEvent(self, event):
        super().showEvent(event)
        self._layout_children()


class MonthView(PagedView):
    """Pages through months; the weekday header follows the week start."""

    UNIT = PageUnit.MONTH
    WHEEL_PAGES_VERTICALLY = True

    _cell_builder: Optional[CellBuilder] = None
    _detail_builder: Optional[DetailBuilder] = None
    _weekday_builder: Optional[WeekdayBuilder] = None

    def __init__(
        self,
        *args,
        cell_builder: Optional[CellBuilder] = None,
        detail_builder: Optional[DetailBuilder] = None,
        weekday_builder: Optional[WeekdayBuilder] = None,
        **kwargs
    ):
        super().__init__(*args, **kwargs)
        if weekday_builder is not None:
            self._weekday_builder = weekday_builder
            self._rebuild_header()
        if cell_builder is not None or detail_builder is not None:
            self._cell_builder = cell_builder
            self._detail_builder = detail_builder
            self._reload()

    def _build_header(self) -> QWidget:
        self._header_widgets = []
        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(0, 0, 0, 0)
        header_layout.setSpacing(1)

        font_name, font_size = get_interface_font()
        localization = get_localization_config()
        colors = get_colors_config()
        for d in days_in_week(date.today(), self._navigator.week_start):
            if self._weekday_builder is not None:
                widget = self._weekday_builder(d.weekday())
            else:
                widget = QLabel(localization.get_day_name(d.weekday()))
                widget.setAlignment(Qt.AlignCenter)
                widget.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 8px; background: {colors.header_background};")
            header_layout.addWidget(widget, 1)
            self._header_widgets.append(widget)
        return header

    @property
    def header_widgets(self) -> list[QWidget]:
        return list(self._header_widgets)

    @property
    def header_labels(self) -> list[str]:
        """Text of the weekday header; empty for custom widgets without text."""
        return [w.text() if isinstance(w, QLabel) else "" for w in self._header_widgets]

    @property
    def current_month_page(self) -> Optional[MonthPage]:
        return self._page_widget

    def _build_page(self, page_date: date) -> MonthPage:
        page = MonthPage(
            page_date,
            self._navigator.week_start,
            self.events_on,
            max_events=get_view_config().max_events_per_cell,
            cell_builder=self._cell_builder,
            detail_builder=self._detail_builder,
        )
        page.day_opened.connect(self.date_selected.emit)
        page.event_clicked.connect(self.event_clicked.emit)
        page.event_double_clicked.connect(self.event_double_clicked.emit)
        return page
