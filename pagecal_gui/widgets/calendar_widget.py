"""
Calendar widget with switchable day, week and month views.
"""

from datetime import datetime, date, time as dt_time
from enum import Enum
from typing import Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QStackedWidget
from PySide6.QtCore import Signal

from pagecal_core.date_change import DateChangeController
from pagecal_core.date_utils import DateLike, without_time
from pagecal_core.debug import debug_print
from pagecal_core.events import CalendarEvent, EventCollection
from pagecal_core.exceptions import DateOutOfRangeError

from .month_view import MonthView
from .paged_view import PagedView
from .settings import get_view_config
from .time_grid import DayView, WeekView


class ViewType(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class CalendarWidget(QWidget):
    """
    Day, week and month views of one event collection.

    All three views follow a shared DateChangeController, so moving to a
    date moves every view; only the visible one animates.
    """

    slot_clicked = Signal(datetime)
    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)
    date_selected = Signal(object)  # date
    view_changed = Signal(ViewType)
    date_changed = Signal(object)  # first date of the visible page

    def __init__(
        self,
        collection: Optional[EventCollection] = None,
        view_type: Optional[ViewType] = None,
        initial_date: Optional[DateLike] = None,
        parent=None
    ):
        super().__init__(parent)
        if view_type is None:
            view_type = ViewType(get_view_config().default_view)
        if initial_date is None:
            initial_date = get_view_config().initial_date
        self._current_view = view_type
        self._date_controller = DateChangeController(initial_date)
        self._setup_ui(collection, initial_date)
        self.set_view(view_type)

    def _setup_ui(self, collection: Optional[EventCollection], initial_date: Optional[DateLike]):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._stack = QStackedWidget()

        options = dict(
            collection=collection,
            date_controller=self._date_controller,
            initial_date=initial_date,
        )
        self._day_view = DayView(**options)
        self._week_view = WeekView(**options)
        self._month_view = MonthView(**options)
        self._views: dict[ViewType, PagedView] = {
            ViewType.DAY: self._day_view,
            ViewType.WEEK: self._week_view,
            ViewType.MONTH: self._month_view,
        }

        for view_type, view in self._views.items():
            view.event_clicked.connect(self.event_clicked.emit)
            view.event_double_clicked.connect(self.event_double_clicked.emit)
            view.date_selected.connect(self.date_selected.emit)
            view.page_changed.connect(
                lambda page_date, _index, view_type=view_type: self._on_page_changed(view_type, page_date)
            )
            self._stack.addWidget(view)

        self._day_view.slot_clicked.connect(self.slot_clicked.emit)
        self._week_view.slot_clicked.connect(self.slot_clicked.emit)

        layout.addWidget(self._stack)

    def _on_page_changed(self, view_type: ViewType, page_date: date):
        if view_type is self._current_view:
            self.date_changed.emit(page_date)

    # ==================== Views ====================

    def view(self, view_type: ViewType) -> PagedView:
        return self._views[view_type]

    @property
    def current_view(self) -> PagedView:
        return self._views[self._current_view]

    @property
    def date_controller(self) -> DateChangeController:
        return self._date_controller

    def get_current_view(self) -> ViewType:
        return self._current_view

    def set_view(self, view_type: ViewType):
        """Switch views, keeping the reference date of the old one."""
        reference = self.get_reference_date()
        self._current_view = view_type
        view = self._views[view_type]
        if view.navigator.contains(reference):
            view.jump_to_date(reference)
        self._stack.setCurrentWidget(view)
        debug_print(f"CalendarWidget: {view_type.value} view at {view.current_date}")
        self.view_changed.emit(view_type)
        self.date_changed.emit(view.current_date)

    def get_reference_date(self) -> date:
        """
        Date the views agree on when switching.

        The last date moved to through set_date() or go_today() while it is
        on the visible page, otherwise the first day of the visible page.
        """
        view = self.current_view
        page_days = view.navigator.days_for_page(view.current_page)
        target = self._date_controller.current_date
        if page_days[0] <= target <= page_days[-1]:
            if self._current_view is not ViewType.MONTH or target.month == view.current_date.month:
                return target
        return view.current_date

    # ==================== Navigation ====================

    def set_collection(self, collection: Optional[EventCollection]):
        for view in self._views.values():
            view.set_collection(collection)

    def set_date(self, d: DateLike):
        """
        Move every view to the page containing d.

        Raises DateOutOfRangeError, leaving every view where it is, if d
        lies outside the bounds of any view.
        """
        target = without_time(d)
        for view in self._views.values():
            navigator = view.navigator
            if not navigator.contains(target):
                raise DateOutOfRangeError(target, navigator.min_date, navigator.max_date)
        self._date_controller.animate_to_date(target)

    def get_current_date(self) -> date:
        return self.current_view.current_date

    def get_date_range(self) -> tuple[datetime, datetime]:
        """Start of the first and end of the last day on the visible page."""
        view = self.current_view
        days = view.navigator.days_for_page(view.current_page)
        return datetime.combine(days[0], dt_time.min), datetime.combine(days[-1], dt_time.max)

    def go_today(self):
        today = date.today()
        if all(view.navigator.contains(today) for view in self._views.values()):
            self.set_date(today)

    def go_previous(self):
        self.current_view.previous_page()

    def go_next(self):
        self.current_view.next_page()

    def get_scroll_position(self) -> int:
        if self._current_view in (ViewType.DAY, ViewType.WEEK):
            return self.current_view.get_scroll_position()
        return 0

    def set_scroll_position(self, position: int):
        self._day_view.set_scroll_position(position)
        self._week_view.set_scroll_position(position)

    def dispose(self):
        for view in self._views.values():
            view.dispose()
