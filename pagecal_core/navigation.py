"""
Page navigation for paged calendar views.

A PageNavigator keeps the index of the displayed page (a month, a week or a
day) within the configured date bounds. Views drive it from their
state-update methods; animated transitions are handed to an animator
installed by the view and resolve when the view calls settle().

Page indices count from the page containing min_date:

    MONTH   page = months_between(min_date, d) - 1
    WEEK    page = weeks_between(min_date, d)
    DAY     page = days_between(min_date, d)
"""

from concurrent.futures import Future
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Optional

from .date_change import DateChangeController
from .date_utils import (
    EPOCH_DATE, MAX_DATE, DateLike, WeekDay,
    add_months, days_between, days_in_month_grid, days_in_week,
    first_day_of_week, months_between, weeks_between, without_time,
)
from .debug import debug_print
from .exceptions import (
    DateOutOfRangeError, InvalidBoundsError, NotInitializedError, PageOutOfRangeError
)

PageListener = Callable[[date, int], None]
Animator = Callable[[int, int, int], None]  # from_page, to_page, duration_ms


class PageUnit(Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"

    def total_pages(self, min_date: date, max_date: date, week_start: int = WeekDay.MONDAY) -> int:
        if self is PageUnit.MONTH:
            return months_between(max_date, min_date)
        if self is PageUnit.WEEK:
            return weeks_between(max_date, min_date, week_start) + 1
        return days_between(max_date, min_date) + 1

    def page_for_date(self, min_date: date, d: date, week_start: int = WeekDay.MONDAY) -> int:
        """Page index of d; d must not precede min_date."""
        if self is PageUnit.MONTH:
            return months_between(min_date, d) - 1
        if self is PageUnit.WEEK:
            return weeks_between(min_date, d, week_start)
        return days_between(min_date, d)

    def date_for_page(self, min_date: date, page: int, week_start: int = WeekDay.MONDAY) -> date:
        """First day shown on page."""
        if self is PageUnit.MONTH:
            return add_months(min_date, page)
        if self is PageUnit.WEEK:
            return first_day_of_week(min_date, week_start) + timedelta(weeks=page)
        return min_date + timedelta(days=page)

    def days_on_page(self, page_date: date, week_start: int = WeekDay.MONDAY) -> list[date]:
        """Day cells of the page starting at page_date."""
        if self is PageUnit.MONTH:
            return days_in_month_grid(page_date, week_start)
        if self is PageUnit.WEEK:
            return days_in_week(page_date, week_start)
        return [page_date]


class PageNavigator:
    """
    Current page of a paged view, clamped to [0, total_pages).

    The initial page is the one containing initial_date (today by default),
    clamped into the bounds. Bounds with min_date not strictly before
    max_date raise InvalidBoundsError.
    """

    def __init__(
        self,
        unit: PageUnit = PageUnit.MONTH,
        min_date: Optional[DateLike] = None,
        max_date: Optional[DateLike] = None,
        initial_date: Optional[DateLike] = None,
        week_start: int = WeekDay.MONDAY,
        transition_duration_ms: int = 300,
        on_page_change: Optional[PageListener] = None,
    ):
        self._unit = unit
        self._week_start = WeekDay.parse(week_start)
        self._transition_duration_ms = transition_duration_ms
        self._listeners: list[PageListener] = []
        if on_page_change is not None:
            self._listeners.append(on_page_change)

        self._animator: Optional[Animator] = None
        self._stop_animation: Optional[Callable[[], None]] = None
        self._pending: Optional[Future] = None
        self._pending_page: Optional[int] = None

        self._date_controller: Optional[DateChangeController] = None
        self._disposed = False

        self._set_date_range(min_date, max_date)
        self._current_page = self._regulate(without_time(initial_date or date.today()))

    # ==================== Bounds ====================

    def _set_date_range(self, min_date: Optional[DateLike], max_date: Optional[DateLike]):
        new_min = without_time(min_date or EPOCH_DATE)
        new_max = without_time(max_date or MAX_DATE)
        if not new_min < new_max:
            raise InvalidBoundsError(new_min, new_max)
        self._min_date = new_min
        self._max_date = new_max
        self._total_pages = self._unit.total_pages(new_min, new_max, self._week_start)

    def _regulate(self, d: date) -> int:
        """Page index of d after clamping it into the bounds."""
        if d < self._min_date:
            d = self._min_date
        elif d > self._max_date:
            d = self._max_date
        return self._unit.page_for_date(self._min_date, d, self._week_start)

    def set_bounds(self, min_date: Optional[DateLike], max_date: Optional[DateLike]) -> None:
        """
        Change the navigable range.

        The current date is kept if it is still within the new bounds and
        clamped otherwise; page listeners are told if the page moved.
        """
        self._ensure_active()
        old_date = self.current_date
        old_page = self._current_page
        self._set_date_range(min_date, max_date)
        self._cancel_pending()
        self._current_page = self._regulate(old_date)
        debug_print(
            f"PageNavigator({self._unit.value}): bounds {self._min_date} - {self._max_date}, "
            f"{self._total_pages} pages, page {self._current_page}"
        )
        if self._current_page != old_page or self.current_date != old_date:
            self._notify()

    # ==================== State ====================

    @property
    def unit(self) -> PageUnit:
        return self._unit

    @property
    def week_start(self) -> WeekDay:
        return self._week_start

    @property
    def min_date(self) -> date:
        return self._min_date

    @property
    def max_date(self) -> date:
        return self._max_date

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def current_date(self) -> date:
        """First day of the current page (first of the month for month pages)."""
        return self.date_for_page(self._current_page)

    @property
    def transition_duration_ms(self) -> int:
        return self._transition_duration_ms

    @property
    def transition_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def pending_page(self) -> Optional[int]:
        return self._pending_page if self.transition_pending else None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def date_for_page(self, page: int) -> date:
        self._validate_page(page)
        return self._unit.date_for_page(self._min_date, page, self._week_start)

    def days_for_page(self, page: int) -> list[date]:
        return self._unit.days_on_page(self.date_for_page(page), self._week_start)

    def contains(self, d: DateLike) -> bool:
        return self._min_date <= without_time(d) <= self._max_date

    def page_for_date(self, d: DateLike) -> int:
        """Page containing d; raises DateOutOfRangeError outside the bounds."""
        target = without_time(d)
        if not self.contains(target):
            raise DateOutOfRangeError(target, self._min_date, self._max_date)
        return self._unit.page_for_date(self._min_date, target, self._week_start)

    # ==================== Listeners ====================

    def add_page_listener(self, listener: PageListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_page_listener(self, listener: PageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        current = self.current_date
        for listener in list(self._listeners):
            listener(current, self._current_page)

    def set_animator(self, animate: Optional[Animator], stop: Optional[Callable[[], None]] = None) -> None:
        """
        Install the function that runs page transitions.

        animate(from_page, to_page, duration_ms) must eventually call
        settle(); stop() is called when a running transition is superseded.
        Without an animator transitions complete immediately.
        """
        self._animator = animate
        self._stop_animation = stop

    # ==================== Transitions ====================

    def _ensure_active(self) -> None:
        if self._disposed:
            raise NotInitializedError("PageNavigator is disposed")

    def _validate_page(self, page: int) -> None:
        if not 0 <= page < self._total_pages:
            raise PageOutOfRangeError(page, self._total_pages)

    def _cancel_pending(self) -> None:
        pending, self._pending, self._pending_page = self._pending, None, None
        if pending is not None and not pending.done():
            pending.cancel()
            if self._stop_animation is not None:
                self._stop_animation()

    def _set_page(self, page: int) -> None:
        if page == self._current_page:
            return
        self._current_page = page
        debug_print(f"PageNavigator({self._unit.value}): page {page} ({self.current_date})")
        self._notify()

    def jump_to_page(self, page: int) -> None:
        """Show page at once, superseding any running transition."""
        self._ensure_active()
        self._validate_page(page)
        self._cancel_pending()
        self._set_page(page)

    def animate_to_page(self, page: int, duration_ms: Optional[int] = None) -> Future:
        """
        Start a transition to page.

        Returns a Future that resolves to the page index once the transition
        has finished, or is cancelled if another transition supersedes it.
        """
        self._ensure_active()
        self._validate_page(page)
        self._cancel_pending()

        future: Future = Future()
        self._pending = future
        self._pending_page = page

        if self._animator is None or page == self._current_page:
            self.settle(page)
        else:
            duration = self._transition_duration_ms if duration_ms is None else duration_ms
            self._animator(self._current_page, page, duration)
        return future

    def settle(self, page: int) -> None:
        """Called by the view when a transition has come to rest on page."""
        self._ensure_active()
        self._validate_page(page)
        self._set_page(page)
        pending, self._pending, self._pending_page = self._pending, None, None
        if pending is not None and not pending.done():
            pending.set_result(page)

    def next_page(self, duration_ms: Optional[int] = None) -> Optional[Future]:
        """Animate one page forward; does nothing on the last page."""
        self._ensure_active()
        if self._current_page + 1 >= self._total_pages:
            return None
        return self.animate_to_page(self._current_page + 1, duration_ms)

    def previous_page(self, duration_ms: Optional[int] = None) -> Optional[Future]:
        """Animate one page back; does nothing on the first page."""
        self._ensure_active()
        if self._current_page <= 0:
            return None
        return self.animate_to_page(self._current_page - 1, duration_ms)

    def jump_to_date(self, d: DateLike) -> None:
        self._ensure_active()
        self.jump_to_page(self.page_for_date(d))

    def animate_to_date(self, d: DateLike, duration_ms: Optional[int] = None) -> Future:
        self._ensure_active()
        return self.animate_to_page(self.page_for_date(d), duration_ms)

    # ==================== External date changes ====================

    def attach_date_controller(self, controller: Optional[DateChangeController]) -> None:
        """Follow controller: each animate_to_date() on it moves this navigator."""
        self._ensure_active()
        if controller is self._date_controller:
            return
        self.detach_date_controller()
        self._date_controller = controller
        if controller is not None:
            controller.add_listener(self._on_date_changed)

    def detach_date_controller(self) -> None:
        if self._date_controller is not None:
            self._date_controller.remove_listener(self._on_date_changed)
            self._date_controller = None

    @property
    def date_controller(self) -> Optional[DateChangeController]:
        return self._date_controller

    def _on_date_changed(self, target: date) -> None:
        if self._disposed:
            return
        self.animate_to_date(target)

    def dispose(self) -> None:
        """Release controller subscriptions and cancel any running transition."""
        if self._disposed:
            return
        self._cancel_pending()
        self.detach_date_controller()
        self._listeners.clear()
        self._animator = None
        self._stop_animation = None
        self._disposed = True
