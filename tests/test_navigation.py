from datetime import date

import pytest

from pagecal_core.date_change import DateChangeController
from pagecal_core.date_utils import WeekDay
from pagecal_core.exceptions import (
    DateOutOfRangeError, InvalidBoundsError, NotInitializedError, PageOutOfRangeError
)
from pagecal_core.navigation import PageNavigator, PageUnit

MIN = date(2020, 1, 1)
MAX = date(2025, 1, 1)


def month_navigator(**kwargs):
    kwargs.setdefault("initial_date", date(2021, 5, 13))
    return PageNavigator(PageUnit.MONTH, MIN, MAX, **kwargs)


class RecordingAnimator:
    """Stands in for a view: records transitions and settles on demand."""

    def __init__(self, navigator):
        self.navigator = navigator
        self.started = []
        self.stopped = 0
        navigator.set_animator(self.animate, self.stop)

    def animate(self, from_page, to_page, duration_ms):
        self.started.append((from_page, to_page, duration_ms))

    def stop(self):
        self.stopped += 1

    def finish(self):
        self.navigator.settle(self.started[-1][1])


class TestPageUnit:
    def test_month_pages(self):
        assert PageUnit.MONTH.total_pages(MIN, MAX) == 61
        assert PageUnit.MONTH.page_for_date(MIN, date(2022, 6, 1)) == 29
        assert PageUnit.MONTH.date_for_page(MIN, 29) == date(2022, 6, 1)

    def test_week_pages(self):
        # 2020-01-01 is a Wednesday; its week starts Monday 2019-12-30
        assert PageUnit.WEEK.date_for_page(MIN, 0) == date(2019, 12, 30)
        assert PageUnit.WEEK.page_for_date(MIN, date(2020, 1, 6)) == 1
        assert PageUnit.WEEK.date_for_page(MIN, 1, WeekDay.SUNDAY) == date(2020, 1, 5)

    def test_day_pages(self):
        assert PageUnit.DAY.total_pages(MIN, date(2020, 1, 31)) == 31
        assert PageUnit.DAY.page_for_date(MIN, date(2020, 2, 1)) == 31
        assert PageUnit.DAY.days_on_page(date(2020, 2, 1)) == [date(2020, 2, 1)]


class TestPageNavigator:
    def test_jump_to_date(self):
        navigator = month_navigator()
        navigator.jump_to_date(date(2022, 6, 1))
        assert navigator.current_page == 29
        assert navigator.current_date == date(2022, 6, 1)
        assert navigator.total_pages == 61

    def test_initial_date_is_clamped(self):
        assert month_navigator(initial_date=date(2010, 1, 1)).current_page == 0
        assert month_navigator(initial_date=date(2030, 1, 1)).current_page == 60

    def test_invalid_bounds(self):
        with pytest.raises(InvalidBoundsError):
            PageNavigator(PageUnit.MONTH, MAX, MIN)
        with pytest.raises(ValueError):
            PageNavigator(PageUnit.DAY, MIN, MIN)

    def test_out_of_range_targets(self):
        navigator = month_navigator()
        with pytest.raises(DateOutOfRangeError):
            navigator.jump_to_date(date(2026, 1, 1))
        with pytest.raises(PageOutOfRangeError):
            navigator.jump_to_page(61)
        with pytest.raises(IndexError):
            navigator.animate_to_page(-1)

    def test_maximum_date_is_inclusive(self):
        navigator = month_navigator()
        assert navigator.contains(MAX)
        assert not navigator.contains(date(2025, 1, 2))
        navigator.jump_to_date(MAX)
        assert navigator.current_page == navigator.total_pages - 1 == 60

        days = PageNavigator(PageUnit.DAY, MIN, date(2020, 1, 31), initial_date=MIN)
        days.jump_to_date(date(2020, 1, 31))
        assert days.current_page == 30

    def test_next_and_previous_stop_at_bounds(self):
        navigator = month_navigator(initial_date=MIN)
        assert navigator.previous_page() is None
        assert navigator.current_page == 0
        navigator.jump_to_page(60)
        assert navigator.next_page() is None
        assert navigator.current_page == 60
        assert navigator.previous_page().result() == 59

    def test_listeners_get_date_and_page(self):
        seen = []
        navigator = month_navigator(on_page_change=lambda d, i: seen.append((d, i)))
        navigator.jump_to_date(date(2022, 6, 15))
        navigator.jump_to_date(date(2022, 6, 20))  # same page, no notification
        assert seen == [(date(2022, 6, 1), 29)]

    def test_transition_without_animator_completes_at_once(self):
        navigator = month_navigator()
        future = navigator.animate_to_page(10)
        assert future.done()
        assert future.result() == 10
        assert not navigator.transition_pending

    def test_animated_transition_resolves_on_settle(self):
        navigator = month_navigator(transition_duration_ms=250)
        animator = RecordingAnimator(navigator)
        start = navigator.current_page

        future = navigator.next_page()
        assert animator.started == [(start, start + 1, 250)]
        assert not future.done()
        assert navigator.transition_pending
        assert navigator.pending_page == start + 1
        assert navigator.current_page == start

        animator.finish()
        assert future.result() == start + 1
        assert navigator.current_page == start + 1
        assert not navigator.transition_pending

    def test_new_transition_cancels_pending_one(self):
        navigator = month_navigator()
        animator = RecordingAnimator(navigator)
        first = navigator.animate_to_page(5, duration_ms=100)
        second = navigator.animate_to_page(7)
        assert first.cancelled()
        assert animator.stopped == 1
        assert animator.started[-1][1] == 7
        animator.finish()
        assert second.result() == 7

    def test_jump_cancels_pending_transition(self):
        navigator = month_navigator()
        animator = RecordingAnimator(navigator)
        pending = navigator.animate_to_page(5)
        navigator.jump_to_page(3)
        assert pending.cancelled()
        assert animator.stopped == 1
        assert navigator.current_page == 3

    def test_set_bounds_keeps_or_clamps_date(self):
        seen = []
        navigator = month_navigator(on_page_change=lambda d, i: seen.append(i))
        navigator.set_bounds(date(2021, 1, 1), MAX)
        # Same month, new index
        assert navigator.current_date == date(2021, 5, 1)
        assert navigator.current_page == 4
        navigator.set_bounds(date(2022, 1, 1), MAX)
        assert navigator.current_date == date(2022, 1, 1)
        assert seen == [4, 0]
        with pytest.raises(InvalidBoundsError):
            navigator.set_bounds(MAX, MIN)

    def test_days_for_page(self):
        navigator = PageNavigator(PageUnit.WEEK, MIN, MAX, initial_date=date(2021, 9, 8))
        days = navigator.days_for_page(navigator.current_page)
        assert days[0] == date(2021, 9, 6)
        assert len(days) == 7


class TestDateController:
    def test_controller_moves_attached_navigators(self):
        controller = DateChangeController(date(2021, 5, 13))
        months = month_navigator()
        days = PageNavigator(PageUnit.DAY, MIN, MAX, initial_date=date(2021, 5, 13))
        months.attach_date_controller(controller)
        days.attach_date_controller(controller)
        assert controller.listener_count == 2

        controller.animate_to_date(date(2022, 6, 10))
        assert months.current_page == 29
        assert days.current_date == date(2022, 6, 10)
        assert controller.current_date == date(2022, 6, 10)

    def test_detach(self):
        controller = DateChangeController()
        navigator = month_navigator()
        navigator.attach_date_controller(controller)
        navigator.detach_date_controller()
        assert controller.listener_count == 0
        assert navigator.date_controller is None
        controller.animate_to_date(date(2022, 6, 10))
        assert navigator.current_date == date(2021, 5, 1)


class TestDispose:
    def test_dispose_releases_and_blocks_use(self):
        controller = DateChangeController()
        navigator = month_navigator()
        animator = RecordingAnimator(navigator)
        navigator.attach_date_controller(controller)
        pending = navigator.animate_to_page(9)

        navigator.dispose()
        assert navigator.disposed
        assert pending.cancelled()
        assert animator.stopped == 1
        assert controller.listener_count == 0
        with pytest.raises(NotInitializedError):
            navigator.next_page()
        with pytest.raises(RuntimeError):
            navigator.jump_to_page(0)
        navigator.dispose()
