from datetime import date, datetime, time, timedelta

import pytest

from pagecal_core.date_utils import (
    WeekDay, MinuteSlotSize,
    add_months, append_leading_zero, copy_from_minutes, days_between,
    days_in_month_grid, days_in_week, first_day_of_week, format_month,
    has_same_time, is_day_start, is_same_day, is_same_hour, is_same_minute,
    is_same_month, is_same_second, is_same_year, last_day_of_week, month_bounds,
    months_between, row_count, total_minutes, weeks_between, without_time,
)


class TestSimpleHelpers:
    def test_without_time(self):
        assert without_time(datetime(2021, 5, 13, 17, 45)) == date(2021, 5, 13)
        assert without_time(date(2021, 5, 13)) == date(2021, 5, 13)

    def test_same_checks(self):
        a = datetime(2021, 5, 13, 10, 30, 15)
        assert is_same_year(a, datetime(2021, 1, 1))
        assert is_same_month(a, date(2021, 5, 1))
        assert not is_same_month(a, date(2020, 5, 13))
        assert is_same_day(a, date(2021, 5, 13))
        assert is_same_hour(a, datetime(2021, 5, 13, 10, 0))
        assert is_same_minute(a, datetime(2021, 5, 13, 10, 30, 59))
        assert is_same_second(a, datetime(2021, 5, 13, 10, 30, 15, 999))
        assert not is_same_second(a, datetime(2021, 5, 13, 10, 30, 16))
        assert has_same_time(a, datetime(1999, 1, 1, 10, 30, 15))

    def test_minutes(self):
        assert total_minutes(time(12, 4)) == 724
        assert copy_from_minutes(date(2021, 5, 13), 724) == datetime(2021, 5, 13, 12, 4)
        assert is_day_start(datetime(2021, 5, 13))
        assert not is_day_start(datetime(2021, 5, 13, 0, 1))

    def test_formatting(self):
        assert append_leading_zero(5) == "05"
        assert append_leading_zero(12) == "12"
        assert format_month(date(2021, 5, 13)) == "5-2021"

    def test_weekday_parse(self):
        assert WeekDay.parse("sunday") is WeekDay.SUNDAY
        assert WeekDay.parse("Tue") is WeekDay.TUESDAY
        assert WeekDay.parse(3) is WeekDay.THURSDAY
        with pytest.raises(ValueError):
            WeekDay.parse("someday")

    def test_minute_slot(self):
        assert MinuteSlotSize(30).minutes == 30


class TestWeeks:
    def test_days_in_week_monday_start(self):
        days = days_in_week(date(2021, 9, 8), WeekDay.MONDAY)
        assert days[0] == date(2021, 9, 6)
        assert days[-1] == date(2021, 9, 12)
        assert len(days) == 7

    @pytest.mark.parametrize("start", list(WeekDay))
    def test_week_starts_on_start_day(self, start):
        for offset in range(14):
            d = date(2021, 3, 1) + timedelta(days=offset)
            days = days_in_week(d, start)
            assert days[0].weekday() == start
            assert d in days
            assert days == [days[0] + timedelta(days=i) for i in range(7)]

    def test_week_start_after_date_weekday(self):
        # Wednesday, weeks starting on Saturday
        assert first_day_of_week(date(2021, 9, 8), WeekDay.SATURDAY) == date(2021, 9, 4)
        assert last_day_of_week(date(2021, 9, 8), WeekDay.SATURDAY) == date(2021, 9, 10)

    def test_weeks_between(self):
        assert weeks_between(date(2021, 9, 6), date(2021, 9, 12)) == 0
        assert weeks_between(date(2021, 9, 12), date(2021, 9, 13)) == 1
        assert weeks_between(date(2021, 9, 13), date(2021, 9, 12)) == 1
        assert weeks_between(date(2021, 1, 1), date(2021, 12, 31)) == 52


class TestMonths:
    def test_month_bounds_and_add_months(self):
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
        assert add_months(date(2021, 11, 30), 3) == date(2022, 2, 1)
        assert add_months(date(2021, 1, 15), -1) == date(2020, 12, 1)

    def test_months_between(self):
        a = date(2021, 5, 13)
        assert months_between(a, a) == 1
        assert months_between(date(2020, 1, 1), date(2022, 6, 1)) == 30
        assert months_between(date(2022, 6, 1), date(2020, 1, 1)) == 30
        assert months_between(date(2021, 12, 31), date(2022, 1, 1)) == 2

    def test_days_between(self):
        assert days_between(datetime(2021, 5, 13, 23), datetime(2021, 5, 14, 1)) == 1
        assert days_between(date(2021, 5, 14), date(2021, 5, 13)) == 1


class TestMonthGrid:
    def test_may_2021_starts_on_monday_before_first(self):
        grid = days_in_month_grid(date(2021, 5, 13), WeekDay.MONDAY)
        assert grid[0] == date(2021, 4, 26)
        # May 1st is a Saturday, so the 31st falls into a sixth row
        assert len(grid) == 42
        assert grid[-1] == date(2021, 6, 6)

    def test_five_row_month(self):
        grid = days_in_month_grid(date(2021, 6, 15), WeekDay.MONDAY)
        assert len(grid) == 35
        assert grid[0] == date(2021, 5, 31)
        assert grid[-1] == date(2021, 7, 4)

    def test_four_week_february_gets_five_rows(self):
        # February 2021 starts on a Monday and fills exactly four weeks
        assert row_count(date(2021, 2, 1), WeekDay.MONDAY) == 5
        grid = days_in_month_grid(date(2021, 2, 1), WeekDay.MONDAY)
        assert grid[0] == date(2021, 2, 1)
        assert grid[-1] == date(2021, 3, 7)

    def test_sunday_start(self):
        grid = days_in_month_grid(date(2021, 5, 1), WeekDay.SUNDAY)
        assert grid[0] == date(2021, 4, 25)
        assert grid[0].weekday() == WeekDay.SUNDAY

    @pytest.mark.parametrize("start", list(WeekDay))
    def test_grid_properties(self, start):
        for month in range(1, 25):
            d = add_months(date(2021, 1, 1), month)
            grid = days_in_month_grid(d, start)
            first, last = month_bounds(d)
            assert len(grid) in (35, 42)
            assert len(grid) == row_count(d, start) * 7
            assert grid[0].weekday() == start
            assert all(b - a == timedelta(days=1) for a, b in zip(grid, grid[1:]))
            assert grid[0] <= first and last <= grid[-1]
            # Only the padded five-row case may end with a row of next month days
            assert grid[6] >= first
            if len(grid) == 42:
                assert grid[-7] <= last
