"""
PageCal GUI Widgets

Paged calendar views and the widgets they are built from.
"""

from .event_widget import EventWidget, AllDayEventWidget
from .paged_view import PagedView
from .month_view import MonthView, MonthPage, MonthDayCell
from .time_grid import DayView, WeekView, DayColumnWidget
from .calendar_widget import CalendarWidget, ViewType

__all__ = [
    'EventWidget', 'AllDayEventWidget', 'PagedView',
    'MonthView', 'MonthPage', 'MonthDayCell',
    'DayView', 'WeekView', 'DayColumnWidget',
    'CalendarWidget', 'ViewType',
]
