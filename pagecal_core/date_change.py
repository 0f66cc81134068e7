"""
Externally driven date changes.

A DateChangeController is handed to one or more views at construction time.
Calling animate_to_date() notifies every listener, and each attached view
animates to the page containing that date.
"""

from datetime import date
from typing import Callable, Optional

from .date_utils import DateLike, without_time
from .debug import debug_print


class DateChangeController:
    """Observable holder of the date views should show."""

    def __init__(self, initial_date: Optional[DateLike] = None):
        self._date: date = without_time(initial_date or date.today())
        self._listeners: list[Callable[[date], None]] = []

    @property
    def current_date(self) -> date:
        return self._date

    def add_listener(self, listener: Callable[[date], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[date], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def animate_to_date(self, target: DateLike) -> None:
        """Store target and ask every listener to move to it."""
        self._date = without_time(target)
        debug_print(f"DateChangeController: animate to {self._date} ({len(self._listeners)} listeners)")
        for listener in list(self._listeners):
            listener(self._date)
