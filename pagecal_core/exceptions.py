"""
Errors raised by the PageCal core.

Configuration and navigation errors are raised at the call site and are not
meant to be retried; NotInitializedError signals a programming error.
"""


class CalendarError(Exception):
    """Base class for all PageCal errors."""


class ConfigError(CalendarError):
    """A configuration value could not be parsed or is not allowed."""


class InvalidBoundsError(ConfigError, ValueError):
    """The minimum date does not strictly precede the maximum date."""

    def __init__(self, min_date, max_date):
        super().__init__(
            "Minimum date should be less than maximum date.\n"
            f"Provided minimum date: {min_date}, maximum date: {max_date}"
        )
        self.min_date = min_date
        self.max_date = max_date


class PageOutOfRangeError(CalendarError, IndexError):
    """A page index outside [0, total_pages) was requested."""

    def __init__(self, page: int, total_pages: int):
        super().__init__(f"Page {page} is out of range (0..{total_pages - 1})")
        self.page = page
        self.total_pages = total_pages


class DateOutOfRangeError(CalendarError, ValueError):
    """A navigation target date lies outside the configured bounds."""

    def __init__(self, target, min_date, max_date):
        super().__init__(f"Invalid date selected: {target} is not within {min_date} - {max_date}")
        self.target = target


class NotInitializedError(CalendarError, RuntimeError):
    """State was queried before it was set up (or after it was disposed)."""


class EventValidationError(CalendarError, ValueError):
    """An event has inconsistent data, e.g. it ends before it starts."""


class EventNotFoundError(CalendarError, KeyError):
    """The event is not part of the collection."""
