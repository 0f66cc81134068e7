"""
Configuration parser for PageCal.

Reads a TOML file into dataclass sections. Every key is optional; missing
keys fall back to the dataclass defaults.
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Optional

from .date_utils import MinuteSlotSize, WeekDay
from .debug import debug_print
from .exceptions import ConfigError, InvalidBoundsError

VIEW_NAMES = ("day", "week", "month")


@dataclass
class ViewConfig:
    """Paging behaviour shared by the month, week and day views."""
    default_view: str = "month"
    week_start: WeekDay = WeekDay.MONDAY
    min_date: Optional[date] = None   # None: 1970-01-01
    max_date: Optional[date] = None   # None: 2100-12-31
    initial_date: Optional[date] = None  # None: today
    page_transition_ms: int = 300
    minute_slot: MinuteSlotSize = MinuteSlotSize.MINUTES_60
    show_border: bool = True
    border_size: float = 0.5
    max_events_per_cell: int = 3  # Month cells show "+N" beyond this


@dataclass
class LayoutConfig:
    """Configuration for UI layout and fonts."""
    interface_font: str = "Sans"
    interface_font_size: int = 12
    text_font: str = "Sans"
    text_font_size: int = 11
    hour_height: int = 60  # Height of an hour slot in day/week view in pixels


@dataclass
class BindingsConfig:
    """Configuration for keyboard bindings."""
    next: str = "Right"  # Key to go to next page
    prev: str = "Left"   # Key to go to previous page
    today: str = "T"


@dataclass
class ColorsConfig:
    """Configuration for UI colors."""
    # Calendar/Grid Colors
    day_column_background: str = "#ffffff"
    hour_line: str = "#e8e8e8"
    cell_border: str = "#e0e0e0"
    allday_cell_background: str = "#fafafa"
    current_time_line: str = "#d32f2f"

    # Header Colors
    header_background: str = "#f5f5f5"
    today_highlight_background: str = "#e3f2fd"
    today_highlight_text: str = "#1976d2"

    # Month View Colors
    month_cell_current: str = "#ffffff"
    month_cell_other: str = "#f5f5f5"
    month_text_current: str = "#000000"
    month_text_other: str = "#999999"
    detail_background: str = "#fbfbfb"

    # Default color for events without one
    event_default: str = "#4285f4"


@dataclass
class LabelsConfig:
    """Configuration for UI labels."""
    window_title: str = "PageCal"
    view_day: str = "Day"
    view_week: str = "Week"
    view_month: str = "Month"
    button_prev: str = "◀"
    button_next: str = "▶"
    button_today: str = "Today"
    allday_label: str = "All day"
    no_events: str = "No events"
    more_events: str = "+{} more"


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Abbreviated day names, Monday first
    day_names: list[str] = None
    # Full month names, January first
    month_names: list[str] = None

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        if self.month_names is None:
            self.month_names = [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December"
            ]
        if len(self.day_names) != 7:
            raise ConfigError(f"Expected 7 day names, got {len(self.day_names)}")
        if len(self.month_names) != 12:
            raise ConfigError(f"Expected 12 month names, got {len(self.month_names)}")

    def get_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Monday, 6=Sunday)."""
        return self.day_names[weekday] if 0 <= weekday < len(self.day_names) else ""

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""


def _parse_date(value, key: str) -> Optional[date]:
    """TOML dates arrive as date objects; strings are accepted in ISO format."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ConfigError(f"Invalid date for '{key}': {value!r}")


def _section(cls, data: dict, section: str):
    """Build a flat dataclass section, keeping defaults for missing keys."""
    known = {f.name for f in fields(cls)}
    values = {}
    for key, value in data.items():
        if key not in known:
            debug_print(f"Config: ignoring unknown key '{key}' in [{section}]")
            continue
        values[key] = value
    return cls(**values)


@dataclass
class Config:
    """Main configuration container for PageCal."""

    timezone: str = "UTC"
    events_file: Optional[Path] = None  # iCalendar file loaded at startup
    view: ViewConfig = field(default_factory=ViewConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    bindings: BindingsConfig = field(default_factory=BindingsConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    labels: LabelsConfig = field(default_factory=LabelsConfig)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'pagecal' / 'pagecal.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from a TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

        debug_print(f"Config: sections {list(data.keys())} from {config_path}")
        return cls.from_dict(data, base_dir=config_path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_dir: Optional[Path] = None) -> 'Config':
        """Build a Config from parsed TOML data."""
        # Parse General section
        general = data.get('General', {})
        timezone = general.get('timezone', 'UTC')
        events_file = None
        if general.get('events_file'):
            events_file = Path(os.path.expanduser(general['events_file']))
            if not events_file.is_absolute() and base_dir is not None:
                events_file = base_dir / events_file

        view = cls._parse_view(data.get('View', {}))

        # Parse Localization section (space-separated names)
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')
        localization = LocalizationConfig(
            day_names=day_names_str.split() if day_names_str else None,
            month_names=month_names_str.split() if month_names_str else None,
        )

        return cls(
            timezone=timezone,
            events_file=events_file,
            view=view,
            layout=_section(LayoutConfig, data.get('Layout', {}), 'Layout'),
            bindings=_section(BindingsConfig, data.get('Bindings', {}), 'Bindings'),
            localization=localization,
            colors=_section(ColorsConfig, data.get('Colors', {}), 'Colors'),
            labels=_section(LabelsConfig, data.get('Labels', {}), 'Labels'),
        )

    @staticmethod
    def _parse_view(view_data: dict) -> ViewConfig:
        default_view = str(view_data.get('default_view', ViewConfig.default_view)).lower()
        if default_view not in VIEW_NAMES:
            raise ConfigError(f"default_view must be one of {', '.join(VIEW_NAMES)}, got {default_view!r}")

        try:
            week_start = WeekDay.parse(view_data.get('week_start', ViewConfig.week_start))
        except ValueError as e:
            raise ConfigError(str(e)) from e

        try:
            minute_slot = MinuteSlotSize(int(view_data.get('minute_slot', ViewConfig.minute_slot.minutes)))
        except ValueError as e:
            raise ConfigError(f"minute_slot must be 15, 30 or 60: {e}") from e

        min_date = _parse_date(view_data.get('min_date'), 'min_date')
        max_date = _parse_date(view_data.get('max_date'), 'max_date')
        if min_date is not None and max_date is not None and not min_date < max_date:
            raise InvalidBoundsError(min_date, max_date)

        page_transition_ms = int(view_data.get('page_transition_ms', ViewConfig.page_transition_ms))
        if page_transition_ms < 0:
            raise ConfigError("page_transition_ms must not be negative")

        return ViewConfig(
            default_view=default_view,
            week_start=week_start,
            min_date=min_date,
            max_date=max_date,
            initial_date=_parse_date(view_data.get('initial_date'), 'initial_date'),
            page_transition_ms=page_transition_ms,
            minute_slot=minute_slot,
            show_border=bool(view_data.get('show_border', ViewConfig.show_border)),
            border_size=float(view_data.get('border_size', ViewConfig.border_size)),
            max_events_per_cell=int(view_data.get('max_events_per_cell', ViewConfig.max_events_per_cell)),
        )
