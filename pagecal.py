#!/usr/bin/env python3
"""
PageCal - paged month, week and day calendar views for PySide6.

This is the main entry point of the demo application.
"""

import sys
import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from pagecal_core.config import Config, VIEW_NAMES
from pagecal_core.debug import set_debug, debug_print, error_print
from pagecal_core.events import EventCollection, load_ics_events
from pagecal_core.exceptions import CalendarError
from pagecal_core.timezone_utils import set_timezone
from pagecal_gui.main_window import MainWindow

EXAMPLE_CONFIG = """
[General]
timezone = "Europe/Berlin"
events_file = "~/calendar.ics"

[View]
default_view = "month"
week_start = "monday"
min_date = 2020-01-01
max_date = 2030-12-31
"""


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="PageCal - paged month, week and day calendar views"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--ics",
        type=Path,
        help="iCalendar file with events to show (overrides events_file)"
    )
    parser.add_argument(
        "--view",
        choices=VIEW_NAMES,
        help="View to open with (overrides default_view)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args(argv)


def load_config(path: Path = None) -> Config:
    """
    Load the configuration file.

    Without an explicit path a missing default file is not an error: the
    built-in defaults are used instead.
    """
    if path is None and not Config.get_default_config_path().exists():
        debug_print(f"No configuration at {Config.get_default_config_path()}, using defaults")
        return Config()
    return Config.load(path)


def load_events(config: Config, ics_path: Path = None) -> EventCollection:
    collection = EventCollection()
    path = ics_path or config.events_file
    if path is None:
        return collection
    text = Path(path).expanduser().read_text(encoding="utf-8")
    collection.add_all(load_ics_events(text, config.colors.event_default))
    debug_print(f"Loaded {len(collection)} events from {path}")
    return collection


def main():
    """Main entry point."""
    args = parse_args()
    set_debug(args.debug)

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("PageCal")
    app.setApplicationVersion("0.1")
    app.setStyle("Fusion")

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        error_print(str(e))
        error_print("Example configuration:" + EXAMPLE_CONFIG)
        sys.exit(1)
    except CalendarError as e:
        error_print(f"Could not load configuration: {e}")
        sys.exit(1)

    if args.view:
        config.view.default_view = args.view
    set_timezone(config.timezone)

    try:
        collection = load_events(config, args.ics)
    except (OSError, ValueError) as e:
        error_print(f"Could not load events: {e}")
        sys.exit(1)

    window = MainWindow(config, collection)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
