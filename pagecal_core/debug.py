"""
Debug output for PageCal.

Messages are timestamped and written to stderr. Debug messages are only
shown after set_debug(True) (the --debug command line flag); errors are
always shown.
"""

import sys
from datetime import datetime

_debug_enabled: bool = False


def set_debug(enabled: bool):
    """Enable or disable debug messages."""
    global _debug_enabled
    _debug_enabled = enabled


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def debug_print(message: str) -> None:
    if _debug_enabled:
        print(f"[{_timestamp()}] DEBUG: {message}", file=sys.stderr)


def error_print(message: str) -> None:
    print(f"[{_timestamp()}] Error: {message}", file=sys.stderr)
