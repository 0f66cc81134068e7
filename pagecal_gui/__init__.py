"""
PageCal GUI Module

PySide6 views that page through months, weeks and days.
"""

from .main_window import MainWindow

__all__ = ['MainWindow']
