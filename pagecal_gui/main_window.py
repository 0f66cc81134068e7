"""
Main Window for PageCal.

A demo window around CalendarWidget: toolbar with date label, view switcher
and navigation buttons, keyboard shortcuts and a status bar.
"""

from datetime import datetime, date
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QToolBar, QPushButton, QLabel,
    QComboBox, QStatusBar, QApplication, QSizePolicy
)
from PySide6.QtGui import QCloseEvent, QFont, QKeySequence, QShortcut

from pagecal_core.config import Config
from pagecal_core.debug import debug_print
from pagecal_core.events import CalendarEvent, EventCollection

from .widgets.calendar_widget import CalendarWidget, ViewType
from .widgets.event_widget import time_range_text
from .widgets.settings import (
    set_view_config, set_layout_config, set_localization_config,
    set_colors_config, set_labels_config
)


class MainWindow(QMainWindow):
    """
    Main application window.

    Contains:
    - Toolbar with date label, view switching and navigation
    - Main calendar view (day/week/month)
    - Status bar with the number of events on the visible page
    """

    def __init__(self, config: Config, collection: Optional[EventCollection] = None, parent=None):
        super().__init__(parent)
        self.config = config
        self.collection = collection if collection is not None else EventCollection()

        # Widgets read these while building their pages, so set them first
        set_view_config(config.view)
        set_layout_config(config.layout)
        set_localization_config(config.localization)
        set_colors_config(config.colors)
        set_labels_config(config.labels)

        # Apply text_font as application default (for tooltips, event content, etc.)
        text_font = QFont(config.layout.text_font, config.layout.text_font_size)
        QApplication.instance().setFont(text_font)
        self._interface_font = QFont(config.layout.interface_font, config.layout.interface_font_size)

        self._setup_window()
        self._setup_ui()
        self._setup_toolbar()
        self._setup_shortcuts()
        self._setup_statusbar()

        self._unsubscribe = self.collection.subscribe(self._update_event_count)
        self._update_event_count()

    def _setup_window(self):
        self.setWindowTitle(self.config.labels.window_title)
        self.setMinimumSize(800, 600)
        self.resize(1200, 800)

    def _setup_shortcuts(self):
        """Set up keyboard shortcuts from config bindings."""
        bindings = self.config.bindings
        for key, slot in (
            (bindings.prev, self._calendar_widget.go_previous),
            (bindings.next, self._calendar_widget.go_next),
            (bindings.today, self._calendar_widget.go_today),
        ):
            if key:
                shortcut = QShortcut(QKeySequence(key), self)
                shortcut.activated.connect(slot)

    def _setup_ui(self):
        self._calendar_widget = CalendarWidget(
            self.collection,
            view_type=ViewType(self.config.view.default_view),
        )
        self._calendar_widget.slot_clicked.connect(self._on_slot_clicked)
        self._calendar_widget.event_clicked.connect(self._on_event_clicked)
        self._calendar_widget.date_selected.connect(self._on_date_selected)
        self._calendar_widget.view_changed.connect(self._on_view_changed)
        self._calendar_widget.date_changed.connect(self._on_date_changed)
        self.setCentralWidget(self._calendar_widget)

    def _setup_toolbar(self):
        """Set up the navigation toolbar."""
        labels = self.config.labels
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)
        if toolbar.layout():
            toolbar.layout().setContentsMargins(8, 12, 8, 8)

        self._date_label = QLabel()
        date_font = QFont(self._interface_font)
        date_font.setBold(True)
        self._date_label.setFont(date_font)
        self._date_label.setMinimumWidth(200)
        toolbar.addWidget(self._date_label)

        toolbar.addSeparator()

        self._view_combo = QComboBox()
        self._view_combo.setFont(self._interface_font)
        self._view_combo.addItem(labels.view_day, ViewType.DAY)
        self._view_combo.addItem(labels.view_week, ViewType.WEEK)
        self._view_combo.addItem(labels.view_month, ViewType.MONTH)
        self._view_combo.setCurrentIndex(self._view_combo.findData(self._calendar_widget.get_current_view()))
        self._view_combo.currentIndexChanged.connect(self._on_view_combo_changed)
        toolbar.addWidget(self._view_combo)

        toolbar.addSeparator()

        self._prev_btn = QPushButton(labels.button_prev)
        self._prev_btn.setFont(self._interface_font)
        self._prev_btn.setToolTip("Previous")
        self._prev_btn.clicked.connect(self._calendar_widget.go_previous)
        toolbar.addWidget(self._prev_btn)

        self._today_btn = QPushButton(labels.button_today)
        self._today_btn.setFont(self._interface_font)
        self._today_btn.clicked.connect(self._calendar_widget.go_today)
        toolbar.addWidget(self._today_btn)

        self._next_btn = QPushButton(labels.button_next)
        self._next_btn.setFont(self._interface_font)
        self._next_btn.setToolTip("Next")
        self._next_btn.clicked.connect(self._calendar_widget.go_next)
        toolbar.addWidget(self._next_btn)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        self._update_date_label()

    def _setup_statusbar(self):
        self._statusbar = QStatusBar()
        self._statusbar.setFont(self._interface_font)
        self.setStatusBar(self._statusbar)
        self._count_label = QLabel()
        self._count_label.setFont(self._interface_font)
        self._statusbar.addPermanentWidget(self._count_label)

    @property
    def calendar_widget(self) -> CalendarWidget:
        return self._calendar_widget

    def date_label_text(self) -> str:
        return self._date_label.text()

    def _update_date_label(self):
        """Day: yyyy/mm/dd, week: the range of its days, month: its name and year."""
        current_date = self._calendar_widget.get_current_date()
        view_type = self._calendar_widget.get_current_view()

        if view_type == ViewType.DAY:
            text = current_date.strftime("%Y/%m/%d")
        elif view_type == ViewType.WEEK:
            start, end = (dt.date() for dt in self._calendar_widget.get_date_range())
            if start.year == end.year and start.month == end.month:
                text = f"{start.strftime('%Y/%m/%d')}-{end.day:02d}"
            else:
                text = f"{start.strftime('%Y/%m/%d')} - {end.strftime('%Y/%m/%d')}"
        else:
            month_name = self.config.localization.get_month_name(current_date.month)
            text = f"{month_name} {current_date.year}"

        self._date_label.setText(text)

    def _update_event_count(self):
        start, end = self._calendar_widget.get_date_range()
        count = len(self.collection.events_between(start.date(), end.date()))
        self._count_label.setText(f"{count} events")

    def _on_view_combo_changed(self, index: int):
        view_type = self._view_combo.currentData()
        if view_type:
            self._calendar_widget.set_view(view_type)

    def _on_view_changed(self, view_type: ViewType):
        index = self._view_combo.findData(view_type)
        if index != self._view_combo.currentIndex():
            self._view_combo.setCurrentIndex(index)
        self._update_date_label()
        self._update_event_count()

    def _on_date_changed(self, d: date):
        self._update_date_label()
        self._update_event_count()

    def _on_slot_clicked(self, dt: datetime):
        self._statusbar.showMessage(dt.strftime("%Y/%m/%d %H:%M"), 3000)

    def _on_date_selected(self, d: date):
        count = len(self.collection.events_on(d))
        self._statusbar.showMessage(f"{d.strftime('%Y/%m/%d')}: {count} events", 3000)

    def _on_event_clicked(self, event: CalendarEvent):
        debug_print(f"MainWindow: clicked {event!r}")
        self._statusbar.showMessage(f"{event.title} ({time_range_text(event)})", 5000)

    def closeEvent(self, event: QCloseEvent):
        """Release the collection and the views before closing."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._calendar_widget.dispose()
        super().closeEvent(event)
