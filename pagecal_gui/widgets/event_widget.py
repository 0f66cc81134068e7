"""
Event Widget for displaying individual calendar events.

Shows event tiles in the calendar views with color coding and event info.
"""

from PySide6.QtWidgets import (
    QWidget, QLabel, QVBoxLayout, QHBoxLayout,
    QFrame, QSizePolicy
)
from PySide6.QtCore import Qt, Signal, QSize
from PySide6.QtGui import QFont, QMouseEvent, QFontMetrics

from pagecal_core.events import CalendarEvent
from pagecal_core.layout import accent_color

from .settings import get_text_font, get_labels_config


def lighten_color(hex_color: str, factor: float = 0.3) -> str:
    """Lighten a hex color by the given factor (negative factors darken)."""
    color = hex_color.lstrip('#')
    if len(color) == 3:
        color = ''.join([c*2 for c in color])

    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except (ValueError, IndexError):
        return hex_color

    if factor >= 0:
        r = int(min(255, r + (255 - r) * factor))
        g = int(min(255, g + (255 - g) * factor))
        b = int(min(255, b + (255 - b) * factor))
    else:
        r = int(max(0, r * (1 + factor)))
        g = int(max(0, g * (1 + factor)))
        b = int(max(0, b * (1 + factor)))

    return f"#{r:02x}{g:02x}{b:02x}"


def sanitize_text(text: str) -> str:
    """Convert line breaks to spaces for single-line display."""
    if not text:
        return text
    return ' '.join(text.split())


def time_range_text(event: CalendarEvent) -> str:
    if event.all_day:
        return get_labels_config().allday_label
    return f"{event.local_start.strftime('%H:%M')} - {event.local_end.strftime('%H:%M')}"


class EventWidget(QFrame):
    """
    Widget representing a single event in a calendar view.

    Compact tiles show the title on one line; full tiles add the time and
    description.
    """

    # Signal emitted when the event is clicked
    clicked = Signal(CalendarEvent)

    # Signal emitted when the event is double-clicked
    double_clicked = Signal(CalendarEvent)

    def __init__(
        self,
        event_data: CalendarEvent,
        compact: bool = False,
        show_time: bool = True,
        parent: QWidget = None
    ):
        """
        Initialize the event widget.

        Args:
            event_data: The event to display
            compact: If True, use a compact single-line layout
            show_time: If True, show the event time
            parent: Parent widget
        """
        super().__init__(parent)
        self.event_data = event_data
        self.compact = compact
        self.show_time = show_time

        self._setup_ui()
        self._apply_style()

    def _setup_ui(self) -> None:
        self.setFont(get_text_font())

        if self.compact:
            self._setup_compact_ui()
        else:
            self._setup_full_ui()

        self.setFrameStyle(QFrame.StyledPanel | QFrame.Plain)
        self.setCursor(Qt.PointingHandCursor)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)
        self._setup_tooltip()

    def _setup_tooltip(self) -> None:
        """Set up the tooltip with full event information."""
        lines = [f"<b>{self.event_data.title}</b>", time_range_text(self.event_data)]
        if self.event_data.kind:
            lines.append(f"<i>{self.event_data.kind}</i>")
        if self.event_data.description:
            desc = self.event_data.description
            if len(desc) > 200:
                desc = desc[:200] + "..."
            lines.append(f"<br>{desc}")
        self.setToolTip("<br>".join(lines))

    def _setup_compact_ui(self) -> None:
        """Single line: optional start time and the title."""
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(4)
        layout.setAlignment(Qt.AlignTop)

        text_font = get_text_font()
        if self.show_time and not self.event_data.all_day:
            time_label = QLabel(self.event_data.local_start.strftime('%H:%M'))
            time_label.setFont(text_font)
            layout.addWidget(time_label)

        title_label = QLabel(sanitize_text(self.event_data.title))
        title_label.setWordWrap(False)
        title_label.setTextFormat(Qt.PlainText)
        title_font = QFont(text_font)
        title_font.setBold(True)
        title_label.setFont(title_font)
        layout.addWidget(title_label, 1)

    def _setup_full_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.setSpacing(2)

        text_font = get_text_font()

        if self.show_time:
            time_label = QLabel(time_range_text(self.event_data))
            time_label.setFont(text_font)
            layout.addWidget(time_label)

        title_label = QLabel(self.event_data.title)
        title_font = QFont(text_font)
        title_font.setBold(True)
        title_label.setFont(title_font)
        title_label.setWordWrap(True)
        layout.addWidget(title_label)

        if self.event_data.description:
            desc_label = QLabel(sanitize_text(self.event_data.description))
            desc_label.setFont(text_font)
            desc_label.setWordWrap(True)
            desc_label.setStyleSheet("color: rgba(0, 0, 0, 0.6);")
            layout.addWidget(desc_label)
        layout.addStretch()

    def _apply_style(self) -> None:
        """Apply color styling based on the event's color."""
        bg_color = self.event_data.color
        bg_lighter = lighten_color(bg_color, 0.4)
        text_color = accent_color(bg_lighter)

        self.setStyleSheet(f"""
            EventWidget {{
                background-color: {bg_lighter};
                border: 1px solid {bg_color};
                border-left: 4px solid {bg_color};
                border-radius: 4px;
                color: {text_color};
            }}
            EventWidget:hover {{
                background-color: {lighten_color(bg_color, 0.2)};
            }}
            QLabel {{
                color: {text_color};
                background: transparent;
                border: none;
                padding: 0px;
                margin: 0px;
            }}
        """)

    def mouseReleaseEvent(self, mouse_event: QMouseEvent) -> None:
        if mouse_event.button() == Qt.LeftButton:
            self.clicked.emit(self.event_data)
        super().mouseReleaseEvent(mouse_event)

    def mouseDoubleClickEvent(self, mouse_event: QMouseEvent) -> None:
        if mouse_event.button() == Qt.LeftButton:
            self.double_clicked.emit(self.event_data)
        super().mouseDoubleClickEvent(mouse_event)

    def sizeHint(self) -> QSize:
        """Preferred size based on font metrics."""
        line_height = QFontMetrics(self.font()).height()
        if self.compact:
            return QSize(150, line_height + 8)
        num_lines = 2 + (1 if self.event_data.description else 0)
        return QSize(150, num_lines * line_height + 12)

    def minimumSizeHint(self) -> QSize:
        line_height = QFontMetrics(self.font()).height()
        if self.compact:
            return QSize(50, line_height + 4)
        return QSize(80, 2 * line_height + 8)


class AllDayEventWidget(EventWidget):
    """Solid bar for all-day events in the all-day row."""

    def __init__(self, event_data: CalendarEvent, parent: QWidget = None):
        super().__init__(event_data, compact=True, show_time=False, parent=parent)
        line_height = QFontMetrics(self.font()).height()
        self.setMaximumHeight(line_height + 8)

    def _apply_style(self) -> None:
        bg_color = self.event_data.color
        text_color = accent_color(bg_color)

        self.setStyleSheet(f"""
            AllDayEventWidget {{
                background-color: {bg_color};
                border-radius: 3px;
                color: {text_color};
                padding: 2px 6px;
            }}
            AllDayEventWidget:hover {{
                background-color: {lighten_color(bg_color, -0.1)};
            }}
            QLabel {{
                color: {text_color};
                background: transparent;
            }}
        """)
