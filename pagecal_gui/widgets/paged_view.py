"""
Base class for calendar views that page through time.

A PagedView owns a PageNavigator and shows one page widget at a time.
Page changes slide the old page out and the new one in; when the slide ends
the navigator is settled on the new page. Horizontal swipes and the mouse
wheel page back and forth.

The event collection and an optional DateChangeController are passed in at
construction time. Any change to the collection rebuilds the visible page;
dispose() releases both subscriptions.
"""

from concurrent.futures import Future
from datetime import date
from typing import Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout
from PySide6.QtCore import (
    Qt, Signal, QEvent, QObject, QPoint, QEasingCurve,
    QPropertyAnimation, QParallelAnimationGroup
)
from PySide6.QtGui import QCloseEvent, QWheelEvent

from pagecal_core.date_change import DateChangeController
from pagecal_core.date_utils import DateLike
from pagecal_core.debug import debug_print
from pagecal_core.events import CalendarEvent, EventCollection
from pagecal_core.exceptions import NotInitializedError
from pagecal_core.navigation import PageListener, PageNavigator, PageUnit

from .settings import get_view_config

# Horizontal drag distance, in pixels, that counts as a swipe
SWIPE_THRESHOLD = 60


class PagedView(QWidget):
    """Shows one page of a PageNavigator and animates between pages."""

    page_changed = Signal(object, int)  # first date of the page, page index
    event_clicked = Signal(CalendarEvent)
    event_double_clicked = Signal(CalendarEvent)
    date_selected = Signal(object)  # date

    UNIT: PageUnit = PageUnit.MONTH
    # Month pages do not scroll, so the vertical wheel may page them
    WHEEL_PAGES_VERTICALLY = False

    def __init__(
        self,
        collection: Optional[EventCollection] = None,
        date_controller: Optional[DateChangeController] = None,
        min_date: Optional[DateLike] = None,
        max_date: Optional[DateLike] = None,
        initial_date: Optional[DateLike] = None,
        week_start: Optional[int] = None,
        transition_ms: Optional[int] = None,
        on_page_change: Optional[PageListener] = None,
        parent: QWidget = None,
    ):
        super().__init__(parent)
        view_config = get_view_config()
        self._navigator = PageNavigator(
            self.UNIT,
            min_date=min_date if min_date is not None else view_config.min_date,
            max_date=max_date if max_date is not None else view_config.max_date,
            initial_date=initial_date if initial_date is not None else view_config.initial_date,
            week_start=week_start if week_start is not None else view_config.week_start,
            transition_duration_ms=(
                transition_ms if transition_ms is not None else view_config.page_transition_ms
            ),
            on_page_change=on_page_change,
        )
        self._navigator.add_page_listener(self._on_page_settled)
        self._navigator.set_animator(self._start_transition, self._stop_transition)

        self._collection: Optional[EventCollection] = None
        self._unsubscribe = None

        self._page_widget: Optional[QWidget] = None
        self._page_index: Optional[int] = None
        self._incoming: Optional[QWidget] = None
        self._animation: Optional[QParallelAnimationGroup] = None
        self._reload_pending = False
        self._press_x: Optional[float] = None

        self._setup_ui()
        self.set_collection(collection)
        self._navigator.attach_date_controller(date_controller)
        self._show_page(self._navigator.current_page)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._header = self._build_header()
        if self._header is not None:
            layout.addWidget(self._header)

        self._viewport = QWidget()
        self._viewport.installEventFilter(self)
        layout.addWidget(self._viewport, 1)

    def _rebuild_header(self) -> None:
        """Replace the header after something _build_header() reads changed."""
        layout = self.layout()
        header = self._build_header()
        if self._header is not None:
            layout.removeWidget(self._header)
            self._header.deleteLater()
        if header is not None:
            layout.insertWidget(0, header)
        self._header = header

    # ==================== Subclass hooks ====================

    def _build_header(self) -> Optional[QWidget]:
        """Widget shown above the pages, or None."""
        return None

    def _build_page(self, page_date: date) -> QWidget:
        raise NotImplementedError

    def _page_shown(self, page_date: date) -> None:
        """Called after a new page has become the visible one."""

    # ==================== Collection ====================

    @property
    def collection(self) -> EventCollection:
        """
        The EventCollection shown by this view.

        Raises NotInitializedError if no collection has been set yet.
        """
        if self._collection is None:
            raise NotInitializedError("EventCollection is not initialized yet.")
        return self._collection

    def set_collection(self, collection: Optional[EventCollection]) -> None:
        if collection is self._collection:
            return
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._collection = collection
        if collection is not None:
            self._unsubscribe = collection.subscribe(self._reload)
        if self._page_index is not None:
            self._reload()

    def events_on(self, day: date, include_all_day: bool = True) -> list[CalendarEvent]:
        if self._collection is None:
            return []
        return self._collection.events_on(day, include_all_day)

    def _reload(self) -> None:
        """Rebuild the visible page after the collection changed."""
        if self._animation is not None:
            self._reload_pending = True
            return
        if self._page_index is not None:
            self._show_page(self._page_index)

    # ==================== Pages ====================

    def _create_page(self, index: int) -> QWidget:
        page = self._build_page(self._navigator.date_for_page(index))
        page.setParent(self._viewport)
        page.setGeometry(self._viewport.rect())
        self._install_swipe_filter(page)
        return page

    def _show_page(self, index: int) -> None:
        old = self._page_widget
        self._page_widget = self._create_page(index)
        self._page_index = index
        self._page_widget.show()
        if old is not None:
            old.hide()
            old.deleteLater()
        self._page_shown(self._navigator.date_for_page(index))

    def _layout_pages(self) -> None:
        if self._animation is not None:
            return
        if self._page_widget is not None:
            self._page_widget.setGeometry(self._viewport.rect())

    def _start_transition(self, from_page: int, to_page: int, duration_ms: int) -> None:
        width = self._viewport.width()
        if duration_ms <= 0 or width <= 0 or not self.isVisible():
            self._incoming = self._create_page(to_page)
            self._finish_transition(to_page)
            return

        direction = 1 if to_page > from_page else -1
        incoming = self._create_page(to_page)
        incoming.move(direction * width, 0)
        incoming.show()

        group = QParallelAnimationGroup(self)
        moves = (
            (self._page_widget, QPoint(0, 0), QPoint(-direction * width, 0)),
            (incoming, QPoint(direction * width, 0), QPoint(0, 0)),
        )
        for widget, start, end in moves:
            animation = QPropertyAnimation(widget, b"pos", group)
            animation.setDuration(duration_ms)
            animation.setStartValue(start)
            animation.setEndValue(end)
            animation.setEasingCurve(QEasingCurve.InOutCubic)
            group.addAnimation(animation)
        group.finished.connect(lambda: self._finish_transition(to_page))

        self._incoming = incoming
        self._animation = group
        debug_print(f"{type(self).__name__}: sliding from page {from_page} to {to_page}")
        group.start()

    def _finish_transition(self, to_page: int) -> None:
        old = self._page_widget
        if self._animation is not None:
            self._animation.deleteLater()
        self._page_widget, self._incoming, self._animation = self._incoming, None, None
        self._page_index = to_page
        self._page_widget.move(0, 0)
        self._page_widget.show()
        if old is not None:
            old.hide()
            old.deleteLater()
        self._navigator.settle(to_page)
        self._page_shown(self._navigator.date_for_page(to_page))
        if self._reload_pending:
            self._reload_pending = False
            self._reload()

    def _stop_transition(self) -> None:
        """A running slide was superseded; drop the incoming page."""
        if self._animation is not None:
            self._animation.stop()
            self._animation.deleteLater()
            self._animation = None
        if self._incoming is not None:
            self._incoming.hide()
            self._incoming.deleteLater()
            self._incoming = None
        if self._page_widget is not None:
            self._page_widget.move(0, 0)

    def _on_page_settled(self, page_date: date, index: int) -> None:
        if index != self._page_index and self._animation is None:
            self._show_page(index)
        self.page_changed.emit(page_date, index)

    # ==================== Navigation ====================

    @property
    def navigator(self) -> PageNavigator:
        return self._navigator

    @property
    def current_page(self) -> int:
        return self._navigator.current_page

    @property
    def current_date(self) -> date:
        """First day of the visible page."""
        return self._navigator.current_date

    @property
    def total_pages(self) -> int:
        return self._navigator.total_pages

    @property
    def transition_pending(self) -> bool:
        return self._navigator.transition_pending

    def next_page(self, duration_ms: Optional[int] = None) -> Optional[Future]:
        return self._navigator.next_page(duration_ms)

    def previous_page(self, duration_ms: Optional[int] = None) -> Optional[Future]:
        return self._navigator.previous_page(duration_ms)

    def jump_to_page(self, page: int) -> None:
        self._navigator.jump_to_page(page)

    def animate_to_page(self, page: int, duration_ms: Optional[int] = None) -> Future:
        return self._navigator.animate_to_page(page, duration_ms)

    def jump_to_date(self, d: DateLike) -> None:
        self._navigator.jump_to_date(d)

    def animate_to_date(self, d: DateLike, duration_ms: Optional[int] = None) -> Future:
        return self._navigator.animate_to_date(d, duration_ms)

    def set_bounds(self, min_date: Optional[DateLike], max_date: Optional[DateLike]) -> None:
        self._navigator.set_bounds(min_date, max_date)
        # Page count changed; the current page may be the same index with new content
        self._reload()

    def set_date_controller(self, controller: Optional[DateChangeController]) -> None:
        self._navigator.attach_date_controller(controller)

    def dispose(self) -> None:
        """Stop listening to the collection and the date controller."""
        if self._navigator.disposed:
            return
        self._stop_transition()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._navigator.dispose()

    # ==================== Input ====================

    def _install_swipe_filter(self, page: QWidget) -> None:
        page.installEventFilter(self)
        for child in page.findChildren(QWidget):
            child.installEventFilter(self)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._viewport and event.type() == QEvent.Resize:
            self._layout_pages()
            return False

        event_type = event.type()
        if event_type == QEvent.MouseButtonPress and event.button() == Qt.LeftButton:
            self._press_x = event.globalPosition().x()
        elif event_type == QEvent.MouseButtonRelease and self._press_x is not None:
            dx = event.globalPosition().x() - self._press_x
            self._press_x = None
            if abs(dx) >= SWIPE_THRESHOLD:
                if dx < 0:
                    self.next_page()
                else:
                    self.previous_page()
                return True
        return super().eventFilter(watched, event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        delta = event.angleDelta()
        step = delta.x()
        if step == 0 and self.WHEEL_PAGES_VERTICALLY:
            step = delta.y()
        if step == 0 or self.transition_pending:
            super().wheelEvent(event)
            return
        if step < 0:
            self.next_page()
        else:
            self.previous_page()
        event.accept()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.dispose()
        super().closeEvent(event)
