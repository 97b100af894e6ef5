# tuibridge/scheduler.py
import logging
import sys
from typing import Any, Callable, Optional, Set

from PySide6.QtCore import QCoreApplication, QTimer

logger = logging.getLogger(__name__)


def ensure_event_loop() -> QCoreApplication:
    """Return the process's Qt application, creating a core one if needed."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv)
    return app


class RenderScheduler:
    """
    Defers work to a later turn of the Qt event loop.

    `schedule_render` batches render requests from the reconciler and hands
    back a cancel callable; `defer` is the after-mount hook used for work
    that must wait until the current node is attached.
    """

    def __init__(self, renderer: Optional[Any] = None):
        ensure_event_loop()
        self.renderer = renderer
        self._timers: Set[QTimer] = set()

    @property
    def pending(self) -> int:
        return len(self._timers)

    def schedule_render(self, callback: Callable[[], Any]) -> Callable[[], None]:
        return self.call_later(0, callback)

    def call_later(self, delay_ms: int, callback: Callable[[], Any]) -> Callable[[], None]:
        timer = QTimer()
        timer.setSingleShot(True)

        def fire():
            self._timers.discard(timer)
            callback()

        def cancel():
            if timer in self._timers:
                timer.stop()
                self._timers.discard(timer)

        timer.timeout.connect(fire)
        self._timers.add(timer)
        timer.start(max(int(delay_ms), 0))
        return cancel

    def defer(self, callback: Callable[[], Any]) -> Callable[[], None]:
        return self.schedule_render(callback)

    def after_render(self):
        """Ask the renderer to flush a frame; renderers without one are skipped."""
        request_render = getattr(self.renderer, "request_render", None)
        if callable(request_render):
            request_render()

    def cancel_all(self):
        for timer in list(self._timers):
            timer.stop()
        self._timers.clear()
