# tests/test_scheduler.py
import io
import unittest

from PySide6.QtCore import QEventLoop, QTimer

from tuibridge.engine import CliRenderer
from tuibridge.scheduler import RenderScheduler, ensure_event_loop


def spin(ms=50):
    """Run the Qt event loop for `ms` milliseconds."""
    ensure_event_loop()
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


class TestRenderScheduler(unittest.TestCase):
    def setUp(self):
        self.renderer = CliRenderer({"use_alternate_screen": False, "width": 80, "height": 24}, output=io.StringIO())
        self.scheduler = RenderScheduler(self.renderer)

    def tearDown(self):
        self.scheduler.cancel_all()

    def test_schedule_render_runs_on_a_later_turn(self):
        calls = []
        self.scheduler.schedule_render(lambda: calls.append("render"))
        self.assertEqual(calls, [])
        self.assertEqual(self.scheduler.pending, 1)
        spin()
        self.assertEqual(calls, ["render"])
        self.assertEqual(self.scheduler.pending, 0)

    def test_cancel_prevents_the_callback(self):
        calls = []
        cancel = self.scheduler.schedule_render(lambda: calls.append("render"))
        cancel()
        cancel()
        spin()
        self.assertEqual(calls, [])

    def test_callbacks_run_in_scheduling_order(self):
        calls = []
        self.scheduler.schedule_render(lambda: calls.append(1))
        self.scheduler.defer(lambda: calls.append(2))
        spin()
        self.assertEqual(calls, [1, 2])

    def test_call_later_honours_the_delay(self):
        calls = []
        self.scheduler.call_later(200, lambda: calls.append("late"))
        spin(20)
        self.assertEqual(calls, [])
        spin(400)
        self.assertEqual(calls, ["late"])

    def test_cancel_all(self):
        calls = []
        self.scheduler.schedule_render(lambda: calls.append(1))
        self.scheduler.call_later(10, lambda: calls.append(2))
        self.scheduler.cancel_all()
        spin()
        self.assertEqual(calls, [])

    def test_after_render_flushes_a_frame(self):
        self.renderer.start()
        frames = self.renderer.frames_rendered
        self.scheduler.after_render()
        self.assertEqual(self.renderer.frames_rendered, frames + 1)

    def test_after_render_without_a_flush_method(self):
        RenderScheduler(object()).after_render()
        RenderScheduler(None).after_render()


if __name__ == "__main__":
    unittest.main()
