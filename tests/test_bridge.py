# tests/test_bridge.py
import io
import unittest

from PySide6.QtCore import QEventLoop, QTimer

import tuibridge
from tuibridge.bridge import Platform, TuiPlatform
from tuibridge.config import RendererConfig
from tuibridge.engine import FrameBufferRenderable, InputRenderable, TextRenderable
from tuibridge.errors import PlatformAlreadyActive, RendererNotInitialized
from tuibridge.scheduler import ensure_event_loop


def spin(ms=50):
    ensure_event_loop()
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


def quiet_config():
    return RendererConfig(use_alternate_screen=False)


class TestTuiPlatform(unittest.TestCase):
    def setUp(self):
        self.platforms = []

    def tearDown(self):
        for tui in self.platforms:
            tui.shutdown()
        TuiPlatform._active = None

    def make(self):
        tui = TuiPlatform(quiet_config(), output=io.StringIO())
        self.platforms.append(tui)
        return tui

    def test_renderer_is_unavailable_before_start(self):
        tui = self.make()
        self.assertFalse(tui.started)
        with self.assertRaises(RendererNotInitialized):
            tui.renderer
        with self.assertRaises(RendererNotInitialized):
            tui.scheduler

    def test_start_hands_the_table_to_the_callback(self):
        tui = self.make()
        received = []
        table = tui.start(received.append)
        self.assertEqual(received, [table])
        self.assertIsInstance(table, Platform)
        self.assertIs(table.renderer, tui.renderer)
        self.assertIs(TuiPlatform.active(), tui)
        self.assertIs(tui.start(), table)

    def test_only_one_platform_is_active(self):
        first, second = self.make(), self.make()
        first.start()
        with self.assertRaises(PlatformAlreadyActive):
            second.start()
        first.shutdown()
        self.assertIsNone(TuiPlatform.active())
        second.start()
        self.assertIs(TuiPlatform.active(), second)

    def test_mount_starts_rendering(self):
        tui = self.make()
        table = tui.start()
        root, adopted = table.mount()
        self.assertIs(root, tui.renderer.root)
        self.assertIsNone(adopted)
        self.assertTrue(tui.renderer.is_running)

    def test_platform_function(self):
        received = []
        tui = tuibridge.platform(quiet_config(), received.append, output=io.StringIO())
        self.platforms.append(tui)
        self.assertTrue(tui.started)
        self.assertIs(received[0], tui.table)

    def test_destroying_the_renderer_cancels_pending_work(self):
        tui = self.make()
        table = tui.start()
        calls = []
        table.schedule_render(lambda: calls.append("render"))
        tui.renderer.destroy()
        spin()
        self.assertEqual(calls, [])


class TestDispatchTable(unittest.TestCase):
    """Drives the table the way a reconciler would for a small form."""

    def setUp(self):
        self.tui = TuiPlatform(quiet_config(), output=io.StringIO())
        self.table = self.tui.start()
        self.root, _ = self.table.mount()

    def tearDown(self):
        self.tui.shutdown()

    def test_build_a_form(self):
        t = self.table
        form = t.create_element(None, "box")
        t.set_attribute(form, "flex-direction", "column")
        t.set_attribute(form, "padding", "1")

        label = t.create_element(None, "text")
        t.set_attribute(label, "bold", "true")
        t.insert_before(label, t.create_text_node("Name"), None)

        field = t.create_element(None, "input")
        submitted = []
        t.add_event_listener(field, "submit", submitted.append)

        fragment = t.create_fragment()
        t.insert_before(fragment, label, None)
        t.insert_before(fragment, field, None)
        t.insert_before(form, fragment, None)
        t.insert_before(form, t.create_comment("end"), None)
        t.insert_before(self.root, form, None)

        self.assertIsInstance(label, TextRenderable)
        self.assertIsInstance(field, InputRenderable)
        self.assertEqual(form.get_children(), [label, field])
        self.assertIs(t.next_sibling(label), field)
        self.assertEqual(label.content, "Name")
        self.assertEqual(t.get_attribute(label, "bold"), "true")
        self.assertEqual(form.get_property("padding"), 1)

        field.set_property("value", "Ada")
        field.submit()
        self.assertEqual(submitted[0].detail, {"value": "Ada"})

        t.remove_child(self.root, form)
        self.assertTrue(field.destroyed)

    def test_framebuffer_handler_runs_after_mount(self):
        t = self.table
        fb = t.create_element(None, "framebuffer")
        seen = []
        t.set_property(fb, "__fb_handler", lambda node: seen.append(node.parent))
        t.insert_before(self.root, fb, None)
        self.assertEqual(seen, [])
        spin()
        self.assertIsInstance(fb, FrameBufferRenderable)
        self.assertEqual(seen, [self.root])

    def test_schedule_and_after_render(self):
        frames = self.tui.renderer.frames_rendered
        self.table.schedule_render(self.table.after_render)
        spin()
        self.assertEqual(self.tui.renderer.frames_rendered, frames + 1)

    def test_raw_content_through_the_table(self):
        host = self.table.create_element(None, "box")
        self.table.insert_before(self.root, host, None)
        self.table.set_raw_content(host, ("spinner", lambda renderer: TextRenderable(renderer, {"id": "spin"})))
        self.assertEqual([child.id for child in host.get_children()], ["spin"])


if __name__ == "__main__":
    unittest.main()
