# tests/test_raw_content.py
import io
import unittest

from tuibridge.engine import BoxRenderable, CliRenderer, TextRenderable
from tuibridge.mutations import TreeMutations
from tuibridge.raw import RawContent, RawContentInstaller, parse_raw_content


def spinner(frame_id):
    def factory(renderer):
        return TextRenderable(renderer, {"id": frame_id, "content": "|"})
    return factory


class TestParseRawContent(unittest.TestCase):
    def test_accepts_records_and_pairs(self):
        factory = spinner("s")
        self.assertEqual(parse_raw_content(("spinner", factory)), RawContent("spinner", factory))
        self.assertEqual(parse_raw_content(["spinner", factory]).name, "spinner")
        record = RawContent("spinner", factory)
        self.assertIs(parse_raw_content(record), record)

    def test_rejects_malformed_values(self):
        self.assertIsNone(parse_raw_content("spinner"))
        self.assertIsNone(parse_raw_content(("spinner",)))
        self.assertIsNone(parse_raw_content(("spinner", "not callable")))
        self.assertIsNone(parse_raw_content((42, spinner("s"))))

    def test_identity_is_the_name(self):
        self.assertEqual(RawContent("a", spinner("x")), RawContent("a", spinner("y")))
        self.assertNotEqual(RawContent("a", spinner("x")), RawContent("b", spinner("x")))


class TestRawContentInstaller(unittest.TestCase):
    def setUp(self):
        self.renderer = CliRenderer({"use_alternate_screen": False, "width": 80, "height": 24}, output=io.StringIO())
        self.installer = RawContentInstaller(self.renderer, TreeMutations())
        self.host = BoxRenderable(self.renderer)
        self.renderer.root.add(self.host)

    def test_install_builds_the_subtree(self):
        self.installer.set_raw_content(self.host, ("spinner", spinner("spin-1")))
        children = self.host.get_children()
        self.assertEqual([child.id for child in children], ["spin-1"])
        self.assertEqual(self.installer.installed_name(self.host), "spinner")

    def test_same_name_keeps_the_installed_subtree(self):
        calls = []

        def factory(renderer):
            calls.append(renderer)
            return TextRenderable(renderer)

        self.installer.set_raw_content(self.host, ("spinner", factory))
        installed = self.host.get_children()[0]
        self.installer.set_raw_content(self.host, ("spinner", factory))
        self.installer.set_raw_content(self.host, RawContent("spinner", spinner("other")))
        self.assertEqual(len(calls), 1)
        self.assertEqual(self.host.get_children(), [installed])

    def test_new_name_replaces_and_destroys_the_old_subtree(self):
        live = self.renderer.live_nodes
        self.installer.set_raw_content(self.host, ("spinner", spinner("spin-1")))
        first = self.host.get_children()[0]
        self.assertEqual(self.renderer.live_nodes, live + 1)

        self.installer.set_raw_content(self.host, ("clock", spinner("clock-1")))
        self.assertTrue(first.destroyed)
        self.assertEqual([child.id for child in self.host.get_children()], ["clock-1"])
        self.assertEqual(self.renderer.live_nodes, live + 1)
        self.assertEqual(self.installer.installed_name(self.host), "clock")

    def test_existing_children_are_replaced(self):
        self.host.add(BoxRenderable(self.renderer, {"id": "static"}))
        self.installer.set_raw_content(self.host, ("spinner", spinner("spin-1")))
        self.assertEqual([child.id for child in self.host.get_children()], ["spin-1"])

    def test_failed_destroy_does_not_block_teardown(self):
        class Exploding(BoxRenderable):
            def destroy_self(self):
                raise RuntimeError("boom")

        survivor = BoxRenderable(self.renderer)
        self.host.add(Exploding(self.renderer))
        self.host.add(survivor)
        self.installer.set_raw_content(self.host, ("spinner", spinner("spin-1")))
        self.assertTrue(survivor.destroyed)
        self.assertEqual([child.id for child in self.host.get_children()], ["spin-1"])

    def test_malformed_content_is_logged_and_ignored(self):
        self.installer.set_raw_content(self.host, ("spinner", spinner("spin-1")))
        with self.assertLogs("tuibridge.raw", level="ERROR"):
            self.installer.set_raw_content(self.host, ("broken", "not callable"))
        self.assertEqual(self.installer.installed_name(self.host), "spinner")
        self.assertEqual(len(self.host.get_children()), 1)

    def test_factory_must_return_a_renderable(self):
        with self.assertLogs("tuibridge.raw", level="ERROR"):
            self.installer.set_raw_content(self.host, ("nothing", lambda renderer: None))
        self.assertEqual(self.host.get_children(), [])
        self.assertIsNone(self.installer.installed_name(self.host))

    def test_clear_raw_content(self):
        self.installer.set_raw_content(self.host, ("spinner", spinner("spin-1")))
        installed = self.host.get_children()[0]
        self.installer.clear_raw_content(self.host)
        self.assertTrue(installed.destroyed)
        self.assertEqual(self.host.get_children(), [])
        self.assertIsNone(self.installer.installed_name(self.host))


if __name__ == "__main__":
    unittest.main()
