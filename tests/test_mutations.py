# tests/test_mutations.py
import io
import unittest

from tuibridge.engine import BoxRenderable, CliRenderer, InputRenderable, ScrollBoxRenderable, TextRenderable
from tuibridge.mutations import TreeMutations
from tuibridge.nodes import Comment, Fragment, TextNode


class TestTreeMutations(unittest.TestCase):
    def setUp(self):
        self.renderer = CliRenderer({"use_alternate_screen": False, "width": 80, "height": 24}, output=io.StringIO())
        self.root = self.renderer.root
        self.tree = TreeMutations()

    def box(self, element_id=None):
        return BoxRenderable(self.renderer, {"id": element_id} if element_id else None)

    # ----- insertion -----
    def test_append_and_insert_before_reference(self):
        a, b = self.box("a"), self.box("b")
        self.tree.insert_before(self.root, a)
        self.tree.insert_before(self.root, b, a)
        self.assertEqual(self.root.get_children(), [b, a])
        self.assertIs(self.tree.parent_of(a), self.root)

    def test_fragment_children_are_flattened_in_order(self):
        a, b, c = self.box("a"), self.box("b"), self.box("c")
        fragment = Fragment()
        self.tree.insert_before(fragment, a)
        self.tree.insert_before(fragment, b)
        self.assertEqual(fragment.get_children(), [a, b])

        self.tree.insert_before(self.root, c)
        self.tree.insert_before(self.root, fragment, c)
        self.assertEqual([n.id for n in self.root.get_children()], ["a", "b", "c"])
        self.assertIs(self.tree.parent_of(a), self.root)

    def test_nested_fragments_flatten_recursively(self):
        a, b, c = self.box("a"), self.box("b"), self.box("c")
        inner, outer = Fragment(), Fragment()
        self.tree.insert_before(inner, b)
        self.tree.insert_before(inner, c)
        self.tree.insert_before(outer, a)
        self.tree.insert_before(outer, inner)
        self.tree.insert_before(self.root, outer)
        self.assertEqual([n.id for n in self.root.get_children()], ["a", "b", "c"])

    def test_fragment_as_reference_stands_for_its_first_child(self):
        a, b, c = self.box("a"), self.box("b"), self.box("c")
        fragment = Fragment()
        self.tree.insert_before(fragment, a)
        self.tree.insert_before(fragment, b)
        self.tree.insert_before(self.root, fragment)
        self.tree.insert_before(self.root, c, fragment)
        self.assertEqual([n.id for n in self.root.get_children()], ["c", "a", "b"])

    def test_text_node_hands_its_string_to_the_receiver(self):
        label = TextRenderable(self.renderer)
        text = TextNode("Hello")
        self.tree.insert_before(label, text)
        self.assertEqual(label.content, "Hello")
        self.assertEqual(label.get_children(), [])
        self.assertIs(self.tree.parent_of(text), label)

    def test_text_node_inside_fragment_reaches_the_final_receiver(self):
        label = TextRenderable(self.renderer)
        text = TextNode("Hi")
        fragment = Fragment()
        self.tree.insert_before(fragment, text)
        self.assertEqual(fragment.get_children(), [text])
        self.tree.insert_before(label, fragment)
        self.assertEqual(label.content, "Hi")
        self.assertIs(self.tree.parent_of(text), label)

    def test_comment_only_records_its_parent(self):
        comment = Comment("placeholder")
        self.tree.insert_before(self.root, comment)
        self.assertEqual(self.root.get_children(), [])
        self.assertIs(self.tree.parent_of(comment), self.root)
        self.assertIsNone(self.tree.next_sibling(comment))

    def test_unknown_node_kind_is_rejected(self):
        with self.assertRaises(TypeError):
            self.tree.insert_before(self.root, object())

    # ----- moves -----
    def test_move_before_reorders_without_destroying(self):
        a, b, c = self.box("a"), self.box("b"), self.box("c")
        for node in (a, b, c):
            self.tree.insert_before(self.root, node)
        self.tree.move_before(self.root, c, a)
        self.assertEqual([n.id for n in self.root.get_children()], ["c", "a", "b"])
        self.tree.move_before(self.root, a, None)
        self.assertEqual([n.id for n in self.root.get_children()], ["c", "b", "a"])
        self.assertFalse(any(n.destroyed for n in (a, b, c)))

    def test_move_of_detached_node_inserts_it(self):
        a, stray = self.box("a"), self.box("stray")
        self.tree.insert_before(self.root, a)
        self.tree.move_before(self.root, stray, a)
        self.assertEqual([n.id for n in self.root.get_children()], ["stray", "a"])

    def test_move_keeps_focus(self):
        a, b = InputRenderable(self.renderer), InputRenderable(self.renderer)
        self.tree.insert_before(self.root, a)
        self.tree.insert_before(self.root, b)
        a.focus()
        self.tree.move_before(self.root, a, None)
        self.assertEqual(self.root.get_children(), [b, a])
        self.assertTrue(a.focused)
        self.assertIs(self.renderer.focused_renderable, a)

    def test_move_before_itself_is_a_no_op(self):
        a, b = self.box("a"), self.box("b")
        self.tree.insert_before(self.root, a)
        self.tree.insert_before(self.root, b)
        self.tree.move_before(self.root, a, a)
        self.assertEqual([n.id for n in self.root.get_children()], ["a", "b"])

    def test_move_fragment_moves_its_children(self):
        a, b, c = self.box("a"), self.box("b"), self.box("c")
        fragment = Fragment()
        self.tree.insert_before(fragment, a)
        self.tree.insert_before(fragment, b)
        self.tree.insert_before(self.root, fragment)
        self.tree.insert_before(self.root, c)
        self.tree.move_before(self.root, fragment, None)
        self.assertEqual([n.id for n in self.root.get_children()], ["c", "a", "b"])

    def test_move_fragment_skips_children_removed_since_flattening(self):
        a, b = self.box("a"), self.box("b")
        fragment = Fragment()
        self.tree.insert_before(fragment, a)
        self.tree.insert_before(fragment, b)
        self.tree.insert_before(self.root, fragment)
        self.tree.remove_child(self.root, a)

        self.tree.move_before(self.root, fragment, None)
        self.assertEqual(self.root.get_children(), [b])
        self.assertTrue(a.destroyed)
        self.renderer.destroy()
        self.assertTrue(b.destroyed)

    def test_remove_through_flattened_fragment_detaches_from_host(self):
        a, b = self.box("a"), self.box("b")
        fragment = Fragment()
        self.tree.insert_before(fragment, a)
        self.tree.insert_before(fragment, b)
        self.tree.insert_before(self.root, fragment)

        self.tree.remove_child(fragment, a)
        self.assertEqual(self.root.get_children(), [b])
        self.assertEqual(fragment.get_children(), [b])
        self.assertTrue(a.destroyed)
        self.tree.remove_child(fragment, a)
        self.tree.remove_child(self.root, a)
        self.renderer.destroy()

    def test_remove_from_unflattened_fragment(self):
        a = self.box("a")
        fragment = Fragment()
        self.tree.insert_before(fragment, a)
        self.tree.remove_child(fragment, a)
        self.assertEqual(fragment.get_children(), [])
        self.assertTrue(a.destroyed)
        self.assertIsNone(self.tree.parent_of(a))

    def test_remove_from_wrong_parent_leaves_node_alone(self):
        group, a = self.box("group"), self.box("a")
        self.tree.insert_before(self.root, group)
        self.tree.insert_before(group, a)
        self.tree.remove_child(self.root, a)
        self.assertEqual(group.get_children(), [a])
        self.assertFalse(a.destroyed)

    def test_move_of_text_node_is_a_no_op(self):
        label = TextRenderable(self.renderer)
        text = TextNode("x")
        self.tree.insert_before(label, text)
        self.tree.move_before(label, text, None)
        self.assertEqual(label.content, "x")

    # ----- removal -----
    def test_remove_child_destroys_once_and_is_idempotent(self):
        a, b = self.box("a"), self.box("b")
        self.tree.insert_before(self.root, a)
        self.tree.insert_before(self.root, b)
        live = self.renderer.live_nodes

        self.tree.remove_child(self.root, a)
        self.assertEqual(self.root.get_children(), [b])
        self.assertTrue(a.destroyed)
        self.assertEqual(self.renderer.live_nodes, live - 1)

        self.tree.remove_child(self.root, a)
        self.assertEqual(self.root.get_children(), [b])
        self.assertEqual(self.renderer.live_nodes, live - 1)
        self.assertIsNone(self.tree.parent_of(a))

    def test_remove_child_tears_down_the_subtree(self):
        parent, child = self.box("parent"), self.box("child")
        self.tree.insert_before(self.root, parent)
        self.tree.insert_before(parent, child)
        self.tree.remove_child(self.root, parent)
        self.assertTrue(child.destroyed)

    def test_removing_inert_nodes_does_nothing(self):
        a = self.box("a")
        self.tree.insert_before(self.root, a)
        self.tree.remove_child(self.root, Comment("c"))
        self.tree.remove_child(self.root, TextNode("t"))
        self.tree.remove_child(self.root, Fragment())
        self.assertEqual(self.root.get_children(), [a])

    # ----- queries -----
    def test_next_sibling_follows_host_order(self):
        a, b = self.box("a"), self.box("b")
        self.tree.insert_before(self.root, a)
        self.tree.insert_before(self.root, b)
        self.assertIs(self.tree.next_sibling(a), b)
        self.assertIsNone(self.tree.next_sibling(b))
        self.assertIsNone(self.tree.next_sibling(self.box("unattached")))

    def test_next_sibling_is_the_insertion_reference(self):
        first, last = self.box("first"), self.box("last")
        self.tree.insert_before(self.root, first)
        self.tree.insert_before(self.root, last)
        for name, ref in (("x", last), ("y", first), ("z", last)):
            with self.subTest(node=name):
                node = self.box(name)
                self.tree.insert_before(self.root, node, ref)
                self.assertIs(self.tree.next_sibling(node), ref)

    def test_scrollbox_children_are_reported_from_its_content(self):
        scrollbox = ScrollBoxRenderable(self.renderer)
        a, b = self.box("a"), self.box("b")
        self.tree.insert_before(self.root, scrollbox)
        self.tree.insert_before(scrollbox, a)
        self.tree.insert_before(scrollbox, b)
        self.assertEqual(scrollbox.get_children(), [a, b])
        self.assertIs(self.tree.next_sibling(a), b)
        self.tree.remove_child(scrollbox, a)
        self.assertEqual(scrollbox.content_box.get_children(), [b])

    def test_replayed_operations_match_flattened_order(self):
        nodes = {name: self.box(name) for name in "abcde"}
        fragment = Fragment()
        self.tree.insert_before(fragment, nodes["b"])
        self.tree.insert_before(fragment, nodes["c"])
        self.tree.insert_before(self.root, nodes["a"])
        self.tree.insert_before(self.root, nodes["e"])
        self.tree.insert_before(self.root, fragment, nodes["e"])
        self.tree.insert_before(self.root, nodes["d"], nodes["e"])
        self.tree.move_before(self.root, nodes["a"], None)
        self.tree.remove_child(self.root, nodes["c"])
        self.assertEqual([n.id for n in self.root.get_children()], ["b", "d", "e", "a"])

    # ----- content -----
    def test_set_text_updates_the_receiver(self):
        label = TextRenderable(self.renderer)
        text = TextNode("Hello")
        self.tree.insert_before(label, text)
        self.tree.set_text(text, "Bye")
        self.assertEqual(text.data, "Bye")
        self.assertEqual(label.content, "Bye")

    def test_set_text_keeps_sibling_strings(self):
        label = TextRenderable(self.renderer)
        prefix, count = TextNode("Count: "), TextNode("1")
        self.tree.insert_before(label, prefix)
        self.tree.insert_before(label, count)
        self.assertEqual(label.content, "Count: 1")
        self.tree.set_text(count, "2")
        self.assertEqual(label.content, "Count: 2")

    def test_set_text_on_element_replaces_content(self):
        label = TextRenderable(self.renderer)
        self.tree.set_text(label, "content")
        self.assertEqual(label.content, "content")
        self.tree.set_text(label, None)
        self.assertEqual(label.content, "")

    def test_set_text_on_detached_text_node_only_updates_data(self):
        text = TextNode("a")
        self.tree.set_text(text, "b")
        self.assertEqual(text.data, "b")


if __name__ == "__main__":
    unittest.main()
