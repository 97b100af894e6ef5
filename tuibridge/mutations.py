# tuibridge/mutations.py
"""
Tree mutation executor.

Realises the reconciler's structural operations against the host scene graph.
Every operation accepts any of the four node kinds:

- **Renderable**: a real host element, inserted/moved/removed in the engine.
- **TextNode**: only its string reaches the host; the receiving node is remembered.
- **Comment**: invisible; only the back-reference is recorded.
- **Fragment**: never materialised; its children are flattened into the parent.

The executor keeps its own parent back-references (weakly, so dropped nodes do
not linger) instead of writing bookkeeping fields onto engine objects. A
fragment keeps listing its children after it has been flattened, so moves and
removals that go through a fragment are resolved against those back-references.
"""

import logging
import weakref
from typing import List, Optional

from .engine import Renderable
from .nodes import Comment, Fragment, HostChild, HostParent, TextNode

logger = logging.getLogger(__name__)


class TreeMutations:
    def __init__(self):
        self._parents: "weakref.WeakKeyDictionary[HostChild, HostParent]" = weakref.WeakKeyDictionary()
        # Receiver -> text wrappers whose strings it holds, in insertion order.
        self._texts: "weakref.WeakKeyDictionary[Renderable, List[TextNode]]" = weakref.WeakKeyDictionary()

    def parent_of(self, node: HostChild) -> Optional[HostParent]:
        return self._parents.get(node)

    def _attached(self, node: HostChild) -> bool:
        if isinstance(node, Renderable) and node.destroyed:
            return False
        return node in self._parents

    # ----- insertion -----
    def insert_before(self, parent: HostParent, node: HostChild, ref: Optional[HostChild] = None):
        match node:
            case Fragment():
                # Same logical position for each child keeps their order.
                for child in node.get_children():
                    self.insert_before(parent, child, ref)
            case Comment() | TextNode():
                self._parents[node] = parent
                if isinstance(parent, Fragment):
                    parent.insert_before(node, ref)
                elif isinstance(node, TextNode):
                    texts = self._texts.setdefault(parent, [])
                    if not any(text is node for text in texts):
                        texts.append(node)
                    parent.add(node.data)
            case Renderable():
                self._parents[node] = parent
                anchor = self._anchor(ref)
                if anchor is not None:
                    parent.insert_before(node, anchor)
                else:
                    parent.add(node)
            case _:
                raise TypeError(f"Cannot insert {type(node).__name__} into the host tree")

    def _anchor(self, ref: Optional[HostChild]) -> Optional[HostChild]:
        """A fragment used as a reference stands for its first child still in the tree."""
        while isinstance(ref, Fragment):
            live = [child for child in ref.get_children() if self._attached(child)]
            ref = live[0] if live else None
        return ref

    def move_before(self, parent: HostParent, node: HostChild, ref: Optional[HostChild] = None):
        match node:
            case TextNode():
                # Text content is not relocatable.
                return
            case Fragment():
                for child in node.get_children():
                    # Children removed since the fragment was flattened stay removed.
                    if self._attached(child):
                        self.move_before(parent, child, ref)
            case Comment():
                self._detach(parent, node)
                self.insert_before(parent, node, ref)
            case Renderable():
                if node is ref:
                    return
                # The engine re-parents on insert without blurring, so focus survives.
                self.insert_before(parent, node, ref)
            case _:
                raise TypeError(f"Cannot move {type(node).__name__}")

    def _detach(self, parent: HostParent, node: HostChild):
        try:
            parent.remove(node)
        except (ValueError, KeyError):
            logger.debug("%r was not attached to %r, nothing to detach", node, parent)

    # ----- removal -----
    def remove_child(self, parent: HostParent, child: HostChild):
        match child:
            case Fragment() | Comment() | TextNode():
                # Structurally inert in the host.
                return
            case Renderable():
                if isinstance(parent, Fragment):
                    self._remove_through_fragment(parent, child)
                    return
                recorded = self._parents.get(child)
                if recorded is not None and recorded is not parent:
                    logger.debug("%r lives under %r, not %r; leaving it alone", child, recorded, parent)
                    return
                try:
                    parent.remove(child)
                except (ValueError, KeyError):
                    logger.debug("%r already removed from %r", child, parent)
                    return
                self._release(child)
            case _:
                raise TypeError(f"Cannot remove {type(child).__name__}")

    def _remove_through_fragment(self, fragment: Fragment, child: Renderable):
        try:
            fragment.remove(child)
        except ValueError:
            logger.debug("%r is not listed in %r", child, fragment)
        host = self._parents.get(child)
        if host is None:
            return
        if host is fragment:
            # Never reached the host tree.
            self._release(child)
        else:
            self.remove_child(host, child)

    def _release(self, child: Renderable):
        self._parents.pop(child, None)
        if not child.destroyed:
            child.destroy_recursively()

    # ----- queries -----
    def next_sibling(self, node: HostChild) -> Optional[HostChild]:
        parent = self._parents.get(node)
        if parent is None:
            return None
        children = parent.get_children()
        for index, child in enumerate(children):
            if child is node:
                return children[index + 1] if index + 1 < len(children) else None
        return None

    # ----- content -----
    def set_text(self, node: HostChild, content: Optional[str]):
        match node:
            case TextNode():
                node.data = content or ""
                receiver = self._parents.get(node)
                if isinstance(receiver, Renderable):
                    # Rebuild from every wrapper so sibling strings survive.
                    receiver.clear()
                    for text in self._texts.get(receiver, ()):
                        receiver.add(text.data)
            case Renderable():
                node.content = content or ""
            case _:
                logger.debug("set_text ignored for %r", node)
