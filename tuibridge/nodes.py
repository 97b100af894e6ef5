# tuibridge/nodes.py
"""
Bridge-owned node kinds that have no host element of their own.

Together with the engine's `Renderable` they form the closed set of things the
reconciler can hand to the tree mutation functions.
"""

from typing import List, Optional, Union

from .engine import Renderable


class TextNode:
    """
    A lightweight box around a string.

    Hosts consume raw strings, so the wrapper itself is never inserted; the
    executor remembers which node received the string so `set_text` can
    rewrite it later.
    """

    def __init__(self, content: Optional[str] = None):
        self.data = content if content is not None else ""

    def __repr__(self):
        return f"TextNode({self.data!r})"


class Comment:
    """An invisible marker that keeps sibling order for non-visual virtual nodes."""

    def __init__(self, data: str = ""):
        self.data = data

    def __repr__(self):
        return f"Comment({self.data!r})"


class Fragment:
    """
    A transient grouping of children. Never inserted into the host tree itself;
    its children are flattened into the real parent at insertion time.
    """

    def __init__(self):
        self.children: List["HostChild"] = []

    def add(self, child: "HostChild"):
        self.children.append(child)

    def insert_before(self, child: "HostChild", ref: Optional["HostChild"]):
        for index, existing in enumerate(self.children):
            if existing is ref:
                self.children.insert(index, child)
                return
        self.children.append(child)

    def remove(self, child: "HostChild"):
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                return
        raise ValueError(f"{child!r} is not in this fragment")

    def get_children(self) -> List["HostChild"]:
        return list(self.children)

    def __repr__(self):
        return f"Fragment(children={len(self.children)})"


HostChild = Union[Renderable, TextNode, Comment, Fragment]
HostParent = Union[Renderable, Fragment]
