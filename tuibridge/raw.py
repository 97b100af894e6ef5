# tuibridge/raw.py
"""
Raw-content escape hatch.

Lets a virtual node embed an arbitrary host subtree built by a caller-supplied
factory. The factory is recreated on every reconciliation pass, so a record is
identified by its `name`: re-applying the same name keeps the installed
subtree, a new name tears the old subtree down and installs a fresh one.
"""

import logging
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .engine import CliRenderer, Renderable
from .mutations import TreeMutations

logger = logging.getLogger(__name__)

Factory = Callable[[CliRenderer], Renderable]


@dataclass(frozen=True)
class RawContent:
    name: str
    factory: Factory = field(compare=False, repr=False)


def parse_raw_content(content: Any) -> Optional[RawContent]:
    """Accept a RawContent or a (name, factory) pair; None for anything else."""
    if isinstance(content, RawContent):
        record = content
    elif isinstance(content, (tuple, list)) and len(content) == 2:
        record = RawContent(content[0], content[1])
    else:
        return None
    if not isinstance(record.name, str) or not callable(record.factory):
        return None
    return record


class RawContentInstaller:
    def __init__(self, renderer: CliRenderer, mutations: TreeMutations):
        self.renderer = renderer
        self.mutations = mutations
        self._installed: "weakref.WeakKeyDictionary[Renderable, str]" = weakref.WeakKeyDictionary()

    def installed_name(self, node: Renderable) -> Optional[str]:
        return self._installed.get(node)

    def set_raw_content(self, node: Renderable, content: Any):
        record = parse_raw_content(content)
        if record is None:
            logger.error("Raw content must be a (name, factory) pair with a callable factory, got: %r", content)
            return
        if self._installed.get(node) == record.name:
            return

        root = record.factory(self.renderer)
        if not isinstance(root, Renderable):
            logger.error("Raw content factory %r returned %r, not a renderable", record.name, root)
            return

        self._teardown(node)
        self.mutations.insert_before(node, root, None)
        self._installed[node] = record.name
        logger.debug("Installed raw content %r into %r", record.name, node)

    def clear_raw_content(self, node: Renderable):
        self._teardown(node)
        self._installed.pop(node, None)

    def _teardown(self, node: Renderable):
        for child in node.get_children():
            try:
                node.remove(child)
            except (ValueError, KeyError):
                logger.debug("Raw child %r already detached", child)
            if child.destroyed:
                continue
            try:
                child.destroy_recursively()
            except Exception:
                # One bad teardown must not block the rest.
                logger.debug("Destroying raw child %r failed", child, exc_info=True)
