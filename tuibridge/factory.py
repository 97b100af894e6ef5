# tuibridge/factory.py
import logging
from typing import Any, Dict, Optional, Type

from .engine import (
    ASCIIFontRenderable,
    BoxRenderable,
    CliRenderer,
    CodeRenderable,
    DiffRenderable,
    FrameBufferRenderable,
    InputRenderable,
    LineNumberRenderable,
    MarkdownRenderable,
    Renderable,
    ScrollBoxRenderable,
    SelectRenderable,
    SliderRenderable,
    TabSelectRenderable,
    TextareaRenderable,
    TextRenderable,
)
from .nodes import Comment, Fragment, TextNode

logger = logging.getLogger(__name__)

# Tag -> host element class.
RENDERABLES: Dict[str, Type[Renderable]] = {
    "box": BoxRenderable,
    "text": TextRenderable,
    "input": InputRenderable,
    "scrollbox": ScrollBoxRenderable,
    "textarea": TextareaRenderable,
    "select": SelectRenderable,
    "code": CodeRenderable,
    "markdown": MarkdownRenderable,
    "diff": DiffRenderable,
    "asciifont": ASCIIFontRenderable,
    "tabselect": TabSelectRenderable,
    "linenumber": LineNumberRenderable,
    "slider": SliderRenderable,
    "framebuffer": FrameBufferRenderable,
}

# Tags whose constructors reject empty options.
CONSTRUCTION_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "slider": {"orientation": "horizontal"},
    "framebuffer": {"width": 1, "height": 1},
}

FALLBACK = BoxRenderable


def create_element(renderer: CliRenderer, namespace: Optional[str], tag: str) -> Renderable:
    """
    Build the host element for `tag`. Unknown tags and constructors that
    raise both fall back to a plain box so one bad tag cannot abort a mount.
    """
    cls = RENDERABLES.get(tag)
    if cls is not None:
        try:
            return cls(renderer, dict(CONSTRUCTION_DEFAULTS.get(tag, {})))
        except Exception:
            logger.warning("Constructing <%s> failed, using a box instead", tag, exc_info=True)
    else:
        logger.debug("Unknown tag <%s> (namespace %r), using a box", tag, namespace)
    return FALLBACK(renderer, {})


def create_text_node(content: Optional[str]) -> TextNode:
    return TextNode(content)


def create_fragment() -> Fragment:
    return Fragment()


def create_comment(data: str) -> Comment:
    return Comment(data)
