# tuibridge/engine/__init__.py
"""
Headless terminal engine: the retained-mode scene graph the bridge drives.
"""

from .emitter import EventEmitter
from .renderables import (
    MOUSE_SLOTS,
    ASCIIFontRenderable,
    BoxRenderable,
    CodeRenderable,
    DiffRenderable,
    FrameBufferRenderable,
    InputRenderable,
    LineNumberRenderable,
    MarkdownRenderable,
    Renderable,
    RootRenderable,
    ScrollBoxRenderable,
    SelectRenderable,
    SliderRenderable,
    TabSelectRenderable,
    TextareaRenderable,
    TextAttributes,
    TextRenderable,
)
from .renderer import CliRenderer, Selection, create_renderer
