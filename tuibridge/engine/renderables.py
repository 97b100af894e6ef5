# tuibridge/engine/renderables.py
"""
Headless host elements for the terminal scene graph.

A `Renderable` is the engine-owned node the bridge reconciles against. It keeps
its ordered children, a packed text-attribute word, a property bag and the
property-slot callbacks the engine invokes when input arrives. Nothing here
lays out or paints; that is the job of a real terminal backend.
"""

import itertools
from enum import IntFlag
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from ..errors import EngineError
from .emitter import EventEmitter

if TYPE_CHECKING:
    from .renderer import CliRenderer


class TextAttributes(IntFlag):
    NONE = 0
    BOLD = 1 << 0
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    INVERSE = 1 << 5
    HIDDEN = 1 << 6
    STRIKETHROUGH = 1 << 7


# Engine mouse gesture -> callback slot on the renderable.
MOUSE_SLOTS: Dict[str, str] = {
    "down": "on_mouse_down",
    "up": "on_mouse_up",
    "move": "on_mouse_move",
    "over": "on_mouse_over",
    "out": "on_mouse_out",
    "scroll": "on_mouse_scroll",
    "drag": "on_mouse_drag",
    "drag-end": "on_mouse_drag_end",
    "drop": "on_mouse_drop",
}

# Properties stored as real attributes instead of in the bag.
_FIELDS = frozenset({"id", "focusable", "visible", "attributes", "content"})

Callback = Optional[Callable[[Any], None]]


class Renderable(EventEmitter):
    """Base class for every element the engine can display."""

    kind = "renderable"
    default_focusable = False

    _ids = itertools.count(1)

    def __init__(self, renderer: Optional["CliRenderer"], options: Optional[Dict[str, Any]] = None):
        super().__init__()
        options = dict(options or {})
        self.renderer = renderer
        self.id: str = options.pop("id", None) or f"{self.kind}-{next(Renderable._ids)}"
        self.parent: Optional["Renderable"] = None
        self.focusable = bool(options.pop("focusable", self.default_focusable))
        self.focused = False
        self.visible = True
        self.attributes = int(TextAttributes.NONE)
        self.destroyed = False
        self._children: List["Renderable"] = []
        self._chunks: List[str] = []
        self._props: Dict[str, Any] = {}

        # Property-slot callbacks, invoked directly by the engine's input loop.
        self.on_mouse: Callback = None
        self.on_mouse_down: Callback = None
        self.on_mouse_up: Callback = None
        self.on_mouse_move: Callback = None
        self.on_mouse_over: Callback = None
        self.on_mouse_out: Callback = None
        self.on_mouse_scroll: Callback = None
        self.on_mouse_drag: Callback = None
        self.on_mouse_drag_end: Callback = None
        self.on_mouse_drop: Callback = None
        self.on_key_down: Callback = None
        self.on_paste: Callback = None
        self.on_cursor_change: Callback = None
        self.on_content_change: Callback = None
        self.on_highlight: Callback = None
        self.on_change: Callback = None

        for name, value in options.items():
            self.set_property(name, value)

        if renderer is not None:
            renderer._track(self)

    # ----- property bag -----
    @property
    def content(self) -> str:
        return "".join(self._chunks)

    @content.setter
    def content(self, value: Optional[str]):
        self._chunks = [str(value)] if value else []
        self._request_render()

    def get_property(self, name: str) -> Any:
        if name in _FIELDS:
            return getattr(self, name)
        return self._props.get(name)

    def set_property(self, name: str, value: Any):
        if name in _FIELDS:
            setattr(self, name, value)
        elif value is None:
            self._props.pop(name, None)
        else:
            self._props[name] = value
        self._request_render()

    def has_property(self, name: str) -> bool:
        return name in _FIELDS or name in self._props

    # ----- children -----
    def _index_of(self, node: "Renderable") -> int:
        for index, child in enumerate(self._children):
            if child is node:
                return index
        return -1

    def get_children(self) -> List["Renderable"]:
        return list(self._children)

    def add(self, child: Union["Renderable", str], index: Optional[int] = None):
        """Append `child` (or insert it at `index`). Strings become text chunks."""
        if isinstance(child, str):
            self._chunks.append(child)
            self._request_render()
            return
        if child is self:
            raise EngineError(f"Cannot add {self.id} to itself")
        if child.parent is not None:
            child.parent._detach(child)
        if index is None or index >= len(self._children):
            self._children.append(child)
        else:
            self._children.insert(max(index, 0), child)
        child.parent = self
        self._request_render()

    def insert_before(self, child: Union["Renderable", str], anchor: Optional["Renderable"]):
        if isinstance(child, str) or anchor is None or anchor is child:
            self.add(child)
            return
        if child.parent is not None:
            child.parent._detach(child)
        index = self._index_of(anchor)
        self.add(child, index if index >= 0 else None)

    def _detach(self, child: "Renderable"):
        index = self._index_of(child)
        if index >= 0:
            del self._children[index]
            child.parent = None

    def remove(self, child: "Renderable"):
        """Remove a direct child by identity. Raises ValueError if it is not one."""
        index = self._index_of(child)
        if index < 0:
            raise ValueError(f"{getattr(child, 'id', child)!r} is not a child of {self.id!r}")
        del self._children[index]
        child.parent = None
        if child.focused:
            child.blur()
        self._request_render()

    def remove_by_id(self, child_id: str):
        for child in self._children:
            if child.id == child_id:
                self.remove(child)
                return
        raise KeyError(child_id)

    def clear(self):
        """Drop all text chunks."""
        self._chunks = []
        self._request_render()

    # ----- focus -----
    def focus(self):
        if self.destroyed or self.focused:
            return
        if self.renderer is not None:
            self.renderer._set_focused(self)
        self.focused = True
        self.emit("focused")

    def blur(self):
        if not self.focused:
            return
        self.focused = False
        if self.renderer is not None and self.renderer.focused_renderable is self:
            self.renderer.focused_renderable = None
        self.emit("blurred")

    # ----- lifecycle -----
    def destroy_self(self):
        """Release the engine resources held by this node. Must happen once."""
        if self.destroyed:
            raise EngineError(f"{self.id} was already destroyed")
        self.blur()
        self.destroyed = True
        self._listeners.clear()
        if self.renderer is not None:
            self.renderer._untrack(self)

    def destroy_recursively(self):
        for child in self.get_children():
            child.destroy_recursively()
        self.destroy_self()

    # ----- input entry points -----
    def process_mouse(self, gesture: str, data: Optional[Dict[str, Any]] = None) -> bool:
        data = dict(data or {})
        data.setdefault("type", gesture)
        handled = False
        slot = MOUSE_SLOTS.get(gesture)
        if slot is not None and getattr(self, slot) is not None:
            getattr(self, slot)(data)
            handled = True
        if self.on_mouse is not None:
            self.on_mouse(data)
            handled = True
        return handled

    def process_key(self, key: Dict[str, Any]) -> bool:
        if self.on_key_down is None:
            return False
        self.on_key_down(key)
        return True

    def process_paste(self, text: str) -> bool:
        if self.on_paste is None:
            return False
        self.on_paste({"text": text})
        return True

    def _request_render(self):
        if self.renderer is not None and not self.destroyed:
            self.renderer.mark_dirty()

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id!r}, children={len(self._children)})"


class RootRenderable(Renderable):
    kind = "root"


class BoxRenderable(Renderable):
    kind = "box"


class TextRenderable(Renderable):
    kind = "text"


class InputRenderable(Renderable):
    kind = "input"
    default_focusable = True

    def type_text(self, text: str):
        value = (self.get_property("value") or "") + text
        self.set_property("value", value)
        self.emit("input", value)
        self.emit("change", value)

    def submit(self):
        self.emit("enter", self.get_property("value") or "")


class TextareaRenderable(InputRenderable):
    kind = "textarea"

    def type_text(self, text: str):
        super().type_text(text)
        if self.on_content_change is not None:
            self.on_content_change({"value": self.get_property("value")})

    def move_cursor(self, line: int, column: int):
        if self.on_cursor_change is not None:
            self.on_cursor_change({"line": line, "column": column})


class SelectRenderable(Renderable):
    kind = "select"
    default_focusable = True

    def highlight(self, index: int):
        self.set_property("selected_index", index)
        if self.on_highlight is not None:
            self.on_highlight({"index": index})

    def select_current(self):
        self.emit("item_selected", self.get_property("selected_index") or 0)


class TabSelectRenderable(SelectRenderable):
    kind = "tabselect"


class ScrollBoxRenderable(Renderable):
    """A scrolling viewport whose children live in an inner `content` box."""

    kind = "scrollbox"

    def __init__(self, renderer, options=None):
        self.content_box: Optional[BoxRenderable] = None
        super().__init__(renderer, options)
        self.content_box = BoxRenderable(renderer, {"id": f"{self.id}-content"})
        self.scroll_top = 0
        self.scroll_left = 0

    @property
    def viewport_height(self) -> int:
        return int(self.get_property("height") or 10)

    def add(self, child, index=None):
        if self.content_box is None or isinstance(child, str):
            super().add(child, index)
        else:
            self.content_box.add(child, index)

    def insert_before(self, child, anchor):
        if self.content_box is None or isinstance(child, str):
            super().insert_before(child, anchor)
        else:
            self.content_box.insert_before(child, anchor)

    def remove(self, child):
        self.content_box.remove(child)

    def get_children(self):
        return self.content_box.get_children()

    def destroy_self(self):
        super().destroy_self()
        if self.content_box is not None and not self.content_box.destroyed:
            self.content_box.destroy_self()

    def scroll_to(self, x: int = 0, y: int = 0):
        self.scroll_left = max(int(x), 0)
        self.scroll_top = max(int(y), 0)
        self._request_render()

    def scroll_by(self, x: int = 0, y: int = 0):
        self.scroll_to(self.scroll_left + x, self.scroll_top + y)


class SliderRenderable(Renderable):
    kind = "slider"
    default_focusable = True

    def __init__(self, renderer, options=None):
        options = dict(options or {})
        if options.get("orientation") not in ("horizontal", "vertical"):
            raise EngineError("SliderRenderable requires an orientation")
        super().__init__(renderer, options)

    def set_value(self, value: float):
        self.set_property("value", value)
        if self.on_change is not None:
            self.on_change({"value": value})


class FrameBufferRenderable(Renderable):
    kind = "framebuffer"

    def __init__(self, renderer, options=None):
        options = dict(options or {})
        width, height = options.get("width", 0), options.get("height", 0)
        if int(width) <= 0 or int(height) <= 0:
            raise EngineError("FrameBufferRenderable requires a non-zero width and height")
        super().__init__(renderer, options)
        self.cells: Dict[tuple, str] = {}

    def set_cell(self, x: int, y: int, char: str):
        self.cells[(x, y)] = char
        self._request_render()


class CodeRenderable(TextRenderable):
    kind = "code"


class MarkdownRenderable(TextRenderable):
    kind = "markdown"


class DiffRenderable(TextRenderable):
    kind = "diff"


class ASCIIFontRenderable(Renderable):
    kind = "asciifont"


class LineNumberRenderable(Renderable):
    kind = "linenumber"
