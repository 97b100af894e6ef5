# tuibridge/effects.py
"""
Side effects an application can ask for: lifecycle transitions, focus
traversal, terminal control, clipboard, selection, scrolling and timers.

Every effect takes the owning `TuiPlatform` first and reaches the renderer
through it, so calling one before the platform has started raises
`RendererNotInitialized`.
"""

import logging
import time
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from .engine import Renderable, ScrollBoxRenderable
from .events import KeyEvent

if TYPE_CHECKING:
    from .bridge import TuiPlatform

logger = logging.getLogger(__name__)

Dispatch = Callable[[Any], Any]


# --- Tree helpers ---

def collect_focusables(node: Renderable) -> List[Renderable]:
    """Depth-first list of focusable nodes under (and including) `node`."""
    result: List[Renderable] = []
    if node.focusable and not node.destroyed:
        result.append(node)
    for child in node.get_children():
        result.extend(collect_focusables(child))
    return result


def find_descendant_by_id(root: Renderable, element_id: str) -> Optional[Renderable]:
    if root.id == element_id:
        return root
    for child in root.get_children():
        found = find_descendant_by_id(child, element_id)
        if found is not None:
            return found
    return None


def _focused_index(focusables: List[Renderable]) -> int:
    for index, node in enumerate(focusables):
        if node.focused:
            return index
    return -1


# --- Focus ---

def focus_next(ctx: "TuiPlatform") -> Optional[Renderable]:
    # Recomputed on every call: the tree may have changed since the last one.
    focusables = collect_focusables(ctx.renderer.root)
    if not focusables:
        return None
    target = focusables[(_focused_index(focusables) + 1) % len(focusables)]
    target.focus()
    return target


def focus_previous(ctx: "TuiPlatform") -> Optional[Renderable]:
    focusables = collect_focusables(ctx.renderer.root)
    if not focusables:
        return None
    index = _focused_index(focusables)
    target = focusables[index - 1 if index > 0 else len(focusables) - 1]
    target.focus()
    return target


def focus(ctx: "TuiPlatform", element_id: str) -> Optional[Renderable]:
    for node in collect_focusables(ctx.renderer.root):
        if node.id == element_id:
            node.focus()
            return node
    logger.debug("No focusable element with id %r", element_id)
    return None


# --- Subscriptions ---

def subscribe_keyboard(ctx: "TuiPlatform", handler: Callable[[KeyEvent], Any], dispatch: Dispatch) -> Callable[[], None]:
    """Deliver every key press to `dispatch(handler(key_event))`. Returns an unsubscribe callable."""
    key_input = ctx.renderer.key_input

    def on_keypress(data):
        dispatch(handler(KeyEvent.from_host(data)))

    key_input.on("keypress", on_keypress)
    return lambda: key_input.off("keypress", on_keypress)


def subscribe_terminal_resize(ctx: "TuiPlatform", handler: Callable[[int, int], Any], dispatch: Dispatch) -> Callable[[], None]:
    renderer = ctx.renderer

    def on_resize(width, height):
        dispatch(handler(width, height))

    renderer.on("resize", on_resize)
    return lambda: renderer.off("resize", on_resize)


def get_terminal_dimensions(ctx: "TuiPlatform", handler: Callable[[int, int], Any], dispatch: Dispatch):
    renderer = ctx.renderer
    dispatch(handler(renderer.width, renderer.height))


# --- Terminal control ---

def set_terminal_title(ctx: "TuiPlatform", title: str):
    ctx.renderer.set_terminal_title(title)


def set_background_color(ctx: "TuiPlatform", color: str):
    ctx.renderer.set_background_color(color)


def set_cursor_position(ctx: "TuiPlatform", x: int, y: int, visible: bool = True):
    ctx.renderer.set_cursor_position(x, y, visible)


def set_cursor_style(ctx: "TuiPlatform", style: str, blinking: bool = False):
    ctx.renderer.set_cursor_style(style, blinking)


def set_cursor_color(ctx: "TuiPlatform", color: str):
    ctx.renderer.set_cursor_color(color)


def toggle_debug_overlay(ctx: "TuiPlatform"):
    ctx.renderer.toggle_debug_overlay()


# --- Clipboard & selection ---

def copy_to_clipboard(ctx: "TuiPlatform", text: str):
    ctx.renderer.copy_to_clipboard_osc52(text)


def clear_clipboard(ctx: "TuiPlatform"):
    ctx.renderer.clear_clipboard_osc52()


def get_selection(ctx: "TuiPlatform") -> str:
    selection = ctx.renderer.get_selection()
    return selection.get_selected_text() if selection is not None else ""


def clear_selection(ctx: "TuiPlatform"):
    ctx.renderer.clear_selection()


# --- Lifecycle ---

def pause(ctx: "TuiPlatform"):
    ctx.renderer.pause()


def suspend(ctx: "TuiPlatform"):
    ctx.renderer.suspend()


def resume(ctx: "TuiPlatform"):
    ctx.renderer.resume()


def stop(ctx: "TuiPlatform"):
    ctx.renderer.stop()


def destroy(ctx: "TuiPlatform"):
    ctx.renderer.destroy()


# --- Scrolling ---

def _scrollbox(ctx: "TuiPlatform", element_id: str) -> Optional[ScrollBoxRenderable]:
    node = find_descendant_by_id(ctx.renderer.root, element_id)
    return node if isinstance(node, ScrollBoxRenderable) else None


def scroll_by(ctx: "TuiPlatform", element_id: str, delta_x: int, delta_y: int):
    node = _scrollbox(ctx, element_id)
    if node is not None:
        node.scroll_by(delta_x, delta_y)


def scroll_to(ctx: "TuiPlatform", element_id: str, x: int, y: int):
    node = _scrollbox(ctx, element_id)
    if node is not None:
        node.scroll_to(x, y)


def _height(node: Renderable) -> int:
    return int(node.get_property("height") or 1)


def scroll_into_view(ctx: "TuiPlatform", container_id: str, child_id: str):
    """Scroll the container the least amount needed for the child to be visible."""
    container = _scrollbox(ctx, container_id)
    child = find_descendant_by_id(ctx.renderer.root, child_id)
    if container is None or child is None:
        return
    if container.content_box is None:
        # Content not materialised yet: nothing to measure, so nothing to do.
        logger.debug("scroll_into_view(%r): content not ready", container_id)
        return

    offset = 0
    for node in container.get_children():
        if node is child or node.id == child_id:
            break
        offset += _height(node)

    height = _height(child)
    top = container.scroll_top
    viewport = container.viewport_height
    if offset < top:
        container.scroll_to(0, offset)
    elif offset + height > top + viewport:
        container.scroll_to(0, offset + height - viewport)


# --- Timers ---

def set_timeout(ctx: "TuiPlatform", delay_ms: int, callback: Callable[[], Any]) -> Callable[[], None]:
    return ctx.scheduler.call_later(delay_ms, callback)


def get_current_time() -> Tuple[int, int, int]:
    now = time.localtime()
    return now.tm_hour, now.tm_min, now.tm_sec
