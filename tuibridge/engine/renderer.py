# tuibridge/engine/renderer.py
import base64
import logging
import shutil
import sys
import time
from typing import Any, Dict, List, Optional, TextIO

from ..errors import EngineError
from .emitter import EventEmitter
from .renderables import Renderable, RootRenderable

logger = logging.getLogger(__name__)

# Lifecycle states
IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"
SUSPENDED = "suspended"
STOPPED = "stopped"
DESTROYED = "destroyed"

CURSOR_STYLES = ("block", "line", "underline")


class Selection:
    def __init__(self, text: str):
        self.text = text

    def get_selected_text(self) -> str:
        return self.text


class CliRenderer(EventEmitter):
    """
    Owns the root renderable and the terminal session.

    The renderer tracks lifecycle state, counts flushed frames and writes the
    terminal control sequences (title, clipboard, cursor) to `output`.
    Frames are only flushed while the renderer is running; a request made
    while paused is remembered and honoured on resume.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None, output: Optional[TextIO] = None):
        super().__init__()
        self.options: Dict[str, Any] = dict(options or {})
        self.output = output if output is not None else sys.stdout
        size = shutil.get_terminal_size((80, 24))
        self.width: int = int(self.options.get("width") or size.columns)
        self.height: int = int(self.options.get("height") or size.lines)
        self.state = IDLE
        self.frames_rendered = 0
        self.frame_times: List[float] = []
        self.dirty = False
        self.terminal_restored = True
        self.live_nodes = 0
        self.focused_renderable: Optional[Renderable] = None
        self.title = ""
        self.background_color: Optional[str] = self.options.get("background_color")
        self.cursor = {"x": 0, "y": 0, "visible": True, "style": "block", "blinking": False, "color": None}
        self.debug_overlay = False
        self.key_input = EventEmitter()
        self._selection: Optional[Selection] = None
        self.root = RootRenderable(self, {"id": "root"})

    # ----- node bookkeeping -----
    def _track(self, node: Renderable):
        self.live_nodes += 1

    def _untrack(self, node: Renderable):
        self.live_nodes -= 1
        if self.focused_renderable is node:
            self.focused_renderable = None

    def _set_focused(self, node: Renderable):
        previous = self.focused_renderable
        self.focused_renderable = node
        if previous is not None and previous is not node:
            previous.blur()

    # ----- lifecycle -----
    def _ensure_alive(self):
        if self.state == DESTROYED:
            raise EngineError("Renderer has been destroyed")

    def start(self):
        self._ensure_alive()
        if self.state == RUNNING:
            return
        if self.options.get("use_alternate_screen", True):
            self._write("\x1b[?1049h")
        self.terminal_restored = False
        self.state = RUNNING
        logger.debug("Renderer started (%sx%s)", self.width, self.height)
        if self.dirty:
            self.request_render()

    def pause(self):
        self._ensure_alive()
        if self.state == RUNNING:
            self.state = PAUSED

    def suspend(self):
        """Pause and hand the terminal back to the shell."""
        self._ensure_alive()
        self.pause()
        if not self.terminal_restored:
            if self.options.get("use_alternate_screen", True):
                self._write("\x1b[?1049l")
            self._write("\x1b[?25h")
            self.terminal_restored = True
        self.state = SUSPENDED

    def resume(self):
        self._ensure_alive()
        if self.state not in (PAUSED, SUSPENDED):
            return
        if self.terminal_restored and self.options.get("use_alternate_screen", True):
            self._write("\x1b[?1049h")
        self.terminal_restored = False
        self.state = RUNNING
        if self.dirty:
            self.request_render()

    def stop(self):
        self._ensure_alive()
        self.state = STOPPED

    def destroy(self):
        if self.state == DESTROYED:
            return
        if not self.terminal_restored:
            if self.options.get("use_alternate_screen", True):
                self._write("\x1b[?1049l")
            self._write("\x1b[?25h")
            self.terminal_restored = True
        self.root.destroy_recursively()
        self.state = DESTROYED
        self.emit("destroy")

    @property
    def is_running(self) -> bool:
        return self.state == RUNNING

    # ----- frames -----
    def mark_dirty(self):
        self.dirty = True

    def request_render(self):
        if self.state != RUNNING:
            self.dirty = True
            return
        started = time.perf_counter()
        self.frames_rendered += 1
        self.dirty = False
        if self.options.get("gather_stats"):
            self.frame_times.append(time.perf_counter() - started)
            limit = int(self.options.get("max_stat_samples") or 300)
            del self.frame_times[:-limit]
        self.emit("frame", self.frames_rendered)

    # ----- input -----
    def resize(self, width: int, height: int):
        self.width, self.height = int(width), int(height)
        self.emit("resize", self.width, self.height)

    def process_key(self, key: Dict[str, Any]):
        """Entry point for decoded key presses from the terminal."""
        self.key_input.emit("keypress", key)
        if self.options.get("exit_on_ctrl_c", True) and key.get("ctrl") and key.get("name") == "c":
            self.destroy()
            return
        if self.focused_renderable is not None:
            self.focused_renderable.process_key(key)

    # ----- terminal control -----
    def _write(self, sequence: str):
        try:
            self.output.write(sequence)
            self.output.flush()
        except (OSError, ValueError):
            logger.debug("Terminal output unavailable, dropped %r", sequence)

    def set_terminal_title(self, title: str):
        self.title = title
        self._write(f"\x1b]0;{title}\x07")

    def set_background_color(self, color: str):
        self.background_color = color
        self.mark_dirty()

    def set_cursor_position(self, x: int, y: int, visible: bool = True):
        self.cursor.update(x=int(x), y=int(y), visible=bool(visible))
        self._write(f"\x1b[{int(y) + 1};{int(x) + 1}H")
        self._write("\x1b[?25h" if visible else "\x1b[?25l")

    def set_cursor_style(self, style: str, blinking: bool = False):
        if style not in CURSOR_STYLES:
            raise EngineError(f"Unknown cursor style {style!r}")
        self.cursor.update(style=style, blinking=bool(blinking))

    def set_cursor_color(self, color: str):
        self.cursor["color"] = color

    def toggle_debug_overlay(self):
        self.debug_overlay = not self.debug_overlay
        self.mark_dirty()

    def copy_to_clipboard_osc52(self, text: str):
        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
        self._write(f"\x1b]52;c;{payload}\x07")

    def clear_clipboard_osc52(self):
        self._write("\x1b]52;c;\x07")

    # ----- selection -----
    def set_selection(self, text: str):
        self._selection = Selection(text)

    def get_selection(self) -> Optional[Selection]:
        return self._selection

    def clear_selection(self):
        self._selection = None


def create_renderer(options: Optional[Dict[str, Any]] = None, output: Optional[TextIO] = None) -> CliRenderer:
    return CliRenderer(options, output=output)
