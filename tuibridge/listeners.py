# tuibridge/listeners.py
"""
Event wiring layer.

The host delivers events through several unrelated mechanisms: dedicated
callback slots for paste, mouse and keyboard input, a few more slots for
widget-specific notifications, and a publish/subscribe emitter for the rest.
Each abstract event name resolves to exactly one of them, checked in a fixed
order, and every attach hands back a `Subscription` that knows how to undo
precisely what it did.
"""

import logging
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .engine import Renderable
from .events import KeyEvent, SyntheticEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SyntheticEvent], Any]


class Mechanism(Enum):
    PASTE = "paste"
    MOUSE = "mouse"
    KEYBOARD = "keyboard"
    PROPERTY = "property"
    EMITTER = "emitter"


PASTE_SLOT = "on_paste"

MOUSE_EVENT_SLOTS: Dict[str, str] = {
    "click": "on_mouse_down",
    "mousedown": "on_mouse_down",
    "mouseup": "on_mouse_up",
    "mousemove": "on_mouse_move",
    "mouseover": "on_mouse_over",
    "mouseout": "on_mouse_out",
    "scroll": "on_mouse_scroll",
    "mouse": "on_mouse",
    "mousedrag": "on_mouse_drag",
    "mousedragend": "on_mouse_drag_end",
    "mousedrop": "on_mouse_drop",
}

# The engine exposes a single keyboard callback per node, fired while focused.
KEYBOARD_EVENT_SLOTS: Dict[str, str] = {
    "keydown": "on_key_down",
    "keypress": "on_key_down",
    "keyup": "on_key_down",
}

PROPERTY_EVENT_SLOTS: Dict[str, str] = {
    "cursorchange": "on_cursor_change",
    "contentchange": "on_content_change",
    "highlight": "on_highlight",
    "sliderchange": "on_change",
}

EMITTER_EVENTS: Dict[str, str] = {
    "focus": "focused",
    "blur": "blurred",
    "input": "input",
    "change": "change",
    "submit": "enter",
    "resize": "resized",
    "select": "item_selected",
}

# Interactive events only reach focusable nodes.
_FOCUS_MECHANISMS = (Mechanism.PASTE, Mechanism.MOUSE, Mechanism.KEYBOARD)


def resolve(name: str) -> Optional[Tuple[Mechanism, str]]:
    """Map an event name to its delivery mechanism and host slot/event."""
    if name == "paste":
        return Mechanism.PASTE, PASTE_SLOT
    if name in MOUSE_EVENT_SLOTS:
        return Mechanism.MOUSE, MOUSE_EVENT_SLOTS[name]
    if name in KEYBOARD_EVENT_SLOTS:
        return Mechanism.KEYBOARD, KEYBOARD_EVENT_SLOTS[name]
    if name in PROPERTY_EVENT_SLOTS:
        return Mechanism.PROPERTY, PROPERTY_EVENT_SLOTS[name]
    if name in EMITTER_EVENTS:
        return Mechanism.EMITTER, EMITTER_EVENTS[name]
    return None


@dataclass
class Subscription:
    """Handle returned when a listener is attached; `cancel` detaches it."""
    name: str
    mechanism: Mechanism
    target: str
    _detach: Callable[[], None] = field(repr=False)
    active: bool = True

    def cancel(self):
        if self.active:
            self.active = False
            self._detach()


def _payload(data: Any) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    return {"value": data}


def _read(data: Any, key: str, default: Any = None) -> Any:
    if isinstance(data, dict):
        return data.get(key, default)
    return getattr(data, key, default)


class EventWiring:
    def __init__(self):
        self._subscriptions: "weakref.WeakKeyDictionary[Renderable, Dict[str, Subscription]]" = (
            weakref.WeakKeyDictionary()
        )

    def add_event_listener(
        self, node: Any, name: str, handler: EventHandler, passive: bool = False
    ) -> Optional[Subscription]:
        if not isinstance(node, Renderable):
            logger.debug("Ignoring %r listener on non-element %r", name, node)
            return None
        route = resolve(name)
        if route is None:
            logger.debug("No host mechanism delivers %r events", name)
            return None

        subscriptions = self._subscriptions.setdefault(node, {})
        previous = subscriptions.pop(name, None)
        if previous is not None:
            previous.cancel()

        mechanism, target = route
        if mechanism in _FOCUS_MECHANISMS:
            node.focusable = True

        subscription = self._attach(node, name, handler, mechanism, target)
        subscriptions[name] = subscription
        return subscription

    def remove_event_listener(self, node: Any, name: str, handler: Optional[EventHandler] = None) -> bool:
        subscriptions = self._subscriptions.get(node) if isinstance(node, Renderable) else None
        subscription = subscriptions.pop(name, None) if subscriptions else None
        if subscription is None:
            return False
        subscription.cancel()
        return True

    def subscriptions_for(self, node: Renderable) -> Dict[str, Subscription]:
        return dict(self._subscriptions.get(node, {}))

    def detach_all(self, node: Renderable):
        for subscription in self._subscriptions.pop(node, {}).values():
            subscription.cancel()

    # ----- mechanisms -----
    def _attach(
        self, node: Renderable, name: str, handler: EventHandler, mechanism: Mechanism, target: str
    ) -> Subscription:
        # Subscriptions live in a table keyed weakly by node, so nothing they
        # hold may keep the node alive.
        node_ref = weakref.ref(node)

        def fire(detail: Dict[str, Any]):
            current = node_ref()
            if current is not None:
                handler(SyntheticEvent(name, current, current, detail))

        if mechanism is Mechanism.EMITTER:
            def wrapper(*args):
                fire(_payload(args[0] if args else None))

            def unsubscribe():
                current = node_ref()
                if current is not None:
                    current.off(target, wrapper)

            node.on(target, wrapper)
            return Subscription(name, mechanism, target, unsubscribe)

        if mechanism is Mechanism.PASTE:
            def callback(data):
                fire({"text": _read(data, "text", "") or ""})
        elif mechanism is Mechanism.KEYBOARD:
            def callback(data):
                fire(KeyEvent.from_host(data).to_detail())
        else:
            def callback(data):
                fire(_payload(data))

        setattr(node, target, callback)

        def clear_slot():
            # Several names can share a slot; only clear it if it is still ours.
            current = node_ref()
            if current is not None and getattr(current, target, None) is callback:
                setattr(current, target, None)

        return Subscription(name, mechanism, target, clear_slot)
