# tuibridge/engine/emitter.py
from collections import defaultdict
from typing import Any, Callable, Dict, List


class EventEmitter:
    """
    Minimal publish/subscribe hub used by renderables and the renderer.

    Listeners are matched by equality on removal, so callers must hand the
    exact same callable to `off` that they gave to `on`.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def on(self, event: str, listener: Callable[..., Any]):
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Callable[..., Any]):
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str, *args: Any) -> bool:
        # Snapshot so handlers can (un)subscribe while we dispatch.
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            listener(*args)
        return bool(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
