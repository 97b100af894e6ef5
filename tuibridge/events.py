# tuibridge/events.py

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class SyntheticEvent:
    """
    The uniform event object handed to framework listeners, whatever host
    mechanism delivered the underlying event.

    The flags are only recorded here; consumers decide what they mean.
    """
    type: str
    current_target: Any
    target: Any
    detail: Dict[str, Any] = field(default_factory=dict)
    bubbles: bool = True
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self):
        self.default_prevented = True

    def stop_propagation(self):
        self.propagation_stopped = True

    def stop_immediate_propagation(self):
        self.propagation_stopped = True


@dataclass
class KeyEvent:
    """A decoded key press, as delivered to keyboard subscriptions."""
    name: str
    ctrl: bool = False
    shift: bool = False
    meta: bool = False

    @classmethod
    def from_host(cls, data: Any) -> "KeyEvent":
        """Accepts the engine's key payload, either a dict or an object with attributes."""
        if data is None:
            data = {}
        get = data.get if isinstance(data, dict) else (lambda key: getattr(data, key, None))
        return cls(
            name=get("name") or get("key") or "",
            ctrl=bool(get("ctrl")),
            shift=bool(get("shift")),
            meta=bool(get("meta")),
        )

    def to_detail(self) -> Dict[str, Any]:
        return {"key": self.name, "ctrl": self.ctrl, "shift": self.shift, "meta": self.meta}
