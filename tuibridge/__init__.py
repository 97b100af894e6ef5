# tuibridge/__init__.py

"""
tuibridge: reconciles a virtual UI tree against a retained-mode terminal
scene graph.

A virtual-tree reconciler drives the bridge through the `Platform` dispatch
table produced by `TuiPlatform.start()`. The bridge turns those calls into
host element construction, tree mutation, typed property writes, event
subscriptions and scheduled frame flushes.
"""

# --- Platform & configuration ---
from .bridge import Platform, TuiPlatform, platform
from .config import Config, RendererConfig, get_config
from .errors import EngineError, PlatformAlreadyActive, RendererNotInitialized, TuiBridgeError

# --- Bridge components ---
from .attributes import get_attribute, remove_attribute, set_attribute, set_property
from .events import KeyEvent, SyntheticEvent
from .factory import create_comment, create_element, create_fragment, create_text_node
from .listeners import EventWiring, Mechanism, Subscription
from .mutations import TreeMutations
from .nodes import Comment, Fragment, TextNode
from .raw import RawContent, RawContentInstaller
from .scheduler import RenderScheduler

# --- Effects are used as a namespace: `effects.focus_next(tui)` ---
from . import effects

__all__ = [
    "Platform", "TuiPlatform", "platform",
    "Config", "RendererConfig", "get_config",
    "EngineError", "PlatformAlreadyActive", "RendererNotInitialized", "TuiBridgeError",
    "get_attribute", "remove_attribute", "set_attribute", "set_property",
    "KeyEvent", "SyntheticEvent",
    "create_comment", "create_element", "create_fragment", "create_text_node",
    "EventWiring", "Mechanism", "Subscription",
    "TreeMutations",
    "Comment", "Fragment", "TextNode",
    "RawContent", "RawContentInstaller",
    "RenderScheduler",
    "effects",
]
