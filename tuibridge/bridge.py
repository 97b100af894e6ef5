# tuibridge/bridge.py
"""
The platform object the reconciler drives.

`TuiPlatform` owns the one renderer a process may have and wires every
bridge component to it. `start()` produces the `Platform` dispatch table, the
fixed set of functions a virtual-tree reconciler calls to realise its diff.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TextIO, Tuple

from . import attributes, factory
from .config import RendererConfig
from .engine import CliRenderer, Renderable, create_renderer
from .errors import PlatformAlreadyActive, RendererNotInitialized
from .listeners import EventWiring
from .mutations import TreeMutations
from .raw import RawContentInstaller
from .scheduler import RenderScheduler, ensure_event_loop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Platform:
    renderer: CliRenderer
    mount: Callable[..., Tuple[Renderable, None]]
    create_element: Callable[[Optional[str], str], Renderable]
    create_text_node: Callable[[Optional[str]], Any]
    create_fragment: Callable[[], Any]
    create_comment: Callable[[str], Any]
    insert_before: Callable[[Any, Any, Any], None]
    move_before: Callable[[Any, Any, Any], None]
    remove_child: Callable[[Any, Any], None]
    next_sibling: Callable[[Any], Any]
    get_attribute: Callable[[Renderable, str], Optional[str]]
    set_attribute: Callable[[Renderable, str, Any], None]
    remove_attribute: Callable[[Renderable, str], None]
    set_property: Callable[[Renderable, str, Any], None]
    set_text: Callable[[Any, Optional[str]], None]
    set_raw_content: Callable[[Renderable, Any], None]
    add_event_listener: Callable[..., Any]
    remove_event_listener: Callable[..., Any]
    schedule_render: Callable[[Callable[[], Any]], Callable[[], None]]
    after_render: Callable[[], None]


class TuiPlatform:
    """
    Single owner of the renderer handle.

    Only one platform may be active per process; a second `start()` raises
    `PlatformAlreadyActive` until the first one is shut down.
    """

    _active: Optional["TuiPlatform"] = None

    def __init__(self, config: Optional[RendererConfig] = None, output: Optional[TextIO] = None):
        self.config = config if config is not None else RendererConfig.from_config()
        self.output = output
        self.mutations = TreeMutations()
        self.events = EventWiring()
        self._scheduler: Optional[RenderScheduler] = None
        self.raw: Optional[RawContentInstaller] = None
        self.table: Optional[Platform] = None
        self._renderer: Optional[CliRenderer] = None
        self._looping = False

    @classmethod
    def active(cls) -> Optional["TuiPlatform"]:
        return cls._active

    @property
    def renderer(self) -> CliRenderer:
        if self._renderer is None:
            raise RendererNotInitialized()
        return self._renderer

    @property
    def scheduler(self) -> RenderScheduler:
        if self._scheduler is None:
            raise RendererNotInitialized()
        return self._scheduler

    @property
    def started(self) -> bool:
        return self._renderer is not None

    def start(self, callback: Optional[Callable[[Platform], Any]] = None) -> Platform:
        """Create the renderer, build the dispatch table and hand it to `callback`."""
        if TuiPlatform._active is not None and TuiPlatform._active is not self:
            raise PlatformAlreadyActive("Another TuiPlatform already owns the renderer. Call shutdown() on it first.")
        if self.table is not None:
            return self.table

        TuiPlatform._active = self
        renderer = create_renderer(self.config.to_engine_options(), output=self.output)
        renderer.on("destroy", self._on_renderer_destroyed)
        self._renderer = renderer
        self._scheduler = RenderScheduler(renderer)
        self.raw = RawContentInstaller(renderer, self.mutations)
        self.table = self._build_table(renderer)
        logger.info("Platform ready (%sx%s)", renderer.width, renderer.height)

        if callback is not None:
            callback(self.table)
        return self.table

    def _build_table(self, renderer: CliRenderer) -> Platform:
        scheduler = self.scheduler
        return Platform(
            renderer=renderer,
            mount=self.mount,
            create_element=lambda namespace, tag: factory.create_element(renderer, namespace, tag),
            create_text_node=factory.create_text_node,
            create_fragment=factory.create_fragment,
            create_comment=factory.create_comment,
            insert_before=self.mutations.insert_before,
            move_before=self.mutations.move_before,
            remove_child=self.mutations.remove_child,
            next_sibling=self.mutations.next_sibling,
            get_attribute=attributes.get_attribute,
            set_attribute=attributes.set_attribute,
            remove_attribute=attributes.remove_attribute,
            set_property=lambda node, name, value: attributes.set_property(node, name, value, defer=scheduler.defer),
            set_text=self.mutations.set_text,
            set_raw_content=self.raw.set_raw_content,
            add_event_listener=self.events.add_event_listener,
            remove_event_listener=self.events.remove_event_listener,
            schedule_render=scheduler.schedule_render,
            after_render=scheduler.after_render,
        )

    def mount(self, renderer: Optional[CliRenderer] = None) -> Tuple[Renderable, None]:
        """Start the render loop and return the root. A fresh terminal has nothing to adopt."""
        renderer = renderer if renderer is not None else self.renderer
        renderer.start()
        return renderer.root, None

    def exec(self) -> int:
        """Run the Qt event loop until the renderer is destroyed."""
        app = ensure_event_loop()
        self.renderer.start()
        self._looping = True
        try:
            return app.exec()
        finally:
            self._looping = False

    def _on_renderer_destroyed(self):
        if self._scheduler is not None:
            self._scheduler.cancel_all()
        if self._looping:
            ensure_event_loop().quit()

    def shutdown(self):
        """Destroy the renderer (if still alive) and release the process-wide slot."""
        if self._renderer is not None:
            self._renderer.destroy()
        if TuiPlatform._active is self:
            TuiPlatform._active = None


def platform(config: Optional[RendererConfig], callback: Callable[[Platform], Any], output: Optional[TextIO] = None) -> TuiPlatform:
    """Create a platform, start it and invoke `callback` with its dispatch table."""
    tui = TuiPlatform(config, output=output)
    tui.start(callback)
    return tui
