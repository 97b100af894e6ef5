# tuibridge/config.py
from __future__ import annotations
import importlib
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import yaml

logger = logging.getLogger(__name__)


class Config:
    """
    Singleton config loader that supports:
      - an embedded config module (default name: _embedded_config, attribute: CONFIG)
      - a fallback YAML file (config.yaml)

    Usage:
        cfg = Config()  # prefers embedded if available, else loads config.yaml
        fps = cfg.get_nested("renderer.target_fps", 30)
        cfg.reload()    # re-read embedded/file (useful in dev)

    Parameters:
      config_file: path to YAML config (relative or absolute). Attempts sensible fallbacks.
      prefer_embedded: when True (default) try embedded module first, otherwise check file first.
      embedded_module_name: module name to import when looking for embedded config
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: str = "config.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_embedded_config",
    ):
        # initialize only once
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'embedded' or 'file' or None
        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None) -> None:
        """
        Reload the configuration. If prefer_embedded is provided, it overrides the instance preference
        just for this reload.
        """
        prefer = self.prefer_embedded if prefer_embedded is None else bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = {}
        logger.debug("Config loaded from %s with keys %s", self._source, list(self._config))

    def as_dict(self) -> Dict[str, Any]:
        """Return the loaded configuration as a dict (may be empty)."""
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        return self._config.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "renderer.use_mouse").
        Returns default if any step is missing.
        """
        cur = self._config
        if not path:
            return default
        for part in path.split(sep):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        return self._resolved_config_path

    # ----- internal helpers -----
    def _resolve_config_path(self, config_file: str) -> Optional[Path]:
        """
        Resolve the YAML path: absolute path first, then relative to the
        current working directory, then next to the installed package.
        """
        candidate = Path(config_file)
        if candidate.is_absolute():
            return candidate.resolve() if candidate.exists() else None

        for base in (Path.cwd(), Path(__file__).resolve().parent.parent):
            path = (base / config_file).resolve()
            if path.exists():
                return path
        return None

    def _try_load_embedded(self) -> bool:
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False
        except Exception:
            logger.warning("Embedded config module %s failed to import", self.embedded_module_name, exc_info=True)
            return False

        cfg = getattr(module, "CONFIG", None)
        if not isinstance(cfg, Mapping):
            return False
        self._config = dict(cfg)
        self._source = "embedded"
        return True

    def _try_load_file(self) -> bool:
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError):
            logger.warning("Could not read config file %s", self._resolved_config_path, exc_info=True)
            return False
        if data is None:
            data = {}
        # YAML parsed but not a dict -> store raw under a key
        self._config = data if isinstance(data, dict) else {"__root__": data}
        self._source = "file"
        return True


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)


_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0", "")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(value)
    return bool(value)


@dataclass(frozen=True)
class RendererConfig:
    """
    The per-app options record handed to the platform at startup.

    The bridge treats it as opaque apart from turning it into engine options.
    """

    exit_on_ctrl_c: bool = True
    use_alternate_screen: bool = True
    use_mouse: bool = True
    target_fps: int = 30
    max_fps: int = 60
    debounce_delay: int = 100
    auto_focus: bool = True
    enable_mouse_movement: bool = True
    use_console: bool = False
    open_console_on_error: bool = True
    gather_stats: bool = False
    max_stat_samples: int = 300
    use_thread: bool = True
    remote: bool = False
    background_color: Optional[str] = None
    use_kitty_keyboard: bool = False

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "RendererConfig":
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            name = str(key).replace("-", "_")
            if name not in known:
                logger.warning("Ignoring unknown renderer option %r", key)
                continue
            if value is None:
                # An empty YAML value keeps the default.
                continue
            default = known[name].default
            try:
                if isinstance(default, bool):
                    value = _parse_bool(value)
                elif isinstance(default, int):
                    value = int(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring renderer option %r: bad value %r", key, value)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_config(cls, config: Optional[Config] = None, section: str = "renderer") -> "RendererConfig":
        config = config if config is not None else get_config()
        return cls.from_mapping(config.get_nested(section, {}) or {})

    def to_engine_options(self) -> Dict[str, Any]:
        options = {f.name: getattr(self, f.name) for f in fields(self)}
        options.pop("use_kitty_keyboard")
        if not self.background_color:
            options.pop("background_color")
        if self.use_kitty_keyboard:
            options["kitty_keyboard"] = {"disambiguate": True, "alternate_keys": True}
        return options
