# tuibridge/errors.py


class TuiBridgeError(Exception):
    """Base class for every error raised by tuibridge."""


class RendererNotInitialized(TuiBridgeError):
    """Raised when an effect or lifecycle call runs before the renderer exists."""

    def __init__(self, message: str = "Renderer not initialized. Call TuiPlatform.start() first."):
        super().__init__(message)


class PlatformAlreadyActive(TuiBridgeError):
    """Only one platform may own a renderer per process."""


class EngineError(TuiBridgeError):
    """A fault reported by the host engine (bad construction options, double destroy)."""
