class ScreenshotActionError(Exception):
    """Base class for every fatal error in a screenshot run."""


class ConfigurationError(ScreenshotActionError):
    """The screenshots mapping is empty or malformed."""


class ServerStartError(ScreenshotActionError):
    """The local file server could not bind or never became ready."""


class NavigationError(ScreenshotActionError):
    """A page failed to load, or its capture failed."""


class EncodeError(ScreenshotActionError):
    """A screenshot could not be encoded or written to disk."""
