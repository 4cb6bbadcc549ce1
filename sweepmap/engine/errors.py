"""Exception taxonomy shared by the engine, the HTTP client and the UI."""


class SweepmapError(Exception):
    """Base class for all sweepmap errors."""


class TransportError(SweepmapError):
    """Network, HTTP or payload failure talking to the robot."""


class ValidationError(SweepmapError):
    """Input rejected locally, before any request is sent."""


class GeometryUndefined(SweepmapError):
    """No view transform exists (empty map or degenerate view size)."""
