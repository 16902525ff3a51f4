"""Exceptions raised by the Cadence client core."""


class CadenceError(Exception):
    """Base class for all client core errors."""


class ValidationError(CadenceError, ValueError):
    """Missing or empty input, raised before any transport call."""


class TransportUnreachable(CadenceError):
    """The request/response transport could not reach the server."""


class StreamUpgradeFailed(CadenceError):
    """The streaming transport could not be opened."""


class NoDefaultServer(CadenceError):
    """No remembered server. Expected on first run."""


class UnknownEventName(CadenceError, KeyError):
    """A callback was registered for an event kind that does not exist."""


class BridgeError(CadenceError):
    """A bridge call could not be routed."""
