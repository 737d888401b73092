from __future__ import annotations

"""Exception types raised by world generation and map queries."""


class WorldError(ValueError):
    """Base class for invalid requests made against the world core."""


class ConfigurationError(WorldError):
    """Raised when generation parameters are rejected before any work starts."""


class OutOfBoundsError(WorldError, IndexError):
    """Raised when a coordinate lies outside the map after wrap normalization."""


class InvalidArgumentError(WorldError):
    """Raised for arguments outside an operation's domain, e.g. a negative radius."""


class InternalLimitExceededError(RuntimeError):
    """Raised when a search expands more nodes than the map could ever require."""


__all__ = [
    "ConfigurationError",
    "InternalLimitExceededError",
    "InvalidArgumentError",
    "OutOfBoundsError",
    "WorldError",
]
