"""Names of the signal and boundary variants."""

from enum import StrEnum

__all__ = ['BoundaryKind', 'SignalKind']


class SignalKind(StrEnum):
    """How a signal raises a failure."""

    PLAIN = 'plain'
    CALLER = 'caller'


class BoundaryKind(StrEnum):
    """Which interruptions a boundary absorbs."""

    ERROR = 'error'
    ALL = 'all'
    TRACE = 'trace'
    LAZY = 'lazy'
