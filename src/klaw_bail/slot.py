"""Single-assignment output slot written by boundaries.

The slot is owned by the caller that installs a boundary. It is written at
most once, and only when the boundary absorbs a failure. aiologic provides a
lock that is safe from threads and event loops alike.
"""

from __future__ import annotations

import aiologic

__all__ = ['Slot']


class Slot[E]:
    """A cell that receives at most one absorbed failure.

    Examples:
        >>> slot: Slot[Exception] = Slot()
        >>> slot.get() is None
        True
        >>> slot.set(ValueError('x'))
        True
        >>> slot.set(ValueError('y'))  # already filled, value unchanged
        False
        >>> slot.take()
        ValueError('x')
        >>> slot.is_set()
        False
    """

    __slots__ = ('_is_set', '_lock', '_value')

    def __init__(self) -> None:
        self._lock = aiologic.Lock()
        self._value: E | None = None
        self._is_set = False

    def get(self) -> E | None:
        """Get the value if set, otherwise None."""
        return self._value if self._is_set else None

    @property
    def error(self) -> E | None:
        """The absorbed failure, or None."""
        return self.get()

    def set(self, value: E) -> bool:
        """Set the value if not already set.

        Returns:
            True if the value was stored, False if the slot was already filled.
        """
        if self._is_set:
            return False

        with self._lock:
            if self._is_set:
                return False
            self._value = value
            self._is_set = True
            return True

    def take(self) -> E | None:
        """Return the value and empty the slot so it can be reused."""
        with self._lock:
            value = self._value if self._is_set else None
            self._value = None
            self._is_set = False
            return value

    def is_set(self) -> bool:
        """Check if a failure has been stored."""
        return self._is_set

    def __repr__(self) -> str:
        if self._is_set:
            return f'Slot({self._value!r})'
        return 'Slot(<empty>)'
