"""Propagate exception: the interruption raised by a signal."""

from typing import Any


class Propagate(BaseException):  # noqa: N818
    """Interruption that unwinds the call stack carrying a failure to a boundary.

    Derives from BaseException so ``except Exception`` blocks between the
    signal and its boundary do not intercept it. The name intentionally
    doesn't end with "Error": it is control flow, not an error itself.
    """

    __slots__ = ('_value',)

    def __init__(self, value: Any) -> None:
        """Initialize Propagate with the payload to carry.

        Args:
            value: The failure (or, for hand-built interruptions, any payload).
        """
        self._value = value
        super().__init__(f'Propagate({value!r})')

    @property
    def value(self) -> Any:
        """The payload being propagated."""
        return self._value
