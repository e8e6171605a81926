"""Signal variants: turn a present failure into a Propagate interruption.

Both variants accept the same inputs:

- ``None`` or ``Ok(value)``: nothing failed, the call returns normally
  (with the Ok value, if any).
- ``Err(error)`` or an ``Exception`` instance: the failure is raised as
  ``Propagate`` and unwinds to the nearest boundary.

Example:
    ```python
    from klaw_bail import Slot, catch_all_traced, throw_with_caller

    slot = Slot()
    with catch_all_traced(slot):
        config = throw_with_caller(load_config())  # Ok -> value, Err -> unwind
        throw_with_caller(validate(config))        # None -> continue
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from klaw_bail.errors import CallerWrappedError, is_wrapped
from klaw_bail.kinds import SignalKind
from klaw_bail.types import Err, Ok, Propagate

__all__ = ['signal_for', 'throw', 'throw_with_caller']


def _split(failure: Any) -> tuple[Any, Exception | None]:
    """Normalise a signal input into (value, failure)."""
    match failure:
        case None:
            return None, None
        case Ok(value=value):
            return value, None
        case Err(error=error) if isinstance(error, Exception):
            return None, error
        case Exception():
            return None, failure
        case Err(error=error):
            msg = f'Err must hold an exception to be signalled, got {type(error).__name__}'
            raise TypeError(msg)
        case _:
            msg = f'Expected an exception, Result or None, got {type(failure).__name__}'
            raise TypeError(msg)


def throw(failure: Any) -> Any:
    """Raise a present failure as-is, without provenance.

    Args:
        failure: None, a Result, or an exception instance.

    Returns:
        The Ok value, or None when nothing failed.

    Raises:
        Propagate: Carrying the unmodified failure.
        TypeError: If ``failure`` is not a recognised failure shape.
    """
    value, error = _split(failure)
    if error is not None:
        raise Propagate(error)
    return value


def throw_with_caller(failure: Any, *, stacklevel: int = 0) -> Any:
    """Raise a present failure wrapped with the call site that signalled it.

    Failures that already carry provenance are raised unchanged, so the
    recorded site is always the original one.

    Args:
        failure: None, a Result, or an exception instance.
        stacklevel: Extra frames to skip when resolving the call site.

    Returns:
        The Ok value, or None when nothing failed.

    Raises:
        Propagate: Carrying a CallerWrappedError (or the already-wrapped failure).
        TypeError: If ``failure`` is not a recognised failure shape.
    """
    value, error = _split(failure)
    if error is None:
        return value
    if is_wrapped(error):
        raise Propagate(error)
    raise Propagate(CallerWrappedError.wrap(error, stacklevel))


_SIGNALS: dict[SignalKind, Callable[..., Any]] = {
    SignalKind.PLAIN: throw,
    SignalKind.CALLER: throw_with_caller,
}


def signal_for(kind: SignalKind | str) -> Callable[..., Any]:
    """Return the signal function for ``kind``.

    Raises:
        ValueError: If ``kind`` is not a known signal variant.
    """
    return _SIGNALS[SignalKind(kind)]
