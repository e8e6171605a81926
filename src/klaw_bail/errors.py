"""Failure wrappers: call-site provenance and recovered interruptions.

Two wrapper shapes carry provenance for a propagating failure:

- ``CallerWrappedError`` records the line that first signalled the failure.
- ``InterruptionWrappedError`` records an unrelated exception intercepted by a
  boundary together with a traceback snapshot.

Both support cause extraction through ``unwrap()``, so callers can walk the
chain with ``causes()`` / ``has_cause()``.
"""

from __future__ import annotations

import inspect
import traceback
from collections.abc import Iterator
from typing import Any

import msgspec

__all__ = [
    'INTERRUPTED',
    'CallSite',
    'CallerWrappedError',
    'InterruptionError',
    'InterruptionMarker',
    'InterruptionWrappedError',
    'SlotFilledError',
    'caller_site',
    'causes',
    'has_cause',
    'is_wrapped',
    'unwrap',
]

_PACKAGE = __name__.partition('.')[0]


class CallSite(msgspec.Struct, frozen=True, gc=False):
    """Source location of a signal invocation."""

    file: str
    line: int
    function: str

    def __str__(self) -> str:
        return f'{self.file}:{self.line}: '


class InterruptionMarker(Exception):  # noqa: N818
    """Type of the shared sentinel returned as the cause of recovered interruptions."""


# Cause of every InterruptionWrappedError, whatever was recovered.
INTERRUPTED = InterruptionMarker('interruption')


def _is_internal(frame: Any) -> bool:
    module = frame.f_globals.get('__name__', '')
    return module == _PACKAGE or module.startswith(f'{_PACKAGE}.')


def caller_site(stacklevel: int = 0) -> CallSite | None:
    """Return the first call site outside of this package.

    Args:
        stacklevel: Extra frames to skip past the first external one, for
            helpers that want to attribute the failure to their own caller.

    Returns:
        The resolved CallSite, or None if the stack is exhausted.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None and _is_internal(frame):
            frame = frame.f_back
        for _ in range(stacklevel):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return None
        return CallSite(frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)
    finally:
        del frame


class CallerWrappedError(Exception):
    """A failure annotated with the call site that first signalled it.

    Attributes:
        error: The original failure.
        caller: Where it was signalled, or None if it could not be resolved.
    """

    def __init__(self, error: Exception, caller: CallSite | None = None) -> None:
        self.error = error
        self.caller = caller
        super().__init__(error)
        self.__cause__ = error

    @classmethod
    def wrap(cls, error: Exception, stacklevel: int = 0) -> CallerWrappedError:
        """Wrap ``error`` with the call site of the current signal."""
        return cls(error, caller_site(stacklevel))

    def unwrap(self) -> Exception:
        return self.error

    def __str__(self) -> str:
        prefix = str(self.caller) if self.caller is not None else ''
        return f'{prefix}{self.error}'

    def __repr__(self) -> str:
        return f'CallerWrappedError({self.error!r}, caller={self.caller!r})'


class InterruptionWrappedError(Exception):
    """An intercepted non-failure interruption with the traceback where it was caught.

    Attributes:
        recovered: The raw payload, usually the exception that unwound the stack.
        stack: Traceback text captured at interception time.
    """

    def __init__(self, recovered: Any, stack: str) -> None:
        self.recovered = recovered
        self.stack = stack
        super().__init__(recovered)

    @classmethod
    def capture(cls, recovered: Any, origin: BaseException | None = None) -> InterruptionWrappedError:
        """Wrap ``recovered`` with a traceback snapshot.

        The snapshot is the traceback of ``origin`` (by default ``recovered``
        itself when it is an exception). Without one that has unwound, the
        current call stack is formatted instead.
        """
        if origin is None and isinstance(recovered, BaseException):
            origin = recovered
        if origin is not None and origin.__traceback__ is not None:
            stack = ''.join(traceback.format_exception(origin))
        else:
            stack = ''.join(traceback.format_stack()[:-1])
        return cls(recovered, stack)

    def unwrap(self) -> InterruptionMarker:
        return INTERRUPTED

    def __str__(self) -> str:
        return f'[{INTERRUPTED} recovered]:\n{self.recovered!r}\n[stack]:\n{self.stack}'

    def __repr__(self) -> str:
        return f'InterruptionWrappedError({self.recovered!r})'


class InterruptionError(Exception):
    """Minimal failure for an intercepted interruption, without a traceback snapshot."""

    def __init__(self, recovered: Any) -> None:
        self.recovered = recovered
        super().__init__(f'{INTERRUPTED}: {recovered}')
        if isinstance(recovered, BaseException):
            self.__cause__ = recovered


class SlotFilledError(Exception):
    """A boundary tried to absorb a failure into a slot that already holds one."""

    def __init__(self, current: Any, incoming: Any) -> None:
        self.current = current
        self.incoming = incoming
        super().__init__(f'Slot already holds {current!r}; cannot absorb {incoming!r}')


def is_wrapped(err: object) -> bool:
    """Return True if ``err`` already carries provenance."""
    return isinstance(err, CallerWrappedError | InterruptionWrappedError)


def unwrap(err: BaseException) -> BaseException | None:
    """Return the direct cause of ``err``, or None at the end of the chain."""
    method = getattr(err, 'unwrap', None)
    if callable(method):
        return method()
    return err.__cause__


def causes(err: BaseException | None) -> Iterator[BaseException]:
    """Iterate ``err`` and every cause beneath it."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = unwrap(err)


def has_cause(
    err: BaseException,
    target: BaseException | type[BaseException] | tuple[type[BaseException], ...],
) -> bool:
    """Check whether ``target`` appears anywhere in the cause chain of ``err``.

    Instances are compared by identity; types and tuples of types by isinstance.
    """
    if isinstance(target, type | tuple):
        return any(isinstance(e, target) for e in causes(err))
    return any(e is target for e in causes(err))
