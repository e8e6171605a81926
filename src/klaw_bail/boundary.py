"""Boundary variants: intercept interruptions and absorb them into a slot.

A boundary is a context manager installed around a protected scope. On a
normal exit it does nothing. When an exception unwinds through it, the
boundary classifies the payload and either absorbs it (writes the failure into
its ``Slot`` and stops the unwind) or re-raises it untouched so an enclosing
boundary can decide.

    slot = Slot()
    with catch_error(slot):
        throw(step_one())
        throw(step_two())
    if slot.error is not None:
        ...

Variants:

| class            | absorbs                                  | re-raises          |
|------------------|------------------------------------------|--------------------|
| ErrorOnly        | signalled failures                       | anything else      |
| CatchAll         | everything, faults as InterruptionError  | never              |
| CatchAllTraced   | everything, faults with a traceback      | never              |
| LazyOnly         | failures carrying provenance             | anything else      |

Exceptions outside the ``Exception`` hierarchy (KeyboardInterrupt,
SystemExit, GeneratorExit, CancelledError) always pass through, also when
they are part of an exception group. A group whose only leaf is a Propagate
(a signal raised inside an ``asyncio.TaskGroup`` child) is treated like that
Propagate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from types import TracebackType
from typing import Any, ClassVar, Self

import msgspec

from klaw_bail._logging import get_logger
from klaw_bail.errors import (
    CallerWrappedError,
    InterruptionError,
    InterruptionWrappedError,
    SlotFilledError,
)
from klaw_bail.kinds import BoundaryKind
from klaw_bail.slot import Slot
from klaw_bail.types import Propagate

__all__ = [
    'Boundary',
    'CatchAll',
    'CatchAllTraced',
    'ErrorOnly',
    'LazyOnly',
    'Payload',
    'PayloadKind',
    'boundary_for',
    'catch_all',
    'catch_all_traced',
    'catch_error',
    'catch_lazy',
    'classify',
]

logger = get_logger(__name__)


class PayloadKind(Enum):
    """Shape of whatever reached a boundary."""

    FAILURE = 'failure'
    CALLER_WRAPPED = 'caller_wrapped'
    INTERRUPTION_WRAPPED = 'interruption_wrapped'
    UNRECOGNIZED = 'unrecognized'


class Payload(msgspec.Struct, frozen=True):
    """A classified interruption.

    Attributes:
        kind: The payload shape.
        value: The carried failure, or the raw payload when unrecognized.
        raw: The exception that actually reached the boundary.
    """

    kind: PayloadKind
    value: Any
    raw: BaseException


def _leaves(exc: BaseException) -> list[BaseException]:
    """Flatten an exception group into its leaf exceptions."""
    if isinstance(exc, BaseExceptionGroup):
        return [leaf for inner in exc.exceptions for leaf in _leaves(inner)]
    return [exc]


def _absorbable(exc: BaseException) -> bool:
    return all(isinstance(leaf, Propagate | Exception) for leaf in _leaves(exc))


def classify(exc: BaseException) -> Payload:
    """Classify an exception reaching a boundary.

    Only ``Propagate`` carries failures. Any other exception, and a Propagate
    holding something that is not an exception, is UNRECOGNIZED.

    An exception group (as raised by ``asyncio.TaskGroup``) whose only leaf is
    a Propagate is classified by that leaf; ``raw`` stays the group. Any other
    group is UNRECOGNIZED as a whole.
    """
    if isinstance(exc, BaseExceptionGroup):
        leaves = _leaves(exc)
        if len(leaves) == 1 and isinstance(leaves[0], Propagate):
            return _classify_value(leaves[0].value, exc)
        return Payload(PayloadKind.UNRECOGNIZED, exc, exc)
    if not isinstance(exc, Propagate):
        return Payload(PayloadKind.UNRECOGNIZED, exc, exc)
    return _classify_value(exc.value, exc)


def _classify_value(value: Any, raw: BaseException) -> Payload:
    match value:
        case CallerWrappedError():
            kind = PayloadKind.CALLER_WRAPPED
        case InterruptionWrappedError():
            kind = PayloadKind.INTERRUPTION_WRAPPED
        case Exception():
            kind = PayloadKind.FAILURE
        case _:
            kind = PayloadKind.UNRECOGNIZED
    return Payload(kind, value, raw)


class Boundary(ABC):
    """Base class for boundary variants.

    Subclasses implement ``decide``. A boundary built with a ``None`` slot is
    transparent: every exception passes through it.
    """

    kind: ClassVar[BoundaryKind]

    __slots__ = ('_slot',)

    def __init__(self, slot: Slot[Exception] | None) -> None:
        self._slot = slot

    @property
    def slot(self) -> Slot[Exception] | None:
        return self._slot

    @abstractmethod
    def decide(self, payload: Payload) -> Exception | None:
        """Return the failure to absorb, or None to re-raise."""
        ...

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        return self._intercept(exc_value)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        return self._intercept(exc_value)

    def _intercept(self, exc: BaseException | None) -> bool:
        if exc is None or self._slot is None:
            return False
        if not _absorbable(exc):
            return False

        payload = classify(exc)
        failure = self.decide(payload)
        if failure is None:
            logger.debug(
                'boundary.reraised',
                boundary=str(self.kind),
                payload=payload.kind.value,
                exc_type=type(exc).__name__,
            )
            return False

        if not self._slot.set(failure):
            raise SlotFilledError(self._slot.get(), failure) from exc
        caller = failure.caller if isinstance(failure, CallerWrappedError) else None
        logger.debug(
            'boundary.absorbed',
            boundary=str(self.kind),
            payload=payload.kind.value,
            error_type=type(failure).__name__,
            caller=msgspec.structs.asdict(caller) if caller is not None else None,
        )
        return True

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._slot!r})'


class ErrorOnly(Boundary):
    """Absorb signalled failures; re-raise runtime faults and foreign payloads."""

    kind = BoundaryKind.ERROR
    __slots__ = ()

    def decide(self, payload: Payload) -> Exception | None:
        match payload.kind:
            case PayloadKind.FAILURE | PayloadKind.CALLER_WRAPPED | PayloadKind.INTERRUPTION_WRAPPED:
                return payload.value
            case PayloadKind.UNRECOGNIZED:
                return None


class CatchAll(Boundary):
    """Absorb everything; unrecognized payloads become an InterruptionError."""

    kind = BoundaryKind.ALL
    __slots__ = ()

    def decide(self, payload: Payload) -> Exception | None:
        match payload.kind:
            case PayloadKind.FAILURE | PayloadKind.CALLER_WRAPPED | PayloadKind.INTERRUPTION_WRAPPED:
                return payload.value
            case PayloadKind.UNRECOGNIZED:
                return InterruptionError(payload.value)


class CatchAllTraced(Boundary):
    """Absorb everything; unrecognized payloads are wrapped with a traceback snapshot."""

    kind = BoundaryKind.TRACE
    __slots__ = ()

    def decide(self, payload: Payload) -> Exception | None:
        match payload.kind:
            case PayloadKind.FAILURE | PayloadKind.CALLER_WRAPPED | PayloadKind.INTERRUPTION_WRAPPED:
                return payload.value
            case PayloadKind.UNRECOGNIZED:
                return InterruptionWrappedError.capture(payload.value, origin=payload.raw)


class LazyOnly(Boundary):
    """Absorb only failures that already carry provenance.

    Installing this boundary asserts that everything below it signals with
    ``throw_with_caller`` or sits under a tracing boundary. Plain failures and
    runtime faults are re-raised.
    """

    kind = BoundaryKind.LAZY
    __slots__ = ()

    def decide(self, payload: Payload) -> Exception | None:
        match payload.kind:
            case PayloadKind.CALLER_WRAPPED | PayloadKind.INTERRUPTION_WRAPPED:
                return payload.value
            case PayloadKind.FAILURE | PayloadKind.UNRECOGNIZED:
                return None


_BOUNDARIES: dict[BoundaryKind, type[Boundary]] = {
    cls.kind: cls for cls in (ErrorOnly, CatchAll, CatchAllTraced, LazyOnly)
}


def boundary_for(kind: BoundaryKind | str) -> type[Boundary]:
    """Return the boundary class for ``kind``.

    Raises:
        ValueError: If ``kind`` is not a known boundary variant.
    """
    return _BOUNDARIES[BoundaryKind(kind)]


def catch_error(slot: Slot[Exception] | None) -> ErrorOnly:
    """Boundary absorbing signalled failures only."""
    return ErrorOnly(slot)


def catch_all(slot: Slot[Exception] | None) -> CatchAll:
    """Boundary absorbing everything, without traceback capture."""
    return CatchAll(slot)


def catch_all_traced(slot: Slot[Exception] | None) -> CatchAllTraced:
    """Boundary absorbing everything, wrapping faults with their traceback."""
    return CatchAllTraced(slot)


def catch_lazy(slot: Slot[Exception] | None) -> LazyOnly:
    """Boundary absorbing only caller-wrapped or interruption-wrapped failures."""
    return LazyOnly(slot)
