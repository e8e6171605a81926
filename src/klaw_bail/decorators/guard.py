"""@guard decorator: install a boundary around a whole function."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar, overload

import wrapt

from klaw_bail.boundary import Boundary, boundary_for
from klaw_bail.defaults import get_policy
from klaw_bail.kinds import BoundaryKind
from klaw_bail.slot import Slot
from klaw_bail.types import Err, Ok

__all__ = ['guard']

P = ParamSpec('P')
T = TypeVar('T')


def _boundary(kind: BoundaryKind | None, slot: Slot[Exception]) -> Boundary:
    if kind is None:
        return get_policy().catch(slot)
    return boundary_for(kind)(slot)


def _settle(returned: Any, slot: Slot[Exception]) -> Ok[Any] | Err[Exception]:
    error = slot.get()
    if error is not None:
        return Err(error)
    if isinstance(returned, Ok | Err):
        return returned
    return Ok(returned)


@overload
def guard(func: Callable[P, T], /) -> Callable[P, Ok[Any] | Err[Exception]]: ...


@overload
def guard(
    kind: BoundaryKind | str, /
) -> Callable[[Callable[P, T]], Callable[P, Ok[Any] | Err[Exception]]]: ...


@overload
def guard(
    func: None = None, /, *, kind: BoundaryKind | str | None = None
) -> Callable[[Callable[P, T]], Callable[P, Ok[Any] | Err[Exception]]]: ...


def guard(func: Any = None, /, *, kind: BoundaryKind | str | None = None) -> Any:
    """Decorator that runs the function inside a boundary and returns a Result.

    The function-level form of installing a boundary at the top of a
    function: any failure signalled below it (and absorbed by the chosen
    boundary variant) is returned as ``Err(failure)``. Otherwise the return
    value is wrapped in ``Ok``; a returned Result passes through unchanged.

    Without a kind, the current default boundary is looked up on every call.

    Can be used with or without arguments:
        @guard
        def load(): ...

        @guard('error')
        def strict(): ...

        @guard(kind=BoundaryKind.LAZY)
        async def fetch(): ...

    Example:
        ```python
        @guard
        def parse(raw: str) -> int:
            bail(validate(raw))
            return int(raw)

        parse('12')   # Ok(value=12)
        parse('x')    # Err(error=CallerWrappedError(...))
        ```
    """
    if isinstance(func, BoundaryKind | str):
        kind, func = func, None
    resolved = BoundaryKind(kind) if kind is not None else None

    @wrapt.decorator
    def sync_wrapper(
        wrapped: Callable[..., Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ok[Any] | Err[Exception]:
        slot: Slot[Exception] = Slot()
        returned = None
        with _boundary(resolved, slot):
            returned = wrapped(*args, **kwargs)
        return _settle(returned, slot)

    @wrapt.decorator
    async def async_wrapper(
        wrapped: Callable[..., Awaitable[Any]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ok[Any] | Err[Exception]:
        slot: Slot[Exception] = Slot()
        returned = None
        async with _boundary(resolved, slot):
            returned = await wrapped(*args, **kwargs)
        return _settle(returned, slot)

    def decorate(target: Callable[..., Any]) -> Any:
        if inspect.iscoroutinefunction(target):
            return async_wrapper(target)
        return sync_wrapper(target)

    if func is not None:
        return decorate(func)
    return decorate
