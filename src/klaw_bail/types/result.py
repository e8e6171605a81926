"""Result type: Ok[T] | Err[E], the value form of a guarded call."""

from __future__ import annotations

from collections.abc import Callable
from typing import NoReturn, TypeIs

import msgspec

__all__ = ['Err', 'Ok', 'Result']


class Ok[T](msgspec.Struct, frozen=True, gc=False):
    """Success variant of Result containing a value of type T.

    Examples:
        >>> ok = Ok(42)
        >>> ok.unwrap()
        42
        >>> ok.map(lambda x: x * 2)
        Ok(value=84)
    """

    value: T

    def is_ok(self) -> TypeIs[Ok[T]]:
        """Return True since this is Ok."""
        return True

    def is_err(self) -> TypeIs[Err[Exception]]:
        """Return False since this is Ok."""
        return False

    def unwrap(self) -> T:
        """Return the contained Ok value."""
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        """Return the contained Ok value, ignoring the default."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Raise since there is no error to return."""
        raise RuntimeError(f'Called unwrap_err on Ok: {self.value!r}')

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply a function to the contained value."""
        return Ok(f(self.value))

    def map_err[F: Exception](self, _f: Callable[[Exception], F]) -> Ok[T]:
        """Return self unchanged since this is Ok."""
        return self

    def and_then[U, E: Exception](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Apply a function that returns a Result to the contained value."""
        return f(self.value)

    def bail(self) -> T:
        """Return the contained value; there is nothing to signal."""
        return self.value


class Err[E: Exception](msgspec.Struct, frozen=True, gc=False):
    """Error variant of Result containing the failure.

    Examples:
        >>> err = Err(ValueError('boom'))
        >>> err.is_err()
        True
        >>> err.unwrap_or(0)
        0
    """

    error: E

    def is_ok(self) -> TypeIs[Ok[object]]:
        """Return False since this is Err."""
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        """Return True since this is Err."""
        return True

    def unwrap(self) -> NoReturn:
        """Raise since Err has no Ok value to unwrap.

        Raises:
            RuntimeError: Always, chained from the contained failure.
        """
        raise RuntimeError(f'Called unwrap on Err: {self.error!r}') from self.error

    def unwrap_or[T](self, default: T) -> T:
        """Return the default value since this is Err."""
        return default

    def unwrap_err(self) -> E:
        """Return the contained failure."""
        return self.error

    def map[T, U](self, _f: Callable[[T], U]) -> Err[E]:
        """Return self unchanged since this is Err."""
        return self

    def map_err[F: Exception](self, f: Callable[[E], F]) -> Err[F]:
        """Apply a function to the contained failure."""
        return Err(f(self.error))

    def and_then[T, U](self, _f: Callable[[T], Ok[U] | Err[E]]) -> Err[E]:
        """Return self unchanged since this is Err."""
        return self

    def bail(self) -> NoReturn:
        """Signal the failure through the current default signal.

        This is the equivalent of Rust's ? operator: the nearest enclosing
        boundary (or ``@guard``) receives the failure.

        Raises:
            Propagate: Always.
        """
        from klaw_bail.defaults import bail

        bail(self.error)
        raise AssertionError('unreachable: signal returned for a present failure')


type Result[T, E: Exception = Exception] = Ok[T] | Err[E]
