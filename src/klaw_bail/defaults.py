"""Default signal/boundary policy: Policy, configure, and the unqualified bail/catch.

A codebase picks its house style once and every call site uses the plain
``bail`` / ``catch`` names:

    from klaw_bail import bail, catch, configure

    configure(signal='caller', boundary='trace')

    def load() -> Exception | None:
        slot = Slot()
        with catch(slot):
            bail(read_file())
        return slot.error

The process-wide policy is an immutable value swapped by ``configure()``.
Rebinding it while other threads are signalling is the caller's hazard; code
that needs a different policy for one task should use ``using()`` instead,
which is scoped to the current context.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from klaw_bail._logging import configure_logging, get_logger
from klaw_bail.boundary import Boundary, boundary_for
from klaw_bail.kinds import BoundaryKind, SignalKind
from klaw_bail.signals import signal_for
from klaw_bail.slot import Slot

__all__ = [
    'Policy',
    'bail',
    'catch',
    'configure',
    'get_policy',
    'reset_policy',
    'using',
]

logger = get_logger(__name__)

SIGNAL_ENV = 'KLAW_BAIL_SIGNAL'
BOUNDARY_ENV = 'KLAW_BAIL_BOUNDARY'


@dataclass(frozen=True)
class Policy:
    """Which signal and boundary variants the unqualified names use.

    Attributes:
        signal: Signal variant used by ``bail``.
        boundary: Boundary variant used by ``catch``.
    """

    signal: SignalKind = SignalKind.CALLER
    boundary: BoundaryKind = BoundaryKind.TRACE

    def bail(self, failure: Any) -> Any:
        """Signal ``failure`` with this policy's signal variant."""
        return signal_for(self.signal)(failure)

    def catch(self, slot: Slot[Exception] | None) -> Boundary:
        """Build this policy's boundary variant around ``slot``."""
        return boundary_for(self.boundary)(slot)


# Process-wide policy (set by configure())
_policy: Policy | None = None

_override: ContextVar[Policy | None] = ContextVar('klaw_bail_policy', default=None)


def _detect[K: (SignalKind, BoundaryKind)](env: str, enum: type[K], default: K) -> K:
    """Read a variant from the environment, falling back to ``default``."""
    raw = os.environ.get(env, '').strip().lower()
    if not raw:
        return default
    try:
        return enum(raw)
    except ValueError:
        logger.warning('policy.unknown_env_value', env=env, value=raw, default=str(default))
        return default


def _detect_policy() -> Policy:
    return Policy(
        signal=_detect(SIGNAL_ENV, SignalKind, SignalKind.CALLER),
        boundary=_detect(BOUNDARY_ENV, BoundaryKind, BoundaryKind.TRACE),
    )


def configure(
    signal: SignalKind | str | None = None,
    boundary: BoundaryKind | str | None = None,
    log_level: str | None = None,
) -> Policy:
    """Set the process-wide default policy.

    Args:
        signal: Signal variant for ``bail``. If None, the current choice is
            kept (read from KLAW_BAIL_SIGNAL when no policy is set yet).
        boundary: Boundary variant for ``catch``. If None, the current choice
            is kept (read from KLAW_BAIL_BOUNDARY when no policy is set yet).
        log_level: Logging level ("DEBUG", "INFO", etc.). None leaves logging alone.

    Returns:
        The Policy that was set.

    Raises:
        ValueError: If a variant name is unknown.

    Example:
        ```python
        from klaw_bail import configure

        configure(signal='plain', boundary='error')
        configure(log_level='DEBUG')  # boundary decisions are logged at debug
        ```
    """
    global _policy  # noqa: PLW0603

    policy = _policy if _policy is not None else _detect_policy()
    if signal is not None:
        policy = replace(policy, signal=SignalKind(signal.lower()))
    if boundary is not None:
        policy = replace(policy, boundary=BoundaryKind(boundary.lower()))

    if log_level is not None:
        configure_logging(log_level)

    _policy = policy
    logger.info('policy.configured', signal=str(policy.signal), boundary=str(policy.boundary))
    return policy


def get_policy() -> Policy:
    """Get the policy in effect for the current context.

    A ``using()`` override wins; otherwise the process-wide policy, which is
    built from the environment on first use if ``configure()`` was never called.
    """
    global _policy  # noqa: PLW0603

    override = _override.get()
    if override is not None:
        return override
    if _policy is None:
        _policy = _detect_policy()
    return _policy


def reset_policy() -> None:
    """Forget the process-wide policy; the next lookup re-reads the environment."""
    global _policy  # noqa: PLW0603

    _policy = None


@contextmanager
def using(policy: Policy) -> Iterator[Policy]:
    """Override the policy for the current thread or task only.

    Example:
        ```python
        with using(Policy(boundary=BoundaryKind.ERROR)):
            run_job()  # catch() inside builds ErrorOnly boundaries
        ```
    """
    token = _override.set(policy)
    try:
        yield policy
    finally:
        _override.reset(token)


def bail(failure: Any) -> Any:
    """Signal ``failure`` with the current default signal variant.

    Returns:
        The Ok value, or None when nothing failed.
    """
    return get_policy().bail(failure)


def catch(slot: Slot[Exception] | None) -> Boundary:
    """Build the current default boundary variant around ``slot``."""
    return get_policy().catch(slot)
