"""Structured logging for boundary decisions.

Uses structlog's ProcessorFormatter to unify structlog and stdlib logging
output. Loggers returned by ``get_logger`` are backed by stdlib loggers and
filtered by their level, so the package stays silent until the host
application (or ``configure_logging``) enables it.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
]


def _get_shared_processors() -> list[Any]:
    """Get processors shared between structlog and stdlib foreign logs."""
    import structlog

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _create_hook_processor(),
    ]


def _get_structlog_processors() -> list[Any]:
    """Get the full processor chain for package loggers."""
    import structlog

    return [
        structlog.stdlib.filter_by_level,
        *_get_shared_processors(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _get_renderer(json_output: bool = True) -> Any:
    """Get the appropriate renderer based on output format."""
    import structlog

    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
) -> None:
    """Route package and stdlib logs through a structlog ProcessorFormatter.

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        json_output: If True, emit JSON logs. If False, use console output.
    """
    import structlog

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_get_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _get_renderer(json_output),
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger backed by the stdlib logger ``name``.

    Args:
        name: Logger name. If None, the root logger is used.

    Returns:
        A structlog stdlib BoundLogger.
    """
    import structlog

    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_get_structlog_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


# --- Logging Hooks ---

_log_hooks: list[Callable[[dict[str, Any]], None]] = []


def add_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Register a hook to be called with a copy of each log entry.

    Args:
        hook: Callable that receives the log entry dict.
    """
    _log_hooks.append(hook)


def remove_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Remove a previously registered log hook."""
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    """Remove all registered log hooks."""
    _log_hooks.clear()


def _create_hook_processor() -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    """Create a processor that invokes log hooks."""

    def hook_processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for hook in _log_hooks:
            try:
                hook(event_dict.copy())
            except Exception:  # noqa: S112
                continue  # a failing hook must not break logging
        return event_dict

    return hook_processor
