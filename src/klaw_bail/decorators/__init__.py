"""Decorators: @guard."""

from klaw_bail.decorators.guard import guard

__all__ = [
    'guard',
]
