"""Core types: Result, Ok, Err and the Propagate interruption."""

from klaw_bail.types.propagate import Propagate
from klaw_bail.types.result import Err, Ok, Result

__all__ = [
    'Err',
    'Ok',
    'Propagate',
    'Result',
]
