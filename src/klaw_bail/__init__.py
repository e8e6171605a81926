"""klaw-bail: early-return failure propagation for Python 3.13+.

Signal a failure anywhere down the call stack and absorb it at the nearest
boundary, instead of checking and returning it at every call site.

Flat imports (preferred):
    from klaw_bail import bail, catch, Slot, guard, configure
    from klaw_bail import throw, throw_with_caller
    from klaw_bail import catch_error, catch_all, catch_all_traced, catch_lazy

Submodule imports (for organization):
    from klaw_bail.errors import CallerWrappedError, InterruptionWrappedError
    from klaw_bail.boundary import ErrorOnly, CatchAll, CatchAllTraced, LazyOnly
    from klaw_bail.types import Ok, Err, Result
"""

# Boundaries
from klaw_bail.boundary import (
    Boundary,
    CatchAll,
    CatchAllTraced,
    ErrorOnly,
    LazyOnly,
    Payload,
    PayloadKind,
    boundary_for,
    catch_all,
    catch_all_traced,
    catch_error,
    catch_lazy,
    classify,
)

# Decorators
from klaw_bail.decorators import guard

# Defaults
from klaw_bail.defaults import (
    Policy,
    bail,
    catch,
    configure,
    get_policy,
    reset_policy,
    using,
)

# Error model
from klaw_bail.errors import (
    INTERRUPTED,
    CallerWrappedError,
    CallSite,
    InterruptionError,
    InterruptionMarker,
    InterruptionWrappedError,
    SlotFilledError,
    caller_site,
    causes,
    has_cause,
    is_wrapped,
    unwrap,
)
from klaw_bail.kinds import BoundaryKind, SignalKind

# Signals
from klaw_bail.signals import signal_for, throw, throw_with_caller
from klaw_bail.slot import Slot

# Types
from klaw_bail.types import Err, Ok, Propagate, Result

__all__ = [
    'INTERRUPTED',
    # Boundaries
    'Boundary',
    'BoundaryKind',
    # Error model
    'CallSite',
    'CallerWrappedError',
    'CatchAll',
    'CatchAllTraced',
    # Types
    'Err',
    'ErrorOnly',
    'InterruptionError',
    'InterruptionMarker',
    'InterruptionWrappedError',
    'LazyOnly',
    'Ok',
    'Payload',
    'PayloadKind',
    # Defaults
    'Policy',
    'Propagate',
    'Result',
    'SignalKind',
    'Slot',
    'SlotFilledError',
    'bail',
    'boundary_for',
    'caller_site',
    'catch',
    'catch_all',
    'catch_all_traced',
    'catch_error',
    'catch_lazy',
    'causes',
    'classify',
    'configure',
    'get_policy',
    # Decorators
    'guard',
    'has_cause',
    'is_wrapped',
    'reset_policy',
    # Signals
    'signal_for',
    'throw',
    'throw_with_caller',
    'unwrap',
    'using',
]
