"""Tests for the error model: CallSite, wrappers and cause extraction."""

import inspect
from pathlib import Path

import pytest
from hypothesis import given

from klaw_bail import (
    INTERRUPTED,
    CallerWrappedError,
    CallSite,
    InterruptionError,
    InterruptionWrappedError,
    caller_site,
    causes,
    has_cause,
    is_wrapped,
    unwrap,
)
from tests.strategies import failures, payloads


def _raised(exc: Exception) -> Exception:
    try:
        raise exc
    except Exception as e:  # noqa: BLE001
        return e


class TestCallSite:
    """Tests for the CallSite struct."""

    def test_str_is_provenance_prefix(self):
        """CallSite renders as 'file:line: '."""
        assert str(CallSite('pkg/mod.py', 12, 'load')) == 'pkg/mod.py:12: '

    def test_is_frozen(self):
        """CallSite instances are immutable."""
        site = CallSite('mod.py', 1, 'f')
        with pytest.raises(AttributeError):
            site.line = 2  # type: ignore[misc]

    def test_equality(self):
        assert CallSite('a.py', 1, 'f') == CallSite('a.py', 1, 'f')
        assert CallSite('a.py', 1, 'f') != CallSite('a.py', 2, 'f')


class TestCallerSite:
    """Tests for caller_site() frame resolution."""

    def test_resolves_to_calling_line(self):
        """The first frame outside the package is the one returned."""
        expected = inspect.currentframe().f_lineno + 1
        site = caller_site()

        assert site is not None
        assert Path(site.file).name == 'test_errors.py'
        assert site.line == expected
        assert site.function == 'test_resolves_to_calling_line'

    def test_stacklevel_skips_helpers(self):
        """stacklevel attributes the site to a helper's caller."""

        def helper():
            return caller_site(stacklevel=1)

        expected = inspect.currentframe().f_lineno + 1
        site = helper()

        assert site is not None
        assert site.line == expected
        assert site.function == 'test_stacklevel_skips_helpers'

    def test_exhausted_stack_returns_none(self):
        assert caller_site(stacklevel=10_000) is None


class TestCallerWrappedError:
    """Tests for CallerWrappedError."""

    def test_message_is_prefix_then_error(self):
        err = CallerWrappedError(ValueError('x'), CallSite('a.py', 3, 'f'))
        assert str(err) == 'a.py:3: x'

    def test_message_without_caller(self):
        """An unresolved call site leaves the message unprefixed."""
        assert str(CallerWrappedError(ValueError('x'))) == 'x'

    def test_wrap_captures_call_site(self):
        expected = inspect.currentframe().f_lineno + 1
        err = CallerWrappedError.wrap(ValueError('x'))

        assert err.caller is not None
        assert err.caller.line == expected
        assert str(err).endswith(f':{expected}: x')

    @pytest.mark.hypothesis_property
    @given(failures)
    def test_unwrap_preserves_identity(self, failure):
        """The cause of a caller-wrapped failure is exactly the original."""
        err = CallerWrappedError.wrap(failure)
        assert err.unwrap() is failure
        assert unwrap(err) is failure
        assert err.__cause__ is failure

    def test_repr(self):
        err = CallerWrappedError(ValueError('x'), None)
        assert repr(err) == "CallerWrappedError(ValueError('x'), caller=None)"


class TestInterruptionWrappedError:
    """Tests for InterruptionWrappedError."""

    def test_capture_uses_exception_traceback(self):
        """The snapshot is the traceback of the intercepted exception."""
        err = InterruptionWrappedError.capture(_raised(IndexError('list index out of range')))

        assert 'Traceback' in err.stack
        assert 'IndexError' in err.stack
        assert '_raised' in err.stack

    def test_capture_without_traceback_uses_current_stack(self):
        err = InterruptionWrappedError.capture('some panic')

        assert err.stack
        assert 'test_capture_without_traceback_uses_current_stack' in err.stack

    def test_capture_with_origin(self):
        """A separate origin exception supplies the snapshot."""
        origin = _raised(RuntimeError('carrier'))
        err = InterruptionWrappedError.capture(42, origin=origin)

        assert err.recovered == 42
        assert 'RuntimeError' in err.stack

    def test_message_embeds_recovered_and_stack(self):
        err = InterruptionWrappedError('boom', 'frame 1\nframe 2')
        text = str(err)

        assert text.startswith('[interruption recovered]:\n')
        assert "'boom'" in text
        assert text.endswith('[stack]:\nframe 1\nframe 2')

    @pytest.mark.hypothesis_property
    @given(payloads)
    def test_cause_is_always_sentinel(self, payload):
        """Whatever was recovered, the cause is the shared sentinel."""
        err = InterruptionWrappedError.capture(payload)
        assert err.unwrap() is INTERRUPTED
        assert unwrap(err) is INTERRUPTED
        if payload is not None:
            assert unwrap(err) is not payload


class TestInterruptionError:
    """Tests for the minimal interruption failure."""

    def test_message(self):
        assert str(InterruptionError('some panic')) == 'interruption: some panic'

    def test_chains_exception_payload(self):
        cause = IndexError('oops')
        err = InterruptionError(cause)
        assert err.__cause__ is cause
        assert err.recovered is cause


class TestCauseChain:
    """Tests for unwrap(), causes() and has_cause()."""

    def test_causes_walks_wrappers(self):
        base = ValueError('base')
        wrapped = CallerWrappedError(base)
        assert list(causes(wrapped)) == [wrapped, base]

    def test_causes_of_interruption_ends_at_sentinel(self):
        err = InterruptionWrappedError('payload', '')
        assert list(causes(err)) == [err, INTERRUPTED]

    def test_causes_follows_native_chaining(self):
        inner = KeyError('k')
        outer = RuntimeError('r')
        outer.__cause__ = inner
        assert list(causes(outer)) == [outer, inner]

    def test_causes_stops_on_cycles(self):
        a, b = ValueError('a'), ValueError('b')
        a.__cause__, b.__cause__ = b, a
        assert list(causes(a)) == [a, b]

    def test_causes_of_none_is_empty(self):
        assert list(causes(None)) == []

    def test_has_cause_by_identity(self):
        base = ValueError('base')
        assert has_cause(CallerWrappedError(base), base)
        assert not has_cause(CallerWrappedError(base), ValueError('base'))

    def test_has_cause_by_type(self):
        wrapped = CallerWrappedError(KeyError('k'))
        assert has_cause(wrapped, KeyError)
        assert has_cause(wrapped, (TypeError, LookupError))
        assert not has_cause(wrapped, TypeError)

    def test_has_cause_sentinel_for_any_interruption(self):
        for payload in (IndexError('i'), 'text', 7):
            assert has_cause(InterruptionWrappedError.capture(payload), INTERRUPTED)


class TestIsWrapped:
    def test_wrapper_shapes(self):
        assert is_wrapped(CallerWrappedError(ValueError('x')))
        assert is_wrapped(InterruptionWrappedError('x', ''))

    def test_plain_failures(self):
        assert not is_wrapped(ValueError('x'))
        assert not is_wrapped(InterruptionError('x'))
        assert not is_wrapped(None)
