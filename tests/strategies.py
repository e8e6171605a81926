"""Hypothesis strategies for property-based testing of klaw-bail."""

from hypothesis import strategies as st

messages = st.text(min_size=1, max_size=50)

exception_types = st.sampled_from([
    ValueError,
    TypeError,
    RuntimeError,
    KeyError,
    OSError,
    LookupError,
])

# Failures: ordinary exception instances
failures = st.builds(lambda exc_type, msg: exc_type(msg), exception_types, messages)

# Anything a hand-built interruption could carry that is not a failure
foreign_payloads = st.one_of(
    st.integers(),
    st.text(max_size=30),
    st.lists(st.integers(), max_size=5),
    st.none(),
)

payloads = st.one_of(failures, foreign_payloads)
