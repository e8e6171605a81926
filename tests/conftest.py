"""Pytest configuration and shared fixtures for klaw-bail tests."""

import logging

import pytest

from klaw_bail import Slot, reset_policy
from klaw_bail._logging import clear_log_hooks


@pytest.fixture
def slot():
    """An empty output slot."""
    return Slot()


@pytest.fixture
def fresh_policy(monkeypatch):
    """Default policy with no environment overrides, restored afterwards."""
    monkeypatch.delenv('KLAW_BAIL_SIGNAL', raising=False)
    monkeypatch.delenv('KLAW_BAIL_BOUNDARY', raising=False)
    reset_policy()
    yield
    reset_policy()


@pytest.fixture
def restore_logging():
    """Restore root logger handlers, level and log hooks after a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    clear_log_hooks()
    yield
    clear_log_hooks()
    root.handlers[:] = handlers
    root.setLevel(level)
