"""
Global pytest configuration and fixtures.
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def clear_debug_env(monkeypatch):
    """Keep NOTELINK_DEBUG from the outer environment out of every test."""
    monkeypatch.delenv("NOTELINK_DEBUG", raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by CLI commands that configure logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
