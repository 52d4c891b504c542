"""Pytest fixtures for package-level mdstream tests."""

import pytest

from mdstream import formatter


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Run every test against default configuration and fresh defaults.

    The default renderer and session are process-wide and read
    configuration from the environment when first built, so they are
    dropped before and after each test.
    """
    for var in ("MDSTREAM_HIGHLIGHT", "MDSTREAM_FORMATTERS_CONFIG", "MDSTREAM_TRACE_LOG"):
        monkeypatch.delenv(var, raising=False)
    formatter.invalidate_defaults()
    yield
    formatter.invalidate_defaults()


class RecordingHighlighter:
    """Highlighter fake that records calls."""

    def __init__(self):
        self.calls = []

    def supports_language(self, name):
        return True

    def highlight(self, code, name):
        self.calls.append((code, name))
        return code


@pytest.fixture
def recording_highlighter():
    return RecordingHighlighter()
