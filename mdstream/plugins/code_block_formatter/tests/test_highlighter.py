# mdstream/plugins/code_block_formatter/tests/test_highlighter.py
"""Tests for the Pygments-backed highlighter."""

import pytest
from pygments.util import ClassNotFound

from mdstream.plugins.code_block_formatter.highlighter import (
    Highlighter,
    PygmentsHighlighter,
)


@pytest.fixture
def highlighter():
    return PygmentsHighlighter()


def test_implements_protocol(highlighter):
    assert isinstance(highlighter, Highlighter)


@pytest.mark.parametrize("name", ["python", "javascript", "markup", "cs", "bash", "json"])
def test_supported_languages(highlighter, name):
    assert highlighter.supports_language(name) is True


def test_unknown_language_unsupported(highlighter):
    assert highlighter.supports_language("no-such-language") is False


def test_highlight_emits_spans_without_trailing_newline(highlighter):
    html = highlighter.highlight("x = 1", "python")
    assert '<span class="' in html
    assert not html.endswith("\n")
    assert "<pre" not in html


def test_highlight_escapes_markup(highlighter):
    html = highlighter.highlight("a < b", "python")
    assert "&lt;" in html


def test_php_without_open_tag(highlighter):
    html = highlighter.highlight("echo 1;", "php")
    assert "echo" in html


def test_highlight_unknown_language_raises(highlighter):
    with pytest.raises(ValueError):
        highlighter.highlight("x", "no-such-language")


def test_class_prefix():
    html = PygmentsHighlighter(class_prefix="hl-").highlight("x = 1", "python")
    assert 'class="hl-' in html


def test_style_defs_scoped_to_selector(highlighter):
    css = highlighter.style_defs("default")
    assert ".scrollable-code" in css


def test_style_defs_unknown_style(highlighter):
    with pytest.raises(ClassNotFound):
        highlighter.style_defs("no-such-style")
