# mdstream/plugins/code_block_formatter/highlighter.py
"""Syntax highlighting capability for code blocks.

The code block formatter only needs two things from a highlighter: whether
a canonical language is supported, and the highlighted markup for a piece
of code. PygmentsHighlighter is the default implementation; anything with
the same two methods can be injected instead.
"""

from functools import lru_cache
from typing import Protocol, runtime_checkable

from pygments import highlight as _pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound


@runtime_checkable
class Highlighter(Protocol):
    """Capability interface for syntax highlighters."""

    def supports_language(self, name: str) -> bool:
        """Check if the canonical language identifier can be highlighted."""
        ...

    def highlight(self, code: str, name: str) -> str:
        """Return highlighted HTML markup (no surrounding <pre>/<code>)."""
        ...


# Canonical identifiers that Pygments knows under a different name
PYGMENTS_LEXER_NAMES = {
    'markup': 'html',
    'cs': 'csharp',
}

# Extra lexer options per canonical identifier
LEXER_OPTIONS = {
    'php': {'startinline': True},
}


@lru_cache(maxsize=64)
def _get_lexer(name: str):
    """Get Pygments lexer for a canonical language identifier (cached).

    Args:
        name: Canonical language identifier.

    Returns:
        Pygments lexer or None if Pygments has no lexer for it.
    """
    lexer_name = PYGMENTS_LEXER_NAMES.get(name, name)
    try:
        return get_lexer_by_name(lexer_name, **LEXER_OPTIONS.get(name, {}))
    except ClassNotFound:
        return None


class PygmentsHighlighter:
    """Highlighter backed by Pygments, emitting CSS-class based spans."""

    def __init__(self, class_prefix: str = ""):
        self._class_prefix = class_prefix
        self._formatter = HtmlFormatter(nowrap=True, classprefix=class_prefix)

    def supports_language(self, name: str) -> bool:
        return _get_lexer(name) is not None

    def highlight(self, code: str, name: str) -> str:
        """Highlight code with the lexer for ``name``.

        Raises:
            ValueError: If Pygments has no lexer for the language.
        """
        lexer = _get_lexer(name)
        if lexer is None:
            raise ValueError(f"No lexer for language: {name}")

        highlighted = _pygments_highlight(code, lexer, self._formatter)
        # Pygments always terminates the output with a newline
        if highlighted.endswith('\n'):
            highlighted = highlighted[:-1]
        return highlighted

    def style_defs(self, style: str = "default", selector: str = ".scrollable-code") -> str:
        """Return the CSS rules for a Pygments style.

        Args:
            style: Pygments style name (e.g., "monokai").
            selector: CSS selector the rules are scoped to.

        Returns:
            Stylesheet text.

        Raises:
            pygments.util.ClassNotFound: If the style does not exist.
        """
        formatter = HtmlFormatter(style=style, classprefix=self._class_prefix)
        return formatter.get_style_defs(selector)
