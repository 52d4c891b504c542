# mdstream/plugins/code_block_formatter/__init__.py
"""Code block formatter plugin.

Renders fenced code blocks as highlighted HTML, normalizing language tags
through the alias table and falling back to escaped plain blocks.
"""

from .highlighter import Highlighter, PygmentsHighlighter
from .languages import DEFAULT_LANGUAGE, LANGUAGE_ALIASES, normalize_language
from .plugin import CodeBlockFormatterPlugin, create_plugin

__all__ = [
    "CodeBlockFormatterPlugin",
    "create_plugin",
    "Highlighter",
    "PygmentsHighlighter",
    "DEFAULT_LANGUAGE",
    "LANGUAGE_ALIASES",
    "normalize_language",
]
