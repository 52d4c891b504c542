# mdstream/plugins/inline_markdown_formatter/__init__.py
"""Inline markdown formatter plugin.

Formats emphasis, inline code and links as HTML, tracking emphasis that is
still being typed when bound to streaming state.
"""

from .plugin import InlineMarkdownFormatterPlugin, create_plugin

__all__ = ["InlineMarkdownFormatterPlugin", "create_plugin"]
