# mdstream/__init__.py
"""Markdown-like text to HTML formatting for chat transcripts.

Renders complete documents, or the cumulative text of a response that is
still streaming in, where unterminated code blocks, emphasis and lists are
shown provisionally until they close.

Example:
    from mdstream import format_markdown

    html = format_markdown("# Title\\n\\nSome **bold** text")
"""

from .formatter import (
    format_markdown,
    get_streaming_state,
    invalidate_defaults,
    reset_streaming_state,
)
from .renderer import MarkdownRenderer, StreamingSession
from .streaming.state import FormatterState

__version__ = "0.1.0"

__all__ = [
    "format_markdown",
    "reset_streaming_state",
    "get_streaming_state",
    "invalidate_defaults",
    "MarkdownRenderer",
    "StreamingSession",
    "FormatterState",
    "__version__",
]
