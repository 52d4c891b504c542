# mdstream/formatter.py
"""Process-wide formatting entry points.

format_markdown() renders through one default MarkdownRenderer and one
default StreamingSession, created on first use. The default session serves
a single logical stream at a time: call reset_streaming_state() between
unrelated streams. Code rendering several streams at once should create
its own StreamingSession per stream.

Usage:
    from mdstream import format_markdown, reset_streaming_state

    html = format_markdown(document)

    for cumulative_text in chunks:
        html = format_markdown(cumulative_text, is_streaming=True)
    reset_streaming_state()
"""

from typing import Optional

from mdstream.renderer import MarkdownRenderer, StreamingSession
from mdstream.streaming.state import FormatterState

_default_renderer: Optional[MarkdownRenderer] = None
_default_session: Optional[StreamingSession] = None


def _get_renderer() -> MarkdownRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = MarkdownRenderer()
    return _default_renderer


def _get_session() -> StreamingSession:
    global _default_session
    if _default_session is None:
        _default_session = StreamingSession()
    return _default_session


def format_markdown(text: Optional[str], is_streaming: bool = False) -> str:
    """Render markdown-like text to HTML.

    Args:
        text: Complete document, or the cumulative text of the current
            stream when is_streaming is True.
        is_streaming: Track constructs left open at the end of the text
            and render them provisionally.

    Returns:
        HTML fragment; "" for empty or None input. Never raises.
    """
    if not text:
        return ""
    if is_streaming:
        return _get_session().render(text)

    # A one-shot render starts from a clean stream state
    reset_streaming_state()
    return _get_renderer().render(text)


def reset_streaming_state() -> None:
    """Restore the default stream's state to closed/empty."""
    if _default_session is not None:
        _default_session.reset()


def get_streaming_state() -> FormatterState:
    """Live state of the default stream."""
    return _get_session().state


def invalidate_defaults() -> None:
    """Drop the default renderer and session.

    They are rebuilt on next use, picking up configuration changes made
    through environment variables. Useful for testing.
    """
    global _default_renderer, _default_session
    _default_renderer = None
    _default_session = None
