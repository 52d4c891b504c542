# mdstream/renderer.py
"""Renderers built on the formatter pipeline.

MarkdownRenderer renders complete documents. StreamingSession renders the
cumulative text of one stream, tracking constructs that are still open in
its own FormatterState, so several streams can be rendered side by side.

Usage:
    from mdstream.renderer import MarkdownRenderer, StreamingSession

    html = MarkdownRenderer().render(document)

    session = StreamingSession()
    for cumulative_text in chunks:
        html = session.render(cumulative_text)
    session.reset()
"""

import logging
from typing import Any, Dict, Optional

from mdstream.plugins.code_block_formatter import Highlighter
from mdstream.plugins.formatter_pipeline import FormatterPipeline, FormatterRegistry
from mdstream.streaming.state import FormatterState
from mdstream.trace import trace as _trace_write

logger = logging.getLogger(__name__)


def _trace(msg: str) -> None:
    """Write trace message to log file for debugging."""
    _trace_write("RENDERER", msg)


def _build_registry(config: Optional[Dict[str, Any]]) -> FormatterRegistry:
    """Create a registry loaded from config, the env config file or defaults."""
    registry = FormatterRegistry()
    registry.discover()
    if config is not None:
        registry.load_config_from_dict(config)
    elif not registry.load_config_from_env():
        registry.use_defaults()
    return registry


def _wire_highlighter(registry: FormatterRegistry, highlighter: Optional[Highlighter]) -> None:
    if highlighter is not None:
        registry.set_wiring_callback(
            "code_block_formatter",
            lambda formatter: formatter.set_highlighter(highlighter),
        )


class MarkdownRenderer:
    """Render complete markdown documents to HTML.

    Args:
        config: Formatter configuration (``{"formatters": [...]}``). When
            None, the file named by MDSTREAM_FORMATTERS_CONFIG is used if
            set, otherwise the defaults.
        highlighter: Highlighter for code blocks (default: Pygments).
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        highlighter: Optional[Highlighter] = None,
    ):
        registry = _build_registry(config)
        _wire_highlighter(registry, highlighter)
        self._pipeline: FormatterPipeline = registry.create_pipeline()

    @property
    def pipeline(self) -> FormatterPipeline:
        return self._pipeline

    def render(self, text: Optional[str]) -> str:
        """Render a complete document. Never raises; empty input gives ""."""
        if not text:
            return ""
        try:
            return self._pipeline.format(text)
        except Exception:
            logger.exception("Rendering failed, returning input")
            return text


class StreamingSession:
    """Render one stream of cumulative text with open-construct tracking.

    Each call to render() receives the full text received so far. Closed
    constructs render as in complete mode; constructs still open at the end
    of the text are recorded in ``state`` and rendered provisionally.

    Args:
        config: Formatter configuration, as for MarkdownRenderer.
        highlighter: Highlighter for code blocks (default: Pygments).
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        highlighter: Optional[Highlighter] = None,
    ):
        self._state = FormatterState()
        registry = _build_registry(config)
        state = self._state

        def wire_code_block(formatter):
            if highlighter is not None:
                formatter.set_highlighter(highlighter)
            formatter.bind_state(state.code_block)

        registry.set_wiring_callback("code_block_formatter", wire_code_block)
        registry.set_wiring_callback(
            "list_formatter",
            lambda formatter: formatter.bind_state(state.list),
        )
        registry.set_wiring_callback(
            "inline_markdown_formatter",
            lambda formatter: formatter.bind_state(state.bold, state.italic),
        )
        self._pipeline: FormatterPipeline = registry.create_pipeline()

    @property
    def state(self) -> FormatterState:
        """The live state of this stream."""
        return self._state

    @property
    def pipeline(self) -> FormatterPipeline:
        return self._pipeline

    def render(self, text: Optional[str]) -> str:
        """Render the text received so far. Never raises."""
        if not text:
            return ""
        try:
            html = self._pipeline.format(text)
        except Exception:
            logger.exception("Streaming render failed, returning input")
            return text
        _trace(f"render: len={len(text)} open={self._state.has_open_construct}")
        return html

    def reset(self) -> None:
        """Forget all open constructs before a new stream."""
        self._pipeline.reset()
        self._state.reset()
