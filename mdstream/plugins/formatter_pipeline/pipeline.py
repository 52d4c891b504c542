# mdstream/plugins/formatter_pipeline/pipeline.py
"""Ordered formatter pipeline for rendering markdown-like text to HTML.

The pipeline manages a collection of formatter plugins, running the text
through them in priority order. Each formatter is a text-to-text rewrite;
the output of one becomes the input of the next. Rendered blocks that must
survive later passes untouched are parked in a BlockStash and expanded
after the last formatter has run.

Usage:
    from mdstream.plugins.formatter_pipeline import FormatterPipeline
    from mdstream.plugins.code_block_formatter import create_plugin as create_code_formatter

    pipeline = FormatterPipeline()
    pipeline.register(create_code_formatter())

    html = pipeline.format(text)

    # Clear streaming state before an unrelated stream
    pipeline.reset()
"""

import logging
from typing import List, Optional

from .protocol import FormatterPlugin
from .stash import BlockStash
from mdstream.trace import trace as _trace_write

logger = logging.getLogger(__name__)


def _trace(msg: str) -> None:
    """Write trace message to log file for debugging."""
    _trace_write("FormatterPipeline", msg)


class FormatterPipeline:
    """Pipeline that routes text through registered formatters.

    Formatters are executed in priority order (lowest first). Output from
    one formatter becomes input to the next.
    """

    def __init__(self):
        """Initialize an empty pipeline."""
        self._formatters: List[FormatterPlugin] = []

    def register(self, formatter: FormatterPlugin) -> None:
        """Register a formatter plugin.

        Formatters with equal priority keep their registration order.

        Args:
            formatter: Formatter implementing FormatterPlugin protocol.
        """
        _trace(f"register: {formatter.name} at priority {formatter.priority}")

        # Insert in priority order (lower priority first)
        inserted = False
        for i, existing in enumerate(self._formatters):
            if formatter.priority < existing.priority:
                self._formatters.insert(i, formatter)
                inserted = True
                break

        if not inserted:
            self._formatters.append(formatter)

        _trace(f"register: total formatters: {len(self._formatters)}")

    def unregister(self, name: str) -> bool:
        """Remove a formatter by name."""
        for i, formatter in enumerate(self._formatters):
            if formatter.name == name:
                self._formatters.pop(i)
                return True
        return False

    def get_formatter(self, name: str) -> Optional[FormatterPlugin]:
        """Get a registered formatter by name."""
        for formatter in self._formatters:
            if formatter.name == name:
                return formatter
        return None

    def list_formatters(self) -> List[str]:
        """List registered formatter names in priority order."""
        return [f.name for f in self._formatters]

    def format(self, text: str) -> str:
        """Run text through every formatter and expand stashed blocks.

        A formatter that raises is logged and skipped; the text it received
        is passed on unchanged, so rendering always produces a string.

        Args:
            text: Text to render.

        Returns:
            Rendered HTML fragment.
        """
        if not text:
            return ""

        stash = BlockStash()
        for formatter in self._formatters:
            try:
                text = formatter.format(text, stash)
            except Exception:
                logger.exception("Formatter %s failed, skipping it", formatter.name)
                _trace(f"format: {formatter.name} failed")
        _trace(f"format: {len(stash)} stashed blocks")
        return stash.expand(text)

    def reset(self) -> None:
        """Reset all formatters for a new stream."""
        for formatter in self._formatters:
            formatter.reset()


def create_pipeline() -> FormatterPipeline:
    """Factory function to create a FormatterPipeline instance."""
    return FormatterPipeline()
