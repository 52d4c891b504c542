# mdstream/plugins/block_markdown_formatter/paragraphs.py
"""Paragraph formatter.

Runs last. Splits the text on blank lines; each segment that does not
already start with an HTML tag gets its single newlines turned into
``<br>`` and is wrapped in a paragraph element. Blank segments are dropped
and the remaining segments are joined with a blank line.
"""

import re
from typing import Any, Dict, Optional

from mdstream.plugins.formatter_pipeline.stash import BlockStash

DEFAULT_PRIORITY = 90

PARAGRAPH_BREAK = re.compile(r'\n\n+')


def is_html_segment(segment: str) -> bool:
    """Check if a segment already starts with a tag (block or inline)."""
    return segment.strip().startswith("<")


def render_paragraph(segment: str) -> str:
    with_breaks = segment.replace("\n", "<br>")
    return f'<p class="md-p">{with_breaks}</p>'


class ParagraphFormatterPlugin:
    """Paragraph wrapping formatter."""

    def __init__(self):
        self._priority = DEFAULT_PRIORITY

    @property
    def name(self) -> str:
        return "paragraph_formatter"

    @property
    def priority(self) -> int:
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        paragraphs = []
        for segment in PARAGRAPH_BREAK.split(text):
            if not segment.strip():
                continue
            if is_html_segment(segment):
                paragraphs.append(segment)
            else:
                paragraphs.append(render_paragraph(segment))
        return "\n\n".join(paragraphs)

    def reset(self) -> None:
        pass

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)


def create_plugin() -> ParagraphFormatterPlugin:
    """Factory function to create a ParagraphFormatterPlugin instance."""
    return ParagraphFormatterPlugin()
