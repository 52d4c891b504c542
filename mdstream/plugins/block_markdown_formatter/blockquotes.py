# mdstream/plugins/block_markdown_formatter/blockquotes.py
"""Blockquote formatter.

Consecutive lines starting with ``>`` form one blockquote. Each line is
dequoted and trimmed, and the lines are joined with single spaces, so a
blockquote never keeps its internal line breaks.
"""

import re
from typing import Any, Dict, Optional

from mdstream.plugins.formatter_pipeline.stash import BlockStash, isolate_block

DEFAULT_PRIORITY = 50

BLOCKQUOTE_PATTERN = re.compile(r'^>.*(?:\n>.*)*', re.MULTILINE)


def render_blockquote(block: str) -> str:
    """Render the raw lines of one blockquote."""
    content = " ".join(line[1:].strip() for line in block.split("\n"))
    return f'<blockquote class="md-blockquote">{content}</blockquote>'


class BlockquoteFormatterPlugin:
    """Blockquote formatter."""

    def __init__(self):
        self._priority = DEFAULT_PRIORITY

    @property
    def name(self) -> str:
        return "blockquote_formatter"

    @property
    def priority(self) -> int:
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        return BLOCKQUOTE_PATTERN.sub(
            lambda m: isolate_block(render_blockquote(m.group(0))), text
        )

    def reset(self) -> None:
        pass

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)


def create_plugin() -> BlockquoteFormatterPlugin:
    """Factory function to create a BlockquoteFormatterPlugin instance."""
    return BlockquoteFormatterPlugin()
