# mdstream/plugins/block_markdown_formatter/headers.py
"""Header formatter: ``#`` through ``######`` lines → <h1>..<h6>."""

import re
from typing import Any, Dict, Optional

from mdstream.plugins.formatter_pipeline.stash import BlockStash, isolate_block

DEFAULT_PRIORITY = 30

# One pattern per level. Each requires exactly N hashes followed by a
# space, so the level-1 pattern never matches a level-2 line.
HEADER_PATTERNS = [
    (level, re.compile(rf'^{"#" * level} (.*?)[ \t]*$', re.MULTILINE))
    for level in range(1, 7)
]


def render_header(level: int, text: str) -> str:
    return f'<h{level} class="md-h{level}">{text}</h{level}>'


class HeaderFormatterPlugin:
    """Line-anchored header formatter."""

    def __init__(self):
        self._priority = DEFAULT_PRIORITY

    @property
    def name(self) -> str:
        return "header_formatter"

    @property
    def priority(self) -> int:
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        if '#' not in text:
            return text
        for level, pattern in HEADER_PATTERNS:
            text = pattern.sub(
                lambda m: isolate_block(render_header(level, m.group(1))), text
            )
        return text

    def reset(self) -> None:
        pass

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)


def create_plugin() -> HeaderFormatterPlugin:
    """Factory function to create a HeaderFormatterPlugin instance."""
    return HeaderFormatterPlugin()
