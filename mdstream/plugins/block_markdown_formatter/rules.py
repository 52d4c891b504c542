# mdstream/plugins/block_markdown_formatter/rules.py
"""Horizontal rule formatter: a line holding only ``---`` → <hr>."""

import re
from typing import Any, Dict, Optional

from mdstream.plugins.formatter_pipeline.stash import BlockStash, isolate_block

DEFAULT_PRIORITY = 45

RULE_PATTERN = re.compile(r'^[ \t]*---[ \t]*$', re.MULTILINE)

RULE_HTML = '<hr class="md-hr">'


class RuleFormatterPlugin:
    """Horizontal rule formatter."""

    def __init__(self):
        self._priority = DEFAULT_PRIORITY

    @property
    def name(self) -> str:
        return "rule_formatter"

    @property
    def priority(self) -> int:
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        return RULE_PATTERN.sub(lambda m: isolate_block(RULE_HTML), text)

    def reset(self) -> None:
        pass

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)


def create_plugin() -> RuleFormatterPlugin:
    """Factory function to create a RuleFormatterPlugin instance."""
    return RuleFormatterPlugin()
