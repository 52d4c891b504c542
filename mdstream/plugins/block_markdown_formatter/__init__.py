# mdstream/plugins/block_markdown_formatter/__init__.py
"""Stateless block-level markdown formatters.

Each module holds one formatter plugin with its own create_plugin():

- headers: ``#`` lines (priority 30)
- rules: ``---`` lines (priority 45)
- blockquotes: ``>`` line runs (priority 50)
- paragraphs: blank-line separated segments (priority 90)
"""

from .blockquotes import BlockquoteFormatterPlugin
from .headers import HeaderFormatterPlugin
from .paragraphs import ParagraphFormatterPlugin
from .rules import RuleFormatterPlugin

__all__ = [
    "BlockquoteFormatterPlugin",
    "HeaderFormatterPlugin",
    "ParagraphFormatterPlugin",
    "RuleFormatterPlugin",
]
