# mdstream/plugins/graphic_formatter/plugin.py
"""Graphic formatter plugin.

Detects <graphic ...>...</graphic> blocks, renders them through the
graphic renderer and stashes the markup so labels are not re-processed by
the inline formatters.

Priority 20: after code_block_formatter (10), so graphic markup inside
code samples stays literal; before every line-anchored formatter.
"""

import logging
from typing import Any, Dict, Optional

from . import renderer
from mdstream.plugins.formatter_pipeline.stash import BlockStash

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 20


class GraphicFormatterPlugin:
    """Formatter plugin that renders custom graphic blocks as HTML."""

    def __init__(self):
        self._priority = DEFAULT_PRIORITY

    @property
    def name(self) -> str:
        return "graphic_formatter"

    @property
    def priority(self) -> int:
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        """Replace every closed graphic block with its rendered markup.

        Unterminated blocks do not match and stay as text.
        """
        return renderer.GRAPHIC_PATTERN.sub(
            lambda m: stash.put(self._render_match(m.group(1), m.group(2))),
            text,
        )

    def reset(self) -> None:
        """Stateless; nothing to reset."""

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize with configuration."""
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)

    def _render_match(self, attributes: str, body: str) -> str:
        graphic = renderer.parse_graphic(attributes, body)
        if graphic.kind not in renderer.GRAPHIC_RENDERERS:
            logger.info("Unsupported graphic type %r", graphic.kind)
        return renderer.render(graphic)


def create_plugin() -> GraphicFormatterPlugin:
    """Factory function to create a GraphicFormatterPlugin instance."""
    return GraphicFormatterPlugin()
