# mdstream/plugins/formatter_pipeline/protocol.py
"""Protocol definition for markdown formatter plugins.

Formatter plugins are ordered text-to-text rewrites. Each formatter
receives the whole text produced by the formatters before it and returns
the rewritten text. Rendered markup that later formatters must not touch
(code blocks, diagrams) is handed to the pipeline's BlockStash, which
leaves an inert placeholder in the text until the final expansion.

Usage:
    class MyFormatter:
        name = "my_formatter"
        priority = 50  # Lower = runs earlier

        def format(self, text: str, stash: BlockStash) -> str:
            return MY_PATTERN.sub(self._render, text)

        def reset(self) -> None:
            pass
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .stash import BlockStash


@runtime_checkable
class FormatterPlugin(Protocol):
    """Protocol for markdown formatter plugins.

    Formatters transform text in the render pipeline. Each formatter:
    - Has a unique name for identification
    - Has a priority for ordering (lower = runs first)
    - Rewrites the text via format()
    - Clears any streaming state via reset()
    """

    @property
    def name(self) -> str:
        """Unique identifier for this formatter."""
        ...

    @property
    def priority(self) -> int:
        """Execution priority. Lower values run first.

        Suggested ranges:
        - 0-19: Opaque blocks (fenced code)
        - 20-29: Custom block tags (graphics)
        - 30-39: Line-anchored structure (headers, lists)
        - 40-59: Inline elements, rules, quotes
        - 80-99: Paragraph wrapping
        """
        ...

    def format(self, text: str, stash: BlockStash) -> str:
        """Rewrite text, returning the transformed text.

        Args:
            text: Text produced by the previous formatters.
            stash: Per-render store for opaque rendered blocks.

        Returns:
            The rewritten text.
        """
        ...

    def reset(self) -> None:
        """Reset streaming state for a new stream."""
        ...


@runtime_checkable
class ConfigurableFormatter(FormatterPlugin, Protocol):
    """Extended protocol for formatters that support configuration."""

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize with configuration.

        Args:
            config: Configuration dictionary with formatter-specific settings.
        """
        ...
