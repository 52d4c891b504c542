# mdstream/plugins/list_formatter/plugin.py
"""List formatter plugin for unordered (``- ``) and ordered (``1. ``) lists.

A maximal run of consecutive item lines of one kind becomes one list
element; item text is the line with its marker stripped.

Streaming strategy: a run is only rendered once it is delimited, i.e. a
completed blank or non-list line follows it, or the partial last line can
no longer grow into a list marker. The run at the end of the text that is
still growing is recorded in the bound ListState and left as raw text.
"""

import re
from typing import Any, Dict, List, Optional

from mdstream.plugins.formatter_pipeline.stash import BlockStash, isolate_block
from mdstream.streaming.state import ListKind, ListState
from mdstream.trace import trace as _trace_write


def _trace(msg: str) -> None:
    """Write trace message to log file for debugging."""
    _trace_write("LIST_FORMATTER", msg)


UNORDERED_ITEM_PATTERN = re.compile(r'^- (.+)$')
ORDERED_ITEM_PATTERN = re.compile(r'^\d+\. (.+)$')

# A partial line that may still turn into an item marker
PARTIAL_MARKER_PATTERN = re.compile(r'(?:- ?|\d+(?:\. ?)?)?')

LIST_TAGS = {
    ListKind.UNORDERED: ("ul", "md-ul"),
    ListKind.ORDERED: ("ol", "md-ol"),
}

DEFAULT_PRIORITY = 35


def item_kind(line: str) -> Optional[ListKind]:
    """Return the list kind of an item line, or None for other lines."""
    if UNORDERED_ITEM_PATTERN.match(line):
        return ListKind.UNORDERED
    if ORDERED_ITEM_PATTERN.match(line):
        return ListKind.ORDERED
    return None


def item_text(line: str, kind: ListKind) -> str:
    """Strip the marker from an item line."""
    pattern = UNORDERED_ITEM_PATTERN if kind is ListKind.UNORDERED else ORDERED_ITEM_PATTERN
    return pattern.match(line).group(1)


def render_list(kind: ListKind, lines: List[str]) -> str:
    """Render a run of item lines as one list element."""
    tag, css_class = LIST_TAGS[kind]
    items = "".join(
        f'<li class="md-li">{item_text(line, kind)}</li>' for line in lines
    )
    return f'<{tag} class="{css_class}">{items}</{tag}>'


class ListFormatterPlugin:
    """Plugin that turns runs of list item lines into list elements."""

    def __init__(self):
        self._priority = DEFAULT_PRIORITY
        self._state: Optional[ListState] = None

    @property
    def name(self) -> str:
        """Unique identifier for this formatter."""
        return "list_formatter"

    @property
    def priority(self) -> int:
        """Execution priority (35 = after headers, before inline elements)."""
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        """Render every delimited list run.

        Args:
            text: Text potentially containing list item lines.
            stash: Unused; lists stay visible to the inline formatter.

        Returns:
            Text with list runs replaced by isolated list elements.
        """
        lines = text.split('\n')
        output: List[str] = []
        open_run = False
        i = 0

        while i < len(lines):
            kind = item_kind(lines[i])
            if kind is None:
                output.append(lines[i])
                i += 1
                continue

            end = i
            while end < len(lines) and item_kind(lines[end]) is kind:
                end += 1
            run = lines[i:end]

            if self._state is not None and self._run_may_continue(lines, end):
                self._state.open = True
                self._state.kind = kind
                self._state.content = '\n'.join(run)
                open_run = True
                _trace(f"open {kind.value} run: {len(run)} items")
                output.extend(run)
            else:
                output.append(isolate_block(render_list(kind, run)))
            i = end

        if self._state is not None and not open_run:
            self._state.close()

        return '\n'.join(output)

    def reset(self) -> None:
        """Reset streaming state for a new stream."""
        if self._state is not None:
            self._state.close()

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize with configuration."""
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)

    def bind_state(self, state: Optional[ListState]) -> None:
        """Bind streaming state. With state bound, trailing runs stay open."""
        self._state = state

    @staticmethod
    def _run_may_continue(lines: List[str], end: int) -> bool:
        """Check if the run ending before ``lines[end]`` may still grow.

        The last element of ``lines`` is the line currently being typed.
        """
        if end == len(lines):
            return True
        if end == len(lines) - 1:
            return PARTIAL_MARKER_PATTERN.fullmatch(lines[end]) is not None
        return False


def create_plugin() -> ListFormatterPlugin:
    """Factory function to create a ListFormatterPlugin instance."""
    return ListFormatterPlugin()
