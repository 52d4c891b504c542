# mdstream/plugins/code_block_formatter/plugin.py
"""Code block formatter plugin for fenced code blocks.

This plugin turns markdown code fences into highlighted HTML blocks. It
runs first in the pipeline and stashes its output, so no later formatter
ever sees the asterisks, underscores or brackets inside code.

Two passes run in order:

1. Strict fences: ```lang, a newline, the code, a newline and ```.
2. Secondary fences: ~~~ fences, and one-line backtick fences the strict
   pattern misses. Both start a line, and the closing fence either ends
   the same line or sits on a line of its own.

In streaming mode (after bind_state()) a trailing opening fence without a
closing fence is tracked in the bound CodeBlockState and rendered as a
provisional block holding the escaped partial code. Fences after the
opening fence belong to the open block and are not rendered.

Usage:
    from mdstream.plugins.code_block_formatter import create_plugin

    formatter = create_plugin()
    formatter.initialize({"highlight": True})

    html = formatter.render_code("py", "print('hi')")
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional

from .highlighter import Highlighter, PygmentsHighlighter
from .languages import normalize_language
from mdstream.escaping import escape_html
from mdstream.plugins.formatter_pipeline.stash import BlockStash
from mdstream.streaming.state import CodeBlockState
from mdstream.trace import trace as _trace_write

logger = logging.getLogger(__name__)


def _trace(msg: str) -> None:
    """Write trace message to log file for debugging."""
    _trace_write("CODE_BLOCK_FORMATTER", msg)


# Matches: ```lang\ncode\n``` (language optional)
CODE_BLOCK_PATTERN = re.compile(r'```([\w#+.-]*)\n([\s\S]+?)\n```')

# Matches ~~~ and ``` fences that start a line, either closed on the same
# line (```py print(1)```) or by a fence on a line of its own.
SECONDARY_CODE_BLOCK_PATTERN = re.compile(
    r'^(?P<fence>```|~~~)(?P<lang>[\w#+.-]*)'
    r'(?:[ \t]+(?P<inline>[^\n]*?\S)[ \t]*(?P=fence)'
    r'|[ \t]*\n(?P<code>[\s\S]*?)\n(?P=fence))'
    r'[ \t]*$',
    re.MULTILINE,
)

# Already rendered blocks (re-rendering prior output must not touch them)
RENDERED_BLOCK_PATTERN = re.compile(r'<pre\b[^>]*>[\s\S]*?</pre>')

OPEN_FENCE = '```'

# An opening fence carries at most a language tag before its newline
OPEN_FENCE_PATTERN = re.compile(r'```(?=[\w#+.-]*[ \t]*(?:\n|\Z))')

PROVISIONAL_CLASS = "md-provisional"

DEFAULT_PRIORITY = 10


class CodeBlockFormatterPlugin:
    """Plugin that renders fenced code blocks with syntax highlighting.

    The highlighter is an external collaborator (see Highlighter); any
    failure or unsupported language falls back to an escaped plain block.
    """

    def __init__(self, highlighter: Optional[Highlighter] = None):
        self._priority = DEFAULT_PRIORITY
        self._highlighter: Optional[Highlighter] = highlighter or PygmentsHighlighter()
        self._highlight_enabled = True
        self._state: Optional[CodeBlockState] = None

    # ==================== FormatterPlugin Protocol ====================

    @property
    def name(self) -> str:
        """Unique identifier for this formatter."""
        return "code_block_formatter"

    @property
    def priority(self) -> int:
        """Execution priority (10 = before everything else)."""
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        """Render every fenced code block and stash the markup.

        Args:
            text: Text potentially containing code fences.
            stash: Store for the rendered blocks.

        Returns:
            Text with code blocks replaced by stash placeholders.
        """
        text = CODE_BLOCK_PATTERN.sub(
            lambda m: stash.put(self.render_code(m.group(1), m.group(2))),
            text,
        )
        text = RENDERED_BLOCK_PATTERN.sub(lambda m: stash.put(m.group(0)), text)

        blocks = list(SECONDARY_CODE_BLOCK_PATTERN.finditer(text))
        if self._state is None:
            return self._stash_blocks(text, blocks, stash)

        start = self._find_open_fence(text, blocks)
        if start == -1:
            if self._state.open:
                _trace("open block closed")
            self._state.close()
            return self._stash_blocks(text, blocks, stash)

        # Fences inside the open block are code, not blocks of their own
        head = self._stash_blocks(
            text[:start], [m for m in blocks if m.start() < start], stash
        )
        return head + self._open_block(text[start:], stash)

    def reset(self) -> None:
        """Reset streaming state for a new stream."""
        if self._state is not None:
            self._state.close()

    # ==================== Configuration ====================

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the formatter with configuration.

        Args:
            config: Dict with optional settings:
                - priority: Pipeline priority (default: 10)
                - highlight: Use the highlighter (default: True)
                - class_prefix: CSS class prefix for Pygments spans
        """
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)
        self._highlight_enabled = config.get("highlight", True)

        class_prefix = config.get("class_prefix")
        if class_prefix:
            self._highlighter = PygmentsHighlighter(class_prefix=class_prefix)

        # Check env vars
        env_highlight = os.environ.get("MDSTREAM_HIGHLIGHT", "").lower()
        if env_highlight == "off":
            self._highlight_enabled = False

    # ==================== Wiring ====================

    def set_highlighter(self, highlighter: Optional[Highlighter]) -> None:
        """Replace the highlighter. None means always render plain blocks."""
        self._highlighter = highlighter

    def bind_state(self, state: Optional[CodeBlockState]) -> None:
        """Bind streaming state. With state bound, open fences are tracked."""
        self._state = state

    @property
    def streaming(self) -> bool:
        """True when bound to streaming state."""
        return self._state is not None

    # ==================== Rendering ====================

    def render_code(self, language_tag: str, code: str) -> str:
        """Render one code block.

        Args:
            language_tag: Tag written after the opening fence (may be empty).
            code: Raw code between the fences.

        Returns:
            Highlighted <pre><code> block tagged with the canonical language,
            or an escaped plain block when highlighting is unavailable.
        """
        language = normalize_language(language_tag)
        code = code.strip('\n')

        if self._highlight_enabled and self._highlighter is not None:
            try:
                if self._highlighter.supports_language(language):
                    highlighted = self._highlighter.highlight(code, language)
                    return (
                        f'<pre class="language-{language} scrollable-code">'
                        f'<code class="language-{language}">{highlighted}</code></pre>'
                    )
                logger.warning("No highlighting support for language %r", language)
            except Exception as exc:
                logger.warning("Error highlighting %s code: %s", language, exc)

        return self._render_plain(code)

    def _render_plain(self, code: str) -> str:
        """Render code as an escaped block without highlighting."""
        return f'<pre class="scrollable-code"><code>{escape_html(code)}</code></pre>'

    def _render_provisional(self, code: str) -> str:
        """Render the partial code of a still-open block."""
        return (
            f'<pre class="{PROVISIONAL_CLASS} scrollable-code">'
            f'<code>{escape_html(code)}</code></pre>'
        )

    def _stash_blocks(self, text: str, blocks: List[re.Match], stash: BlockStash) -> str:
        """Replace secondary fence matches in text with stashed blocks."""
        parts = []
        last_end = 0
        for match in blocks:
            code = match.group('inline')
            if code is None:
                code = match.group('code')
            parts.append(text[last_end:match.start()])
            parts.append(stash.put(self.render_code(match.group('lang'), code)))
            last_end = match.end()
        parts.append(text[last_end:])
        return ''.join(parts)

    @staticmethod
    def _find_open_fence(text: str, blocks: List[re.Match]) -> int:
        """Find the fence opening a block that has no closing fence.

        Closed strict blocks are already stashed and fences inside secondary
        blocks are skipped. Only a fence followed by nothing but a language
        tag opens a block, and a fence starting a line wins over one that
        follows text on its line.

        Returns:
            Index of the opening fence, or -1 when no block is open.
        """
        candidates = [
            m.start() for m in OPEN_FENCE_PATTERN.finditer(text)
            if not any(b.start() <= m.start() < b.end() for b in blocks)
        ]
        for start in candidates:
            if start == 0 or text[start - 1] == '\n':
                return start
        return candidates[0] if candidates else -1

    def _open_block(self, fenced: str, stash: BlockStash) -> str:
        """Record an open block and stash its provisional rendering.

        Args:
            fenced: Text from the opening fence to the end of the input.
            stash: Store for the provisional block.

        Returns:
            Placeholder for the provisional block.
        """
        rest = fenced[len(OPEN_FENCE):]
        language, newline, content = rest.partition('\n')

        self._state.open = True
        self._state.language = language.strip()
        self._state.content = content if newline else ""
        _trace(
            f"open block: language={self._state.language!r} "
            f"content_len={len(self._state.content)}"
        )

        return stash.put(self._render_provisional(self._state.content))


def create_plugin() -> CodeBlockFormatterPlugin:
    """Factory function to create a CodeBlockFormatterPlugin instance."""
    return CodeBlockFormatterPlugin()
