# mdstream/plugins/inline_markdown_formatter/plugin.py
"""Inline markdown formatter plugin for HTML output.

This plugin transforms inline markdown elements into HTML. It handles:

- `code` → <code class="md-inline-code"> (content escaped)
- **bold** / __bold__ → <strong class="md-strong">
- *italic* / _italic_ → <em class="md-em">
- [text](url) → <a class="md-link"> opening in a new tab
- bare http(s) URLs → <a class="md-link">

All elements are found in one left-to-right scan with a single combined
pattern, so an element is never re-matched inside another one: code spans
win over emphasis, bold wins over italic, and explicit links win over bare
URLs. Bold content is rendered without nested emphasis, which keeps
``**a*b*c**`` as bold text with literal asterisks. Italic content may hold
closed bold, so ``*a **b** c*`` is italic text with a bold word.

Only text outside tags is scanned. Existing anchors and code elements,
HTML comments (stash placeholders) and every other tag are passed through
unchanged.

Underscore emphasis requires a non-word character (or the text edge) on
the outside of the markers, so identifiers like snake_case_name stay
intact.

Streaming strategy: the final line is checked for an unmatched ``**``
(then a single ``*``) outside closed elements. Such a marker can still be
closed by text that has not arrived yet, so it is recorded in the bound
EmphasisState and its partial content is shown in a provisional span.

Usage:
    from mdstream.plugins.inline_markdown_formatter import create_plugin

    formatter = create_plugin()
    html = formatter.format_inline("This is **bold** and `code`")
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from mdstream.escaping import escape_html
from mdstream.plugins.formatter_pipeline.stash import BlockStash
from mdstream.streaming.state import EmphasisState
from mdstream.trace import trace as _trace_write


def _trace(msg: str) -> None:
    """Write trace message to log file for debugging."""
    _trace_write("INLINE_MD_FORMATTER", msg)


# Priority: after lists (35), before rules (45) and blockquotes (50)
DEFAULT_PRIORITY = 40

PROVISIONAL_CLASS = "md-provisional"

LINK_ATTRIBUTES = 'class="md-link" target="_blank" rel="noopener noreferrer"'

# Combined regex for inline markdown elements.
# Order matters: earlier alternatives win at the same position.
#
# Asterisk emphasis ensures no whitespace immediately inside the markers
# to prevent false positives like "2 * 3 * 4" being treated as italic.
INLINE_MD_PATTERN = re.compile(
    r'(?P<code>`(?P<code_text>[^`\n]+)`)'                                        # `code`
    r'|(?P<bold>\*\*(?!\s)(?P<bold_text>.+?)(?<!\s)\*\*)'                        # **bold**
    r'|(?P<bold_u>(?<!\w)__(?!\s)(?P<bold_u_text>.+?)(?<!\s)__(?!\w))'           # __bold__
    r'|(?P<italic>(?<!\*)\*(?!\*|\s)'                                            # *italic*
    r'(?P<italic_text>(?:\*\*(?!\s)[^*\n]+?(?<!\s)\*\*|[^*\n])+?)(?<!\s)\*(?!\*))'  # may hold **bold**
    r'|(?P<italic_u>(?<!\w)_(?!_|\s)(?P<italic_u_text>[^_\n]+?)(?<!\s)_(?!\w))'  # _italic_
    r'|(?P<link>\[(?P<link_text>[^\]\n]+)\]\((?P<link_url>[^)\s]+)\))'           # [text](url)
    r'|(?P<url>https?://[^\s<]+[^<.,:;"\')\]\s])'                                 # bare URL
)

# Spans of the text that are never scanned: comments, whole anchors and
# code elements, and any other single tag. Inline code spans are matched
# too, only so that tag-like text inside backticks stays plain text.
PROTECTED_PATTERN = re.compile(
    r'(?P<code_span>`[^`\n]+`)'
    r'|<!--[\s\S]*?-->'
    r'|<(?P<element>a|code)\b[^>]*>[\s\S]*?</(?P=element)>'
    r'|</?[A-Za-z][^<>]*>'
)

# Unmatched openers that may still be closed by later text
OPEN_BOLD_PATTERN = re.compile(r'\*\*(?=\S)')
OPEN_ITALIC_PATTERN = re.compile(r'(?<!\*)\*(?=[^*\s])')

# Quick check: if a chunk contains none of these characters, skip regex
_MARKER_CHARS = frozenset('`*_[')


class InlineMarkdownFormatterPlugin:
    """Plugin that formats inline markdown elements as HTML.

    Implements the FormatterPlugin protocol. Stateless unless bound to
    bold/italic EmphasisState records via bind_state(), in which case it
    also renders provisional spans for emphasis still being typed.
    """

    def __init__(self):
        self._priority = DEFAULT_PRIORITY
        self._bold_state: Optional[EmphasisState] = None
        self._italic_state: Optional[EmphasisState] = None

    # ==================== FormatterPlugin Protocol ====================

    @property
    def name(self) -> str:
        """Unique identifier for this formatter."""
        return "inline_markdown_formatter"

    @property
    def priority(self) -> int:
        """Execution priority (40 = after block structure, before quotes)."""
        return self._priority

    def format(self, text: str, stash: BlockStash) -> str:
        """Format inline elements in all text outside tags.

        Args:
            text: Text with block structure already rendered.
            stash: Unused; inline markup stays visible to later formatters.

        Returns:
            Text with inline markdown replaced by HTML.
        """
        if self._bold_state is None or self._italic_state is None:
            return self.format_inline(text)
        return self._format_streaming(text)

    def reset(self) -> None:
        """Reset streaming state for a new stream."""
        if self._bold_state is not None:
            self._bold_state.close()
        if self._italic_state is not None:
            self._italic_state.close()

    # ==================== Configuration ====================

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the formatter with configuration.

        Args:
            config: Dict with optional settings:
                - priority: Pipeline priority (default: 40)
        """
        config = config or {}
        self._priority = config.get("priority", DEFAULT_PRIORITY)

    def bind_state(
        self,
        bold: Optional[EmphasisState],
        italic: Optional[EmphasisState],
    ) -> None:
        """Bind streaming state for open bold and italic runs."""
        self._bold_state = bold
        self._italic_state = italic

    # ==================== Formatting ====================

    def format_inline(self, text: str) -> str:
        """Format inline markdown in text, leaving existing markup alone."""
        return ''.join(
            chunk if is_markup else self._format_chunk(chunk)
            for is_markup, chunk in _split_protected(text)
        )

    def _format_chunk(
        self,
        text: str,
        allow_emphasis: bool = True,
        allow_links: bool = True,
    ) -> str:
        """Apply the inline pattern to a chunk of plain text.

        Iterates through regex matches left to right, emitting plain text
        between matches and HTML for matched elements. Elements disabled by
        the flags are emitted as their literal source.
        """
        if not text:
            return text

        # Quick check: skip regex if no marker character or URL is present
        if not _MARKER_CHARS.intersection(text) and '://' not in text:
            return text

        result_parts = []
        last_end = 0

        for match in INLINE_MD_PATTERN.finditer(text):
            if match.start() > last_end:
                result_parts.append(text[last_end:match.start()])
            result_parts.append(
                self._render_match(match, allow_emphasis, allow_links)
            )
            last_end = match.end()

        if last_end < len(text):
            result_parts.append(text[last_end:])

        return ''.join(result_parts)

    def _render_match(
        self,
        match: re.Match,
        allow_emphasis: bool,
        allow_links: bool,
    ) -> str:
        """Render one matched inline element."""
        if match.group('code'):
            return f'<code class="md-inline-code">{escape_html(match.group("code_text"))}</code>'

        if match.group('bold') or match.group('bold_u'):
            if not allow_emphasis:
                return self._format_literal_emphasis(match.group(0), allow_links)
            content = match.group('bold_text') or match.group('bold_u_text')
            inner = self._format_chunk(content, allow_emphasis=False, allow_links=allow_links)
            return f'<strong class="md-strong">{inner}</strong>'

        if match.group('italic') or match.group('italic_u'):
            if not allow_emphasis:
                return self._format_literal_emphasis(match.group(0), allow_links)
            content = match.group('italic_text') or match.group('italic_u_text')
            inner = self._format_chunk(content, allow_emphasis=True, allow_links=allow_links)
            return f'<em class="md-em">{inner}</em>'

        if match.group('link'):
            if not allow_links:
                return match.group(0)
            url = match.group('link_url')
            label = self._format_chunk(
                match.group('link_text'), allow_emphasis=allow_emphasis, allow_links=False
            )
            return f'<a href="{url}" {LINK_ATTRIBUTES}>{label}</a>'

        url = match.group('url')
        if not allow_links:
            return url
        return f'<a href="{url}" {LINK_ATTRIBUTES}>{url}</a>'

    def _format_literal_emphasis(self, source: str, allow_links: bool) -> str:
        """Keep emphasis markers literal while still formatting code and links.

        The outer markers are emitted as-is; only the text between them is
        scanned again.
        """
        marker_len = 2 if source[:2] in ('**', '__') else 1
        marker = source[:marker_len]
        inner = source[marker_len:-marker_len]
        return (
            marker
            + self._format_chunk(inner, allow_emphasis=False, allow_links=allow_links)
            + marker
        )

    # ==================== Streaming ====================

    def _format_streaming(self, text: str) -> str:
        """Format text and track emphasis left open on the final non-blank line."""
        body_end = len(text.rstrip('\n'))
        line_start = text.rfind('\n', 0, body_end) + 1
        head, last_line, tail = text[:line_start], text[line_start:body_end], text[body_end:]
        chunks = _split_protected(last_line)

        target = None
        for index in range(len(chunks) - 1, -1, -1):
            is_markup, chunk = chunks[index]
            if not is_markup and chunk:
                target = index
                break

        split = None
        if target is not None:
            split = self._split_open_emphasis(chunks[target][1])

        if split is None:
            self._close_states()
            return self.format_inline(text)

        prefix, kind, content = split
        if kind == 'strong':
            self._bold_state.open = True
            self._bold_state.content = content
            self._italic_state.close()
        else:
            self._italic_state.open = True
            self._italic_state.content = content
            self._bold_state.close()
        _trace(f"open {kind}: content_len={len(content)}")

        parts = [self.format_inline(head)]
        for index, (is_markup, chunk) in enumerate(chunks):
            if index == target:
                parts.append(self._format_chunk(prefix))
                parts.append(
                    f'<span class="{PROVISIONAL_CLASS} {PROVISIONAL_CLASS}-{kind}">'
                    f'{content}</span>'
                )
            elif is_markup:
                parts.append(chunk)
            else:
                parts.append(self._format_chunk(chunk))
        parts.append(tail)
        return ''.join(parts)

    def _split_open_emphasis(self, chunk: str) -> Optional[Tuple[str, str, str]]:
        """Find an emphasis opener that later text could still close.

        Bold is checked first, over the whole chunk: a ``**`` outside closed
        elements with no ``**`` after it is open, whatever closed elements
        follow it. Only then is italic checked: the last single ``*``
        outside closed elements, unless a closed italic follows it.

        Returns:
            (text before the opener, "strong" or "em", partial content),
            or None if nothing is open.
        """
        closed = list(INLINE_MD_PATTERN.finditer(chunk))

        def outside_closed(opener: re.Match) -> bool:
            return not any(m.start() <= opener.start() < m.end() for m in closed)

        bold_openers = [
            opener for opener in OPEN_BOLD_PATTERN.finditer(chunk)
            if outside_closed(opener) and '**' not in chunk[opener.end():]
        ]
        if bold_openers:
            opener = bold_openers[-1]
            return chunk[:opener.start()], 'strong', chunk[opener.end():]

        italic_openers = [
            opener for opener in OPEN_ITALIC_PATTERN.finditer(chunk)
            if outside_closed(opener)
        ]
        if italic_openers:
            opener = italic_openers[-1]
            if not any(m.group('italic') and m.start() > opener.start() for m in closed):
                return chunk[:opener.start()], 'em', chunk[opener.end():]

        return None

    def _close_states(self) -> None:
        if self._bold_state.open or self._italic_state.open:
            _trace("emphasis closed")
        self._bold_state.close()
        self._italic_state.close()


def _split_protected(text: str) -> List[Tuple[bool, str]]:
    """Split text into (is_markup, chunk) pairs.

    Markup chunks are matches of PROTECTED_PATTERN; everything between
    them, code spans included, is plain text. Empty plain chunks are kept
    so the result always alternates around markup.
    """
    chunks: List[Tuple[bool, str]] = []
    last_end = 0
    for match in PROTECTED_PATTERN.finditer(text):
        if match.group('code_span'):
            continue
        chunks.append((False, text[last_end:match.start()]))
        chunks.append((True, match.group(0)))
        last_end = match.end()
    chunks.append((False, text[last_end:]))
    return chunks


def create_plugin() -> InlineMarkdownFormatterPlugin:
    """Factory function to create an InlineMarkdownFormatterPlugin instance."""
    return InlineMarkdownFormatterPlugin()
