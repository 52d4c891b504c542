# mdstream/plugins/formatter_pipeline/stash.py
"""Placeholder store for rendered blocks that later passes must not touch.

A stashed block is replaced in the text by an HTML comment placeholder on
its own blank-line-delimited segment. Downstream passes see an inert tag:
it carries no markdown delimiters, the inline pass skips tags, and the
paragraph pass leaves segments starting with ``<`` alone. The pipeline
expands placeholders back into markup once every pass has run.

Each stash stamps its placeholders with a random token, so a
placeholder-shaped comment that arrives in the input text is never mistaken
for a stashed block.
"""

import re
import uuid
from typing import List, Optional

PLACEHOLDER_TEMPLATE = "<!--mdstream-block-{token}-{index}-->"
PLACEHOLDER_PATTERN = re.compile(r"<!--mdstream-block-(\w+)-(\d+)-->")


def isolate_block(html: str) -> str:
    """Surround block markup with blank lines.

    The paragraph pass splits on blank lines, so an isolated block always
    forms a segment of its own instead of being wrapped into the
    surrounding paragraph.
    """
    return "\n\n" + html + "\n\n"


class BlockStash:
    """Holds rendered blocks for the duration of one pipeline run."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or uuid.uuid4().hex[:12]
        self._blocks: List[str] = []

    def __len__(self) -> int:
        return len(self._blocks)

    @property
    def token(self) -> str:
        return self._token

    def placeholder(self, index: int) -> str:
        """The bare placeholder for the block stored at index."""
        return PLACEHOLDER_TEMPLATE.format(token=self._token, index=index)

    def put(self, html: str) -> str:
        """Store rendered markup and return its isolated placeholder.

        Args:
            html: Rendered markup to protect.

        Returns:
            Placeholder text to substitute into the document.
        """
        index = len(self._blocks)
        self._blocks.append(html)
        return isolate_block(self.placeholder(index))

    def expand(self, text: str) -> str:
        """Replace every placeholder with its stored markup.

        Placeholder-shaped comments that this stash did not issue are left
        untouched.
        """
        if not self._blocks:
            return text

        def _restore(match: re.Match) -> str:
            index = int(match.group(2))
            if match.group(1) == self._token and index < len(self._blocks):
                return self._blocks[index]
            return match.group(0)

        return PLACEHOLDER_PATTERN.sub(_restore, text)
