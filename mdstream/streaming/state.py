"""Per-stream formatter state.

Each record tracks at most one unterminated construct of its kind. A new
construct start overwrites the previous unterminated one; nesting and
several simultaneous open constructs of one kind are not modelled.
"""

from dataclasses import dataclass, field
from enum import Enum


class ListKind(str, Enum):
    """Kinds of list runs."""

    UNORDERED = "unordered"
    ORDERED = "ordered"


@dataclass
class CodeBlockState:
    """State of the most recent fenced code block.

    Attributes:
        open: True while an opening fence has no closing fence yet
        language: Language tag as typed after the opening fence
        content: Code accumulated after the opening fence
    """

    open: bool = False
    language: str = ""
    content: str = ""

    def close(self) -> None:
        """Mark the block closed and drop the partial content."""
        self.open = False
        self.language = ""
        self.content = ""


@dataclass
class EmphasisState:
    """State of an emphasis run (bold or italic)."""

    open: bool = False
    content: str = ""

    def close(self) -> None:
        """Mark the run closed and drop the partial content."""
        self.open = False
        self.content = ""


@dataclass
class ListState:
    """State of the list run at the end of the text.

    Attributes:
        open: True while the trailing list run may still grow
        kind: Kind of the open run (meaningful only while open)
        content: Raw lines of the open run
    """

    open: bool = False
    kind: ListKind = ListKind.UNORDERED
    content: str = ""

    def close(self) -> None:
        """Mark the run closed and drop the partial content."""
        self.open = False
        self.kind = ListKind.UNORDERED
        self.content = ""


@dataclass
class FormatterState:
    """Streaming state for one logical stream.

    Created closed/empty, mutated in place while the stream is rendered,
    and reset (never replaced) between streams.
    """

    code_block: CodeBlockState = field(default_factory=CodeBlockState)
    bold: EmphasisState = field(default_factory=EmphasisState)
    italic: EmphasisState = field(default_factory=EmphasisState)
    list: ListState = field(default_factory=ListState)

    def reset(self) -> None:
        """Restore every record to its initial closed/empty value."""
        self.code_block.close()
        self.bold.close()
        self.italic.close()
        self.list.close()

    @property
    def has_open_construct(self) -> bool:
        """Check if any construct is still open."""
        return (
            self.code_block.open
            or self.bold.open
            or self.italic.open
            or self.list.open
        )

    def as_dict(self) -> dict:
        """Snapshot the state as plain data (for display and tracing)."""
        return {
            "code_block": {
                "open": self.code_block.open,
                "language": self.code_block.language,
                "content": self.code_block.content,
            },
            "bold": {"open": self.bold.open, "content": self.bold.content},
            "italic": {"open": self.italic.open, "content": self.italic.content},
            "list": {
                "open": self.list.open,
                "kind": self.list.kind.value,
                "content": self.list.content,
            },
        }
