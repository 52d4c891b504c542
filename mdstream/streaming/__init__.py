"""Streaming-mode state tracking."""

from mdstream.streaming.state import (
    CodeBlockState,
    EmphasisState,
    FormatterState,
    ListKind,
    ListState,
)

__all__ = [
    "CodeBlockState",
    "EmphasisState",
    "FormatterState",
    "ListKind",
    "ListState",
]
