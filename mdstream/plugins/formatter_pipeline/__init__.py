# mdstream/plugins/formatter_pipeline/__init__.py
"""Ordered formatter pipeline for rendering text through registered formatters.

Each formatter is a text-to-text rewrite run in priority order. Rendered
blocks are parked in a BlockStash so that later formatters never rewrite
markup produced by earlier ones.

Example:
    from mdstream.plugins.formatter_pipeline import create_default_pipeline

    pipeline = create_default_pipeline()
    html = pipeline.format(markdown_text)
"""

from .protocol import FormatterPlugin, ConfigurableFormatter
from .stash import BlockStash, isolate_block
from .pipeline import FormatterPipeline, create_pipeline
from .registry import FormatterRegistry, create_registry, create_default_pipeline

__all__ = [
    "FormatterPlugin",
    "ConfigurableFormatter",
    "BlockStash",
    "isolate_block",
    "FormatterPipeline",
    "create_pipeline",
    "FormatterRegistry",
    "create_registry",
    "create_default_pipeline",
]
