# mdstream/plugins/list_formatter/__init__.py
"""List formatter plugin.

Renders runs of ``- item`` / ``1. item`` lines as list elements, keeping
a still-growing trailing run open while streaming.
"""

from .plugin import ListFormatterPlugin, create_plugin

__all__ = ["ListFormatterPlugin", "create_plugin"]
