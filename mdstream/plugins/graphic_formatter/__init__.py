# mdstream/plugins/graphic_formatter/__init__.py
"""Graphic formatter plugin.

Renders <graphic> blocks (circle diagrams, bar diagrams, nested circles)
as styled HTML. Unknown graphic types render a visible notice.
"""

from .plugin import GraphicFormatterPlugin, create_plugin
from .renderer import Graphic, GraphicItem

__all__ = ["GraphicFormatterPlugin", "create_plugin", "Graphic", "GraphicItem"]
