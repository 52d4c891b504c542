# mdstream/plugins/graphic_formatter/renderer.py
"""Graphic block parsing and rendering: <graphic> markup → HTML.

A graphic block looks like:

    <graphic type="bar-diagram" title="Share">
      <item label="A" color="red" width="50%"/>
      <item label="B" color="#36c" width="30%"/>
    </graphic>

Items carry ``label``, ``color`` and a dimension given either as ``size``
(circle diagrams) or ``width`` (bar diagrams). Each supported ``type`` has
a renderer in GRAPHIC_RENDERERS; unknown types render a one-line notice
instead of failing.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from mdstream.escaping import escape_html

GRAPHIC_PATTERN = re.compile(r'<graphic\b([^>]*)>([\s\S]*?)</graphic>')
ITEM_PATTERN = re.compile(r'<item\b([^>]*?)/>')
ATTRIBUTE_PATTERN = re.compile(r'([\w-]+)="([^"]*)"')


@dataclass
class GraphicItem:
    """One labeled item of a graphic. Order in the block is significant."""

    label: str
    color: str
    dimension: str


@dataclass
class Graphic:
    """A parsed graphic block."""

    kind: str
    title: str
    items: List[GraphicItem] = field(default_factory=list)


def parse_attributes(tag_body: str) -> Dict[str, str]:
    """Extract name="value" attributes from the inside of a tag."""
    return dict(ATTRIBUTE_PATTERN.findall(tag_body))


def parse_item(tag_body: str) -> Optional[GraphicItem]:
    """Parse one <item .../> tag body.

    Returns:
        The item, or None when label, color or a dimension is missing.
    """
    attrs = parse_attributes(tag_body)
    dimension = attrs.get("size") or attrs.get("width")
    if not attrs.get("label") or not attrs.get("color") or not dimension:
        return None
    return GraphicItem(label=attrs["label"], color=attrs["color"], dimension=dimension)


def parse_graphic(attributes: str, body: str) -> Graphic:
    """Parse a graphic block from its opening-tag attributes and body.

    Args:
        attributes: Text between ``<graphic`` and ``>``.
        body: Text between the opening and closing tags.

    Returns:
        Parsed Graphic; malformed items are skipped.
    """
    attrs = parse_attributes(attributes)
    items = []
    for match in ITEM_PATTERN.finditer(body):
        item = parse_item(match.group(1))
        if item is not None:
            items.append(item)
    return Graphic(kind=attrs.get("type", ""), title=attrs.get("title", ""), items=items)


def _render_frame(graphic: Graphic, css_class: str, container_class: str,
                  item_parts: List[str]) -> str:
    """Wrap rendered items in the titled frame shared by all graphic types."""
    return "\n".join([
        f'<div class="{css_class}">',
        f'<h5>{escape_html(graphic.title)}</h5>',
        f'<div class="{container_class}">',
        *item_parts,
        '</div>',
        '</div>',
    ])


def _render_item(css_class: str, style: str, label: str) -> str:
    return f'<div class="{css_class}" style="{style}"><span>{escape_html(label)}</span></div>'


def render_circle_diagram(graphic: Graphic) -> str:
    """One circle per item, sized by the item's dimension."""
    parts = [
        _render_item(
            "circle",
            f"background: {item.color}; width: {item.dimension}; height: {item.dimension};",
            item.label,
        )
        for item in graphic.items
    ]
    return _render_frame(graphic, "graphic-circle-diagram", "circles", parts)


def render_bar_diagram(graphic: Graphic) -> str:
    """One horizontal bar per item, as wide as the item's dimension."""
    parts = [
        _render_item(
            "bar",
            f"background: {item.color}; width: {item.dimension};",
            item.label,
        )
        for item in graphic.items
    ]
    return _render_frame(graphic, "graphic-bar-diagram", "bars", parts)


def render_nested_circles(graphic: Graphic) -> str:
    """Stacked circles; earlier items sit above later ones."""
    count = len(graphic.items)
    parts = [
        _render_item(
            "nested-circle",
            f"background: {item.color}; width: {item.dimension}; "
            f"height: {item.dimension}; z-index: {count - i};",
            item.label,
        )
        for i, item in enumerate(graphic.items)
    ]
    return _render_frame(
        graphic, "graphic-nested-circles", "nested-circles-container", parts
    )


def render_unsupported(graphic: Graphic) -> str:
    """Visible notice for a graphic type without a renderer."""
    return (
        f'<p class="graphic-unsupported">'
        f'Unsupported graphic type: {escape_html(graphic.kind)}</p>'
    )


GRAPHIC_RENDERERS: Dict[str, Callable[[Graphic], str]] = {
    "circle-diagram": render_circle_diagram,
    "bar-diagram": render_bar_diagram,
    "nested-circles": render_nested_circles,
}


def render(graphic: Graphic) -> str:
    """Render a parsed graphic with the renderer for its type."""
    renderer = GRAPHIC_RENDERERS.get(graphic.kind, render_unsupported)
    return renderer(graphic)
