"""HTML escaping for text that must appear literally in rendered output."""

# Ampersand must stay first.
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text: str) -> str:
    """Escape the five HTML-sensitive characters."""
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text
