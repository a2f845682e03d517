"""
Inline style helpers

The host keeps icon and shadow styles as cssText strings. The bouncing
engine strips the properties it drives (transform, z-index) once at attach
time and re-renders the rest in front of every visual state.
"""

import re
from typing import Dict

_STYLE_RE = re.compile(r"([\w-]+): ([^;]+);")


def parse_css_text(css_text: str) -> Dict[str, str]:
    """
    Parse a cssText string into an ordered property → value dict.

    Example:
        parse_css_text("left: 3px; top: 4px;")  # {'left': '3px', 'top': '4px'}
    """
    return {m.group(1): m.group(2) for m in _STYLE_RE.finditer(css_text or "")}


def render_css_text(styles: Dict[str, str]) -> str:
    """Render a property dict back to cssText ("key: value; " per entry)"""
    return "".join(f"{key}: {value}; " for key, value in styles.items())


def strip_properties(css_text: str, *names: str) -> str:
    """Drop the given properties from a cssText string"""
    styles = parse_css_text(css_text)
    for name in names:
        styles.pop(name, None)
    return render_css_text(styles)
