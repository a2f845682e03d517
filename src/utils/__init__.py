"""
Utility functions for the marker bouncing engine
"""

from .css import parse_css_text, render_css_text, strip_properties

__all__ = [
    'parse_css_text',
    'render_css_text',
    'strip_properties',
]
