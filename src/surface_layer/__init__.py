"""
Surface layer - host side of the engine (surface, markers, element styles)
"""

from .marker import Marker, Evented, ElementStyle
from .marker_interface import IMarkerView
from .surface import Surface

__all__ = [
    "Marker",
    "Evented",
    "ElementStyle",
    "IMarkerView",
    "Surface",
]
