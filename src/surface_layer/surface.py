"""
Surface - 2D canvas holding markers
===================================
Owns the set of attached markers and announces additions and removals so
services can create or discard per-marker state.
"""

from __future__ import annotations

from typing import List

from surface_layer.marker import Evented, Marker
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SURFACE)


class Surface(Evented):
    """
    Rendering surface

    Args:
        supports_transforms: Host can apply compositor transforms
            (matrix3d). Without it markers are placed by left/top and the
            contraction phase is unavailable.

    Events:
        "markeradd"    (marker=...) after the marker is attached
        "markerremove" (marker=...) before the marker is detached
    """

    def __init__(self, supports_transforms: bool = True):
        super().__init__()
        self.supports_transforms = supports_transforms
        self._markers: List[Marker] = []

    @property
    def markers(self) -> List[Marker]:
        return list(self._markers)

    def add_marker(self, marker: Marker, x: int, y: int) -> Marker:
        if marker.surface is self:
            marker.set_position(x, y)
            return marker
        if marker.attached:
            marker.surface.remove_marker(marker)

        self._markers.append(marker)
        marker._on_add(self, x, y)
        log.debug("Marker added", marker=marker.name, position=(x, y))
        self.fire("markeradd", marker=marker)
        return marker

    def remove_marker(self, marker: Marker) -> None:
        if marker not in self._markers:
            return
        self.fire("markerremove", marker=marker)
        self._markers.remove(marker)
        marker._on_remove()
        log.debug("Marker removed", marker=marker.name)

    def clear(self) -> None:
        for marker in list(self._markers):
            self.remove_marker(marker)
