"""
IMarkerView Protocol
====================
What the bouncing engine needs from a host marker.
Minimal contract for any rendering backend (DOM, canvas, test double).
"""

from __future__ import annotations
from typing import Any, Callable, Optional, Protocol, Tuple

from models.bouncing import Point, TransformDescriptor


class IMarkerView(Protocol):
    """
    Protocol defining the host marker interface.

    All implementations must provide:
    - attached / position: where the marker currently sits on the surface
    - icon_size / shadow_size: pixel metrics (width, height)
    - on(): subscribe to "add", "remove", "move"
    - apply_transforms / apply_positions: render one visual state
    """

    @property
    def attached(self) -> bool:
        """True while the marker is on a surface."""
        ...

    @property
    def position(self) -> Optional[Point]:
        """Last screen position, None until first attached."""
        ...

    @property
    def icon_size(self) -> Tuple[int, int]:
        ...

    @property
    def shadow_size(self) -> Tuple[int, int]:
        ...

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        ...

    def apply_transforms(self, icon: TransformDescriptor, shadow: TransformDescriptor) -> None:
        """Render icon and shadow with compositor transforms."""
        ...

    def apply_positions(self, icon: Point, shadow: Point) -> None:
        """Render icon and shadow at raw left/top pixels (no transform support)."""
        ...
