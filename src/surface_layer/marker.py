"""
Marker - In-memory host marker
==============================
Point marker made of an icon element and a shadow element, each carrying an
inline style string like a DOM node would.

Responsibilities:
- Position on the surface and "move" notifications
- Base style bookkeeping (properties not driven by the animation)
- Rendering one visual state (transform or left/top)

Does NOT:
- Know anything about bouncing (BouncingService hooks in through events)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from models.bouncing import Point, TransformDescriptor
from utils.css import parse_css_text, render_css_text, strip_properties

if TYPE_CHECKING:
    from surface_layer.surface import Surface

Handler = Callable[..., Any]


class Evented:
    """Minimal event emitter: on / off / fire"""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def on(self, event: str, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def fire(self, event: str, **data: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler(self, **data)


class ElementStyle:
    """Inline style of one element (icon or shadow)"""

    def __init__(self, css_text: str = ""):
        self.css_text = css_text

    def get(self, name: str) -> Optional[str]:
        return parse_css_text(self.css_text).get(name)

    def __repr__(self) -> str:
        return f"ElementStyle({self.css_text!r})"


class Marker(Evented):
    """
    Host marker

    Args:
        name: Label used in logs
        icon_size: Icon (width, height) in px
        shadow_size: Shadow (width, height) in px
        z_index: Stacking order re-applied with every visual state
        icon_css / shadow_css: Initial inline styles

    Example:
        marker = Marker("pin-1", icon_size=(25, 41), shadow_size=(41, 41))
        surface.add_marker(marker, 120, 80)
        marker.set_position(130, 80)   # fires "move"
    """

    def __init__(
        self,
        name: str = "",
        icon_size: Tuple[int, int] = (25, 41),
        shadow_size: Tuple[int, int] = (41, 41),
        z_index: int = 0,
        icon_css: str = "",
        shadow_css: str = "",
    ):
        super().__init__()
        self.name = name
        self._icon_size = tuple(icon_size)
        self._shadow_size = tuple(shadow_size)
        self.z_index = z_index

        self.icon = ElementStyle(icon_css)
        self.shadow = ElementStyle(shadow_css)

        self.surface: Optional["Surface"] = None
        self._position: Optional[Point] = None

        self._base_icon_css = ""
        self._base_shadow_css = ""
        self.render_count = 0

    # ------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------

    @property
    def attached(self) -> bool:
        return self.surface is not None

    @property
    def position(self) -> Optional[Point]:
        return self._position

    @property
    def icon_size(self) -> Tuple[int, int]:
        return self._icon_size

    @property
    def shadow_size(self) -> Tuple[int, int]:
        return self._shadow_size

    def set_position(self, x: int, y: int) -> None:
        """Move the marker; attached markers re-render at rest and fire "move"."""
        self._position = Point(x, y)
        if not self.attached:
            return
        self._render_rest()
        self.fire("move", x=x, y=y)

    # ------------------------------------------------------------
    # Surface lifecycle (called by Surface)
    # ------------------------------------------------------------

    def _on_add(self, surface: "Surface", x: int, y: int) -> None:
        self.surface = surface
        self._position = Point(x, y)

        # Keep everything the animation does not drive
        self._base_icon_css = strip_properties(self.icon.css_text, "transform", "z-index", "left", "top")
        self._base_shadow_css = strip_properties(self.shadow.css_text, "transform", "left", "top")

        self._render_rest()
        self.fire("add")

    def _on_remove(self) -> None:
        self.fire("remove")
        self.surface = None

    # ------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------

    def _render_rest(self) -> None:
        pos = self._position
        rest = TransformDescriptor(translate_x=pos.x, translate_y=pos.y)
        self.icon.css_text = self._icon_css({"transform": rest.to_css()})
        self.shadow.css_text = self._shadow_css({"transform": rest.to_css()})

    def _icon_css(self, extra: Dict[str, str]) -> str:
        styles = parse_css_text(self._base_icon_css)
        styles["z-index"] = str(self.z_index)
        styles.update(extra)
        return render_css_text(styles)

    def _shadow_css(self, extra: Dict[str, str]) -> str:
        styles = parse_css_text(self._base_shadow_css)
        styles.update(extra)
        return render_css_text(styles)

    def apply_transforms(self, icon: TransformDescriptor, shadow: TransformDescriptor) -> None:
        self.icon.css_text = self._icon_css({"transform": icon.to_css()})
        self.shadow.css_text = self._shadow_css({"transform": shadow.to_css()})
        self.render_count += 1

    def apply_positions(self, icon: Point, shadow: Point) -> None:
        self.icon.css_text = self._icon_css({"left": f"{icon.x}px", "top": f"{icon.y}px"})
        self.shadow.css_text = self._shadow_css({"left": f"{shadow.x}px", "top": f"{shadow.y}px"})
        self.render_count += 1

    def __repr__(self) -> str:
        return f"Marker({self.name!r})"
