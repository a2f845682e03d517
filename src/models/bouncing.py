"""
Bouncing domain models

Immutable values (configuration, timelines, compiled visual states) and the
mutable per-marker animation state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any, Dict, Mapping, NamedTuple, Optional, Tuple, Union

from models.enums import SchedulerState
from models.errors import InvalidExtent, InvalidOption, InvalidSpeed

if TYPE_CHECKING:
    from surface_layer.marker_interface import IMarkerView


class Point(NamedTuple):
    """Integer screen coordinates (px)"""
    x: int
    y: int


def _css_number(value: float) -> str:
    """Render a number the way a browser prints it in a style string"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


@dataclass(frozen=True)
class TransformDescriptor:
    """
    2D affine transform: non-uniform scale followed by a translation.

    Rendered as matrix3d() so the host can hand it to the compositor.
    """
    translate_x: float
    translate_y: float
    scale_x: float = 1
    scale_y: float = 1

    def to_css(self) -> str:
        values = (
            self.scale_x, 0, 0, 0,
            0, self.scale_y, 0, 0,
            0, 0, 1, 0,
            self.translate_x, self.translate_y, 0, 1,
        )
        return "matrix3d(" + ",".join(_css_number(v) for v in values) + ")"


VisualState = Union[TransformDescriptor, Point]


# Option name → (expected type label, validator kind)
_INT_EXTENTS = ("bounce_height", "contract_height")
_INT_SPEEDS = ("bounce_speed", "contract_speed")
_BOOLS = ("elastic", "exclusive")


@dataclass(frozen=True)
class AnimationConfig:
    """
    Bouncing options of one marker (or the service-wide defaults)

    Attributes:
        bounce_height: How high the marker bounces (px)
        contract_height: How much the marker contracts on landing (px)
        bounce_speed: Move speed coefficient (ms)
        contract_speed: Contraction speed coefficient (ms)
        shadow_angle: Shadow inclination angle (radians)
        elastic: Play the contraction phase between bounces
        exclusive: Only this marker may bounce while it bounces
    """
    bounce_height: int = 15
    contract_height: int = 12
    bounce_speed: int = 52
    contract_speed: int = 52
    shadow_angle: float = -math.pi / 4
    elastic: bool = True
    exclusive: bool = False

    def __post_init__(self):
        for name in _INT_EXTENTS + _INT_SPEEDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidOption(name, value, "an integer")

        if isinstance(self.shadow_angle, bool) or not isinstance(self.shadow_angle, (int, float)):
            raise InvalidOption("shadow_angle", self.shadow_angle, "a number of radians")

        for name in _BOOLS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidOption(name, value, "a boolean")

        for name in _INT_EXTENTS:
            if getattr(self, name) <= 0:
                raise InvalidExtent(name, getattr(self, name))

        for name in _INT_SPEEDS:
            if getattr(self, name) <= 0:
                raise InvalidSpeed(name, getattr(self, name))

    @classmethod
    def option_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def merged(self, options: Mapping[str, Any]) -> "AnimationConfig":
        """
        Return a copy with the known keys of ``options`` applied.

        Unknown keys are dropped; callers decide whether to warn about them.
        Raises the validation errors of the constructor.
        """
        known = {k: v for k, v in options.items() if k in self.option_names()}
        return replace(self, **known)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "AnimationConfig":
        return cls().merged(options)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.option_names()}


@dataclass(frozen=True)
class Timeline:
    """
    Steps and cumulative delays (ms) of both phases.

    move_delays[i] is the delay from phase start before move_steps[i]
    is applied. Tuples come from the timeline cache and are shared.
    """
    move_steps: Tuple[int, ...]
    move_delays: Tuple[int, ...]
    resize_steps: Tuple[int, ...]
    resize_delays: Tuple[int, ...]


@dataclass(frozen=True)
class CompiledMotion:
    """
    Per-pixel visual states of one marker for its current geometry.

    Index = timeline step. On the fallback path the move tuples hold raw
    Points and the resize tuples are empty.
    """
    icon_move: Tuple[VisualState, ...]
    shadow_move: Tuple[VisualState, ...]
    icon_resize: Tuple[VisualState, ...] = ()
    shadow_resize: Tuple[VisualState, ...] = ()
    uses_transforms: bool = True

    @property
    def can_resize(self) -> bool:
        return self.uses_transforms and bool(self.icon_resize)


@dataclass
class MarkerAnimationState:
    """
    Mutable animation state of a marker attached to a surface.

    Owned by the marker's BounceScheduler, discarded on removal.
    """
    marker: "IMarkerView"
    config: AnimationConfig
    x: int = 0
    y: int = 0
    timeline: Optional[Timeline] = None
    motion: Optional[CompiledMotion] = None
    is_bouncing: bool = False
    remaining_cycles: Optional[int] = None   # None = unbounded
    phase: SchedulerState = SchedulerState.IDLE
    stop_requested: bool = False
    cycles_played: int = field(default=0)
