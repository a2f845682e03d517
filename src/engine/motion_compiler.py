"""
Motion Compiler

Turns a marker's screen position, icon/shadow size and bouncing options into
the concrete visual state for every step of both phases. The result depends
on position, so it is compiled per marker and recompiled whenever the marker
moves or its options change.
"""

from __future__ import annotations

import math
from typing import Tuple

from engine.geometry import (
    rasterize_segment,
    scale_transform,
    scale_y_transform,
    translate_transform,
)
from models.bouncing import AnimationConfig, CompiledMotion, Point, TransformDescriptor
from models.errors import InvalidExtent
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.MOTION)


# ------------------------------------------------------------
# Transform path
# ------------------------------------------------------------

def icon_move_transforms(x: int, y: int, bounce_height: int) -> Tuple[TransformDescriptor, ...]:
    """One translation per pixel of lift, index = offset"""
    return tuple(translate_transform(x, y - offset) for offset in range(bounce_height + 1))


def shadow_move_transforms(x: int, y: int, bounce_height: int, angle: float) -> Tuple[TransformDescriptor, ...]:
    """Shadow slides along the projection line, one point per offset"""
    line = rasterize_segment(x, y, angle, bounce_height + 1)
    return tuple(translate_transform(p.x, p.y) for p in line)


def icon_resize_transforms(x: int, y: int, icon_height: int, contract_height: int) -> Tuple[TransformDescriptor, ...]:
    """Vertical squash keeping the icon's bottom anchor on the ground"""
    return tuple(
        scale_y_transform(x, y + offset, (icon_height - offset) / icon_height)
        for offset in range(contract_height + 1)
    )


def shadow_resize_transforms(
    x: int,
    y: int,
    shadow_width: int,
    shadow_height: int,
    contract_height: int,
    angle: float,
) -> Tuple[TransformDescriptor, ...]:
    """
    Shadow footprint follows the contraction.

    The shadow's (width, height) corner walks the reversed projection line;
    each point gives independent horizontal and vertical factors.
    """
    line = rasterize_segment(shadow_width, shadow_height, angle + math.pi, contract_height + 1)
    return tuple(
        scale_transform(
            x,
            y + shadow_height - p.y,
            shadow_width / max(p.x, 1),
            p.y / shadow_height,
        )
        for p in line
    )


# ------------------------------------------------------------
# Fallback path (no transform support)
# ------------------------------------------------------------

def icon_move_points(x: int, y: int, bounce_height: int) -> Tuple[Point, ...]:
    return tuple(Point(x, y - offset) for offset in range(bounce_height + 1))


def shadow_move_points(x: int, y: int, bounce_height: int, angle: float) -> Tuple[Point, ...]:
    return rasterize_segment(x, y, angle, bounce_height + 1)


# ------------------------------------------------------------
# Entry point
# ------------------------------------------------------------

def compile_motion(
    x: int,
    y: int,
    icon_height: int,
    shadow_width: int,
    shadow_height: int,
    config: AnimationConfig,
    use_transforms: bool = True,
) -> CompiledMotion:
    """
    Compile every visual state of one marker.

    Args:
        x, y: Marker position on the surface (px)
        icon_height: Icon height (px)
        shadow_width, shadow_height: Shadow size (px)
        config: Effective bouncing options of the marker
        use_transforms: Host can apply transforms; False compiles raw
            points for the move phase only

    Raises:
        InvalidExtent: non-positive icon or shadow size
    """
    for name, value in (
        ("icon_height", icon_height),
        ("shadow_width", shadow_width),
        ("shadow_height", shadow_height),
    ):
        if value <= 0:
            raise InvalidExtent(name, value)

    log.debug(
        "Compiling motion",
        position=(x, y),
        bounce_height=config.bounce_height,
        contract_height=config.contract_height,
        transforms=use_transforms,
    )

    if not use_transforms:
        return CompiledMotion(
            icon_move=icon_move_points(x, y, config.bounce_height),
            shadow_move=shadow_move_points(x, y, config.bounce_height, config.shadow_angle),
            uses_transforms=False,
        )

    return CompiledMotion(
        icon_move=icon_move_transforms(x, y, config.bounce_height),
        shadow_move=shadow_move_transforms(x, y, config.bounce_height, config.shadow_angle),
        icon_resize=icon_resize_transforms(x, y, icon_height, config.contract_height),
        shadow_resize=shadow_resize_transforms(
            x, y, shadow_width, shadow_height, config.contract_height, config.shadow_angle
        ),
        uses_transforms=True,
    )
