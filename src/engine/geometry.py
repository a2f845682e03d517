"""
Geometry - pure pixel math for the bouncing engine

- rasterize_segment(): Bresenham walk along a directed segment
- translate/scale transforms for compositor-driven animation

Everything here is deterministic: the same inputs always produce equal
outputs, which is what lets timelines and motions be cached and compared.
"""

from __future__ import annotations

import math
from typing import Tuple

from models.bouncing import Point, TransformDescriptor
from models.errors import InvalidExtent


def round_half_up(value: float) -> int:
    """Round .5 toward +infinity (Python's round() is banker's rounding)"""
    return math.floor(value + 0.5)


def rasterize_segment(x0: int, y0: int, angle: float, length: int) -> Tuple[Point, ...]:
    """
    Integer points of the line leaving (x0, y0) at ``angle``.

    The slope is estimated against an endpoint placed at twice the requested
    length, which keeps short segments from degenerating into a single axis.
    Exactly ``length`` points are returned, the first one being the origin.

    Args:
        x0, y0: Origin (px)
        angle: Direction in radians (screen coordinates, y grows downward)
        length: Number of points to emit (>= 1)

    Raises:
        InvalidExtent: length < 1
    """
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise InvalidExtent("length", length)

    x_end = round_half_up(x0 + math.cos(angle) * (length * 2))
    y_end = round_half_up(y0 + math.sin(angle) * (length * 2))

    dx = abs(x_end - x0)
    sx = 1 if x0 < x_end else -1
    dy = abs(y_end - y0)
    sy = 1 if y0 < y_end else -1
    err = (dx if dx > dy else -dy) / 2

    x, y = x0, y0
    points = []
    while True:
        points.append(Point(x, y))
        if len(points) == length:
            break
        e2 = err
        if e2 > -dx:
            err -= dy
            x += sx
        if e2 < dy:
            err += dx
            y += sy

    return tuple(points)


def translate_transform(x: float, y: float) -> TransformDescriptor:
    """Identity scale, translation to (x, y)"""
    return TransformDescriptor(translate_x=x, translate_y=y)


def scale_transform(x: float, y: float, scale_x: float, scale_y: float) -> TransformDescriptor:
    """Independent horizontal/vertical scale, translation to (x, y)"""
    return TransformDescriptor(translate_x=x, translate_y=y, scale_x=scale_x, scale_y=scale_y)


def scale_y_transform(x: float, y: float, factor: float) -> TransformDescriptor:
    """Vertical-only scale about the anchor, translation to (x, y)"""
    return scale_transform(x, y, 1, factor)
