"""
Models package - Data models for the marker bouncing engine
"""

from .enums import MotionPhase, SchedulerState, TimerCategory, LogLevel, LogCategory
from .errors import BouncingError, InvalidExtent, InvalidSpeed, InvalidCycles, InvalidOption, NotAttached
from .bouncing import (
    Point,
    TransformDescriptor,
    AnimationConfig,
    Timeline,
    CompiledMotion,
    MarkerAnimationState,
)

__all__ = [
    'MotionPhase',
    'SchedulerState',
    'TimerCategory',
    'LogLevel',
    'LogCategory',
    'BouncingError',
    'InvalidExtent',
    'InvalidSpeed',
    'InvalidCycles',
    'InvalidOption',
    'NotAttached',
    'Point',
    'TransformDescriptor',
    'AnimationConfig',
    'Timeline',
    'CompiledMotion',
    'MarkerAnimationState',
]
