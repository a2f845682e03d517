"""
Enums for the marker bouncing engine
"""

from enum import Enum, auto


class MotionPhase(Enum):
    """
    Animation segments composing one bounce cycle.

    Used as part of the timeline cache key, so MOVE and RESIZE timelines
    with the same extent never collide.
    """
    MOVE = auto()      # Rise and fall of the icon, oblique shadow slide
    RESIZE = auto()    # Contraction and expansion on the ground


class SchedulerState(Enum):
    """
    Per-marker scheduler states

    IDLE: Marker at rest, nothing scheduled
    MOVING: Move phase steps are queued
    RESIZING: Resize phase steps are queued
    WAITING: Pause of bounce_speed ms between two move phases
    """
    IDLE = auto()
    MOVING = auto()
    RESIZING = auto()
    WAITING = auto()


class TimerCategory(Enum):
    """Kind of deferred callback tracked by TimerRegistry"""
    MOVE_STEP = auto()
    RESIZE_STEP = auto()
    PHASE_BOUNDARY = auto()
    PAUSE = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, option validation
    GEOMETRY = auto()    # Line rasterization, transforms
    TIMELINE = auto()    # Steps/delays computation and cache
    MOTION = auto()      # Per-marker visual state compilation
    SCHEDULER = auto()   # Phase chaining, start/stop
    REGISTRY = auto()    # Bouncing markers set
    SURFACE = auto()     # Marker add/remove/move on the surface
    TIMER = auto()       # Deferred callbacks
    SYSTEM = auto()      # Startup, errors
    SHUTDOWN = auto()

    GENERAL = auto()     # Default general category
