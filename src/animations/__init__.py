"""
Animation schedulers

Current implementation:
- bounce_scheduler: per-marker bounce state machine
"""

from .bounce_scheduler import BounceScheduler

__all__ = [
    "BounceScheduler",
]
