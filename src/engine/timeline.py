"""
Timeline Calculator

Derives the discrete steps of a phase and the cumulative delay before each
step. Pacing follows an inverse law: the wait between offset i and i+1 is
speed / (extent - i), so motion slows down toward the apex and speeds up
leaving it.

Results depend only on (phase, extent[, speed]) and are cached for the
life of the process. Cached tuples are shared between markers and never
mutated.
"""

from __future__ import annotations

from typing import Dict, Hashable, Optional, Tuple

from engine.geometry import round_half_up
from models.bouncing import AnimationConfig, Timeline
from models.enums import MotionPhase
from models.errors import InvalidExtent, InvalidSpeed
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TIMELINE)


def _check_extent(extent: int) -> None:
    if isinstance(extent, bool) or not isinstance(extent, int) or extent < 0:
        raise InvalidExtent("extent", extent)


def _check_speed(speed: int) -> None:
    if isinstance(speed, bool) or not isinstance(speed, (int, float)) or speed <= 0:
        raise InvalidSpeed("speed", speed)


class TimelineCalculator:
    """
    Memoizing steps/delays calculator.

    Cache keys are tuples:
        ("steps", phase, extent)
        ("delays", phase, extent, speed)

    Inserts go through dict.setdefault so two racing computations of the
    same key keep the first stored value.

    Example:
        calc = TimelineCalculator()
        calc.steps(3, MotionPhase.MOVE)          # (1, 2, 3, 2, 1, 0)
        calc.delays(3, 52, MotionPhase.MOVE)     # (0, 26, 78, 130, 182, 208)
    """

    _instance: Optional["TimelineCalculator"] = None

    def __init__(self) -> None:
        self._cache: Dict[Hashable, Tuple[int, ...]] = {}

    @classmethod
    def instance(cls) -> "TimelineCalculator":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # -----------------------------
    # Steps
    # -----------------------------
    def steps(self, extent: int, phase: MotionPhase) -> Tuple[int, ...]:
        """
        Symmetric rise-then-fall offsets: 1..extent, extent-1..0.

        Length is 2 * extent; extent 0 gives an empty tuple.
        """
        _check_extent(extent)
        key = ("steps", phase, extent)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        rising = tuple(range(1, extent + 1))
        falling = tuple(range(extent - 1, -1, -1))
        return self._store(key, rising + falling)

    # -----------------------------
    # Delays
    # -----------------------------
    def delays(self, extent: int, speed: int, phase: MotionPhase) -> Tuple[int, ...]:
        """
        Cumulative delays (ms from phase start) aligned with steps().

        Deltas going out are 0 at rest, round(speed / (extent - i)) in
        between and exactly ``speed`` at the full extent; the way back
        mirrors them. Length is 2 * extent.
        """
        _check_extent(extent)
        _check_speed(speed)
        key = ("delays", phase, extent, speed)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if extent == 0:
            return self._store(key, ())

        outbound = [0] * (extent + 1)
        outbound[extent] = speed
        for i in range(1, extent):
            outbound[i] = round_half_up(speed / (extent - i))

        deltas = outbound + outbound[extent - 1:0:-1]

        delays = []
        total = 0
        for delta in deltas:
            total += delta
            delays.append(total)

        return self._store(key, tuple(delays))

    # -----------------------------
    # Whole timeline
    # -----------------------------
    def timeline(self, config: AnimationConfig) -> Timeline:
        """Move and resize timelines for a marker configuration"""
        return Timeline(
            move_steps=self.steps(config.bounce_height, MotionPhase.MOVE),
            move_delays=self.delays(config.bounce_height, config.bounce_speed, MotionPhase.MOVE),
            resize_steps=self.steps(config.contract_height, MotionPhase.RESIZE),
            resize_delays=self.delays(config.contract_height, config.contract_speed, MotionPhase.RESIZE),
        )

    # -----------------------------
    # Cache helpers
    # -----------------------------
    def _store(self, key: Hashable, value: Tuple[int, ...]) -> Tuple[int, ...]:
        stored = self._cache.setdefault(key, value)
        if stored is value:
            log.debug("Timeline cached", key=key, length=len(value))
        return stored

    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        """Drop every cached entry (tests and shutdown only)."""
        self._cache.clear()
