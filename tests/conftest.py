"""
Shared fixtures for the bouncing engine tests.

Timers run on ManualClock: nothing fires until a test advances time, so
every step of an animation can be inspected deterministically.
"""

import heapq
import itertools
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from engine.timeline import TimelineCalculator
from lifecycle.timer_registry import TimerRegistry
from services.bouncing_registry import BouncingRegistry
from services.bouncing_service import BouncingService
from surface_layer.marker import Marker
from surface_layer.surface import Surface


class ManualHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualClock:
    """
    call_later() look-alike driven by advance(ms).

    Callbacks fire in due-time order, ties in scheduling order. Callbacks
    scheduled while advancing fire in the same advance() if they fall due.
    """

    def __init__(self):
        self.now_ms = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback, *args):
        handle = ManualHandle()
        due = self.now_ms + round(delay * 1000, 3)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback, args))
        return handle

    def advance(self, ms):
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = due
            callback(*args)
        self.now_ms = target

    def run_all(self, limit_ms=60_000):
        """Advance until nothing is pending (bounded for endless bounces)."""
        while self.pending_count() and self.now_ms < limit_ms:
            self.advance(self._queue[0][0] - self.now_ms)

    def pending_count(self):
        return sum(1 for entry in self._queue if not entry[2].cancelled)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def timers(clock):
    return TimerRegistry(clock)


@pytest.fixture
def registry():
    return BouncingRegistry()


@pytest.fixture
def calculator():
    return TimelineCalculator()


@pytest.fixture
def surface():
    return Surface(supports_transforms=True)


@pytest.fixture
def marker(surface):
    m = Marker("pin-1", icon_size=(25, 41), shadow_size=(41, 41))
    surface.add_marker(m, 100, 200)
    return m


@pytest.fixture
def small_options():
    """Short timelines: move 208 ms, contraction 60 ms."""
    return {
        "bounce_height": 3,
        "bounce_speed": 52,
        "contract_height": 2,
        "contract_speed": 20,
    }


@pytest.fixture
def service(surface, timers, registry, calculator):
    svc = BouncingService(surface, timers=timers, registry=registry, calculator=calculator)
    yield svc
    svc.shutdown()
