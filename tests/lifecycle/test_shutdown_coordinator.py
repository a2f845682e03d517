"""
Tests for ShutdownCoordinator and BouncingShutdownHandler.
"""

import asyncio

import pytest

from lifecycle.handlers import BouncingShutdownHandler
from lifecycle.shutdown_coordinator import ShutdownCoordinator
from lifecycle.timer_registry import TimerRegistry
from models.enums import SchedulerState
from services.bouncing_registry import BouncingRegistry
from services.bouncing_service import BouncingService
from surface_layer.marker import Marker
from surface_layer.surface import Surface


class RecordingHandler:
    def __init__(self, name, priority, calls, delay=0.0, fail=False):
        self.name = name
        self._priority = priority
        self.calls = calls
        self.delay = delay
        self.fail = fail

    @property
    def shutdown_priority(self):
        return self._priority

    async def shutdown(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError(f"{self.name} failed")
        self.calls.append(self.name)


class TestCoordinator:

    def test_register_requires_protocol(self):
        coordinator = ShutdownCoordinator()
        with pytest.raises(ValueError):
            coordinator.register(object())

    @pytest.mark.asyncio
    async def test_priority_order(self):
        calls = []
        coordinator = ShutdownCoordinator()
        coordinator.register(RecordingHandler("low", 10, calls))
        coordinator.register(RecordingHandler("high", 100, calls))
        coordinator.register(RecordingHandler("mid", 50, calls))

        await coordinator.shutdown_all()
        assert calls == ["high", "mid", "low"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_sequence(self):
        calls = []
        coordinator = ShutdownCoordinator()
        coordinator.register(RecordingHandler("broken", 100, calls, fail=True))
        coordinator.register(RecordingHandler("after", 10, calls))

        await coordinator.shutdown_all()
        assert calls == ["after"]

    @pytest.mark.asyncio
    async def test_slow_handler_times_out(self):
        calls = []
        coordinator = ShutdownCoordinator(timeout_per_handler=0.01)
        coordinator.register(RecordingHandler("slow", 100, calls, delay=1.0))
        coordinator.register(RecordingHandler("fast", 10, calls))

        await coordinator.shutdown_all()
        assert calls == ["fast"]

    @pytest.mark.asyncio
    async def test_request_shutdown_releases_waiter(self):
        coordinator = ShutdownCoordinator()

        async def trigger():
            await asyncio.sleep(0.01)
            coordinator.request_shutdown("TEST")

        trigger_task = asyncio.create_task(trigger())
        await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1.0)
        await trigger_task
        assert coordinator.reason == "TEST"

    @pytest.mark.asyncio
    async def test_wait_timeout(self):
        coordinator = ShutdownCoordinator()
        await coordinator.wait_for_shutdown(timeout=0.01)
        assert coordinator.reason == "TIMEOUT"

    def test_get_handler(self):
        coordinator = ShutdownCoordinator()
        handler = RecordingHandler("x", 1, [])
        coordinator.register(handler)
        assert coordinator.get_handler(RecordingHandler) is handler
        assert coordinator.get_handler(BouncingShutdownHandler) is None


class TestBouncingOnRealLoop:

    @pytest.mark.asyncio
    async def test_single_bounce_completes(self, calculator):
        """move (0, 10, 20, 30) then contraction (0, 10): about 40 ms"""
        surface = Surface()
        service = BouncingService(
            surface, timers=TimerRegistry(), registry=BouncingRegistry(), calculator=calculator
        )
        service.set_default_options(
            bounce_height=2, bounce_speed=10, contract_height=1, contract_speed=10
        )
        marker = surface.add_marker(Marker("live"), 10, 10)

        service.bounce(marker, cycles=1)
        await asyncio.sleep(0.3)

        state = service.state_of(marker)
        assert state.phase is SchedulerState.IDLE
        assert state.cycles_played == 1
        assert marker.render_count == 6
        service.shutdown()

    @pytest.mark.asyncio
    async def test_handler_stops_everything(self, calculator):
        surface = Surface()
        service = BouncingService(
            surface, timers=TimerRegistry(), registry=BouncingRegistry(), calculator=calculator
        )
        markers = [surface.add_marker(Marker(f"m{i}"), i, i) for i in range(3)]
        for m in markers:
            service.bounce(m)

        coordinator = ShutdownCoordinator()
        coordinator.register(BouncingShutdownHandler(service))
        await coordinator.shutdown_all()

        assert service.timers.pending() == []
        assert service.get_bouncing_markers() == []
        assert calculator.cache_size() == 0
