"""
Shutdown handler for the bouncing engine.
Stops every bouncing marker and cancels queued timers before the loop closes.
"""

from __future__ import annotations

from typing import Optional

from engine.timeline import TimelineCalculator
from lifecycle.shutdown_protocol import IShutdownHandler
from services.bouncing_service import BouncingService
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class BouncingShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for BouncingService.
    Runs first: no timer may fire on a closed loop.
    """

    def __init__(
        self,
        service: BouncingService,
        calculator: Optional[TimelineCalculator] = None,
    ):
        self.service = service
        self.calculator = calculator or service.calculator

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        log.info("Stopping bouncing markers...")

        bouncing = len(self.service.get_bouncing_markers())
        self.service.shutdown()

        cached = self.calculator.cache_size()
        self.calculator.clear_cache()

        log.debug("Bouncing stopped", markers=bouncing, cached_timelines=cached)
