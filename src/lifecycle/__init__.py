"""
Lifecycle subsystem
-------------------

Exports the public API for:
- timer tracking & introspection
- graceful shutdown

External code should import from:
    from lifecycle import ShutdownCoordinator, TimerRegistry
    from lifecycle.handlers import BouncingShutdownHandler

Handlers are not imported here: they depend on services, which depend on
the timer registry.
"""

from .shutdown_coordinator import ShutdownCoordinator
from .shutdown_protocol import IShutdownHandler
from .timer_registry import TimerRegistry, TimerInfo, TimerRecord

__all__ = [
    "ShutdownCoordinator",
    "IShutdownHandler",
    "TimerRegistry",
    "TimerInfo",
    "TimerRecord",
]
