"""
Contract for components taking part in graceful shutdown.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    A component the ShutdownCoordinator tears down.

    Handlers run one at a time, highest ``shutdown_priority`` first, each
    under its own timeout. A failing handler is logged and skipped.

    Example:
        class SurfaceShutdownHandler:
            shutdown_priority = 50

            async def shutdown(self) -> None:
                self.surface.clear()
    """

    @property
    def shutdown_priority(self) -> int:
        """Larger runs earlier."""
        ...

    async def shutdown(self) -> None:
        """Release the component's resources."""
        ...
