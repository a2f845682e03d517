"""
main_asyncio.py — Demo entry point for the marker bouncing engine
----------------------------------------------------------------

Responsible for:
- loading config/bouncing.yaml and configuring the logger
- building an in-memory surface with the configured markers
- wiring BouncingService and starting the configured bounces
- graceful shutdown on Ctrl+C, SIGTERM or when the demo duration ends
"""

import sys

# ---------------------------------------------------------------------------
# UTF-8 ENCODING FIX
# ---------------------------------------------------------------------------

# Set UTF-8 encoding for output BEFORE the logger prints tree characters
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
from typing import List, Optional

from config_manager import ConfigManager, DEFAULT_CONFIG_PATH
from lifecycle import ShutdownCoordinator, TimerRegistry
from lifecycle.handlers import BouncingShutdownHandler
from models.enums import LogCategory
from models.errors import BouncingError
from services.bouncing_service import BouncingService
from surface_layer.marker import Marker
from surface_layer.surface import Surface
from utils.logger import get_logger, configure_logger

# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------

log = get_logger().for_category(LogCategory.SYSTEM)


def build_surface(config: ConfigManager) -> Surface:
    """Surface with every demo marker attached at its configured position."""
    surface = Surface(supports_transforms=config.demo_transforms)
    for entry in config.demo_markers:
        surface.add_marker(Marker(name=entry.name), entry.x, entry.y)
    return surface


def start_demo_bounces(service: BouncingService, config: ConfigManager) -> List[Marker]:
    """Apply per-marker options and start bouncing. Returns the started markers."""
    markers = {m.name: m for m in service.surface.markers}
    started: List[Marker] = []

    for entry in config.demo_markers:
        marker = markers[entry.name]
        try:
            if entry.options:
                service.set_options(marker, entry.options)
            if service.bounce(marker, cycles=entry.cycles, exclusive=entry.exclusive):
                started.append(marker)
        except BouncingError as e:
            log.error(f"Cannot bounce {entry.name}: {e.message}", code=e.code)

    return started


async def main(config_path=DEFAULT_CONFIG_PATH, duration: Optional[float] = None) -> None:
    """Main async entry point (wiring and event loop startup)."""
    config = ConfigManager(config_path)
    configure_logger(config.log_level, config.use_colors)

    log.info("Initializing bouncing demo...")

    surface = build_surface(config)
    service = BouncingService(
        surface,
        defaults=config.animation_defaults,
        timers=TimerRegistry(asyncio.get_running_loop()),
    )
    started = start_demo_bounces(service, config)
    log.info(f"Bouncing {len(started)} of {len(surface.markers)} markers")

    # ---------------------------------------------------------------------------
    # SHUTDOWN SYSTEM
    # ---------------------------------------------------------------------------
    coordinator = ShutdownCoordinator()
    coordinator.register(BouncingShutdownHandler(service))

    loop = asyncio.get_running_loop()
    coordinator.setup_signal_handlers(loop)

    log.info("🏁 Demo running. Waiting for exit signal...")

    await coordinator.wait_for_shutdown(timeout=duration if duration is not None else config.demo_duration)
    log.debug(service.timers.summary())

    await coordinator.shutdown_all()
    log.info("👋 Demo shut down cleanly.")


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}")
    finally:
        sys.exit(0)
