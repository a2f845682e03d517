from .bouncing_shutdown_handler import BouncingShutdownHandler

__all__ = [
    "BouncingShutdownHandler",
]
