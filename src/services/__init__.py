"""Services layer"""

from .bouncing_registry import BouncingRegistry
from .bouncing_service import BouncingService

__all__ = [
    "BouncingRegistry",
    "BouncingService",
]
