"""
Bouncing errors

Every failure is local validation surfaced synchronously to the caller of
the configuring or starting operation. There is no I/O, so nothing here is
retried, and a failure never leaves the scope of a single marker.
"""

from typing import Any, Optional


class BouncingError(Exception):
    """Base class for bouncing domain errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidExtent(BouncingError):
    """Height, contraction or segment length out of range"""
    def __init__(self, name: str, value: Any):
        super().__init__(
            code="INVALID_EXTENT",
            message=f"'{name}' must be a positive number of pixels, got {value!r}",
            details={"name": name, "value": value}
        )


class InvalidSpeed(BouncingError):
    """Speed coefficient is not positive"""
    def __init__(self, name: str, value: Any):
        super().__init__(
            code="INVALID_SPEED",
            message=f"'{name}' must be a positive speed, got {value!r}",
            details={"name": name, "value": value}
        )


class InvalidCycles(BouncingError):
    """Finite bounce count is not positive"""
    def __init__(self, value: Any):
        super().__init__(
            code="INVALID_CYCLES",
            message=f"Bounce count must be a positive integer or None, got {value!r}",
            details={"cycles": value}
        )


class InvalidOption(BouncingError):
    """Option value has the wrong type"""
    def __init__(self, name: str, value: Any, expected: str):
        super().__init__(
            code="INVALID_OPTION",
            message=f"Option '{name}' expects {expected}, got {value!r}",
            details={"name": name, "value": value, "expected": expected}
        )


class NotAttached(BouncingError):
    """Marker is not on a surface, so its geometry is unknown"""
    def __init__(self, marker: Any):
        super().__init__(
            code="NOT_ATTACHED",
            message=f"Marker {marker!r} is not attached to a surface",
            details={"marker": repr(marker)}
        )
