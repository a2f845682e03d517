"""
Timer Registry
--------------

Central tracking of the deferred callbacks that drive bouncing animations.

Every step application, phase boundary and pause is a ``call_later`` timer
on the event loop. The registry keeps the handles per owner (marker) so a
marker's pending timers can be cancelled when it is removed from the surface,
stopped immediately, or when the application shuts down.

Features:
- Schedule with metadata (category, owner, description)
- Per-owner cancellation
- Counters and summary for logs
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol

from models.enums import TimerCategory
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TIMER)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    """Anything with asyncio's call_later signature (delay in seconds)"""
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


# ---------------------------------------------------------------------------
# TIMER METADATA
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimerInfo:
    """Immutable metadata captured at scheduling time."""
    id: int
    category: TimerCategory
    delay_ms: int
    description: str
    created_at: str  # ISO UTC string


@dataclass
class TimerRecord:
    """Internal structure tracking a pending timer."""
    handle: TimerHandle
    info: TimerInfo
    owner: Any


# ---------------------------------------------------------------------------
# TIMER REGISTRY
# ---------------------------------------------------------------------------

class TimerRegistry:
    """
    Registry of pending animation timers.

    Records exist only while their timer is pending: they are dropped when
    the callback fires or the timer is cancelled.

    Example:
        timers = TimerRegistry(loop)
        timers.schedule(marker, 26, apply_step, 2, category=TimerCategory.MOVE_STEP)
        timers.cancel_owner(marker)
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock
        self._records: Dict[int, TimerRecord] = {}
        self._next_id: int = 1

        self.scheduled_count = 0
        self.fired_count = 0
        self.cancelled_count = 0

    @property
    def clock(self) -> Clock:
        """Explicit clock, or the running event loop."""
        return self._clock if self._clock is not None else asyncio.get_running_loop()

    # -----------------------------
    # Schedule
    # -----------------------------
    def schedule(
        self,
        owner: Any,
        delay_ms: int,
        callback: Callable[..., Any],
        *args: Any,
        category: TimerCategory,
        description: str = "",
    ) -> int:
        """Run ``callback(*args)`` after ``delay_ms`` and track the handle."""
        timer_id = self._next_id
        self._next_id += 1

        def _fire() -> None:
            self._records.pop(timer_id, None)
            self.fired_count += 1
            try:
                callback(*args)
            except Exception as e:
                log.error(
                    f"[Timer {timer_id}] FAILED: {e}",
                    category_name=category.name,
                    description=description
                )
                raise

        handle = self.clock.call_later(delay_ms / 1000, _fire)

        info = TimerInfo(
            id=timer_id,
            category=category,
            delay_ms=delay_ms,
            description=description,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._records[timer_id] = TimerRecord(handle=handle, info=info, owner=owner)
        self.scheduled_count += 1
        return timer_id

    # -----------------------------
    # Cancellation
    # -----------------------------
    def cancel(self, timer_id: int) -> bool:
        record = self._records.pop(timer_id, None)
        if record is None:
            return False
        record.handle.cancel()
        self.cancelled_count += 1
        return True

    def cancel_owner(self, owner: Any) -> int:
        """Cancel every pending timer of ``owner``; returns how many."""
        ids = [tid for tid, r in self._records.items() if r.owner is owner]
        for tid in ids:
            self.cancel(tid)
        if ids:
            log.debug(f"Cancelled {len(ids)} timers", owner=owner)
        return len(ids)

    def cancel_all(self) -> int:
        ids = list(self._records.keys())
        for tid in ids:
            self.cancel(tid)
        log.debug(f"Shutdown: cancelled {len(ids)} timers")
        return len(ids)

    # -----------------------------
    # Introspection
    # -----------------------------
    def pending(self, owner: Any = None, category: Optional[TimerCategory] = None) -> List[TimerRecord]:
        """Pending records, optionally filtered by owner and category."""
        return [
            r for r in self._records.values()
            if (owner is None or r.owner is owner)
            and (category is None or r.info.category is category)
        ]

    def summary(self) -> str:
        return (
            f"Timers: pending={len(self._records)}, scheduled={self.scheduled_count}, "
            f"fired={self.fired_count}, cancelled={self.cancelled_count}"
        )
