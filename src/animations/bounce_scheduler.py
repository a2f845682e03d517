"""
Bounce Scheduler

Per-marker state machine driving one marker's bouncing over time.

    IDLE → MOVING ⇄ RESIZING → IDLE
              ↓ ↑
            WAITING          (non-elastic: bounce_speed pause between moves)

Every step of a phase is queued up front as a timer at its cumulative delay,
plus one boundary timer at the last delay that decides what comes next.
Stopping only flips flags read at the boundary: the queued steps of the
current phase still play, so the marker always lands back at rest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Tuple

from lifecycle.timer_registry import TimerRegistry
from models.bouncing import AnimationConfig, MarkerAnimationState
from models.enums import SchedulerState, TimerCategory
from models.errors import InvalidCycles, NotAttached
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.bouncing_registry import BouncingRegistry
    from surface_layer.marker_interface import IMarkerView

log = get_logger().for_category(LogCategory.SCHEDULER)


class BounceScheduler:
    """
    Drives the bouncing of one marker.

    The scheduler reads ``state.timeline`` at every phase start and
    ``state.motion`` at every step, so recompilation done by the service
    (marker moved, options changed) is picked up without restarting.

    Example:
        scheduler = BounceScheduler(state, timers, registry)
        scheduler.start(cycles=3)
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        state: MarkerAnimationState,
        timers: TimerRegistry,
        registry: "BouncingRegistry",
    ):
        self.state = state
        self._timers = timers
        self._registry = registry

    # ============================================================
    # Properties used by the registry
    # ============================================================

    @property
    def marker(self) -> "IMarkerView":
        return self.state.marker

    @property
    def config(self) -> AnimationConfig:
        return self.state.config

    @property
    def is_bouncing(self) -> bool:
        return self.state.is_bouncing

    @property
    def phase(self) -> SchedulerState:
        return self.state.phase

    # ============================================================
    # Control
    # ============================================================

    def start(self, cycles: Optional[int] = None, exclusive: bool = False) -> bool:
        """
        Start bouncing.

        Args:
            cycles: Number of move phases to play, None for endless
            exclusive: Stop every other bouncing marker first

        Returns:
            False if the marker was already bouncing (nothing changes)

        Raises:
            InvalidCycles: cycles is not a positive integer
            NotAttached: marker is not on a surface
        """
        if cycles is not None and (isinstance(cycles, bool) or not isinstance(cycles, int) or cycles < 1):
            raise InvalidCycles(cycles)

        state = self.state
        if not state.marker.attached or state.motion is None or state.timeline is None:
            raise NotAttached(state.marker)

        if state.is_bouncing:
            log.debug("Already bouncing, start ignored", marker=state.marker)
            return False

        state.is_bouncing = True
        state.stop_requested = False
        state.remaining_cycles = cycles
        self._registry.add(self, exclusive)

        if state.phase is SchedulerState.IDLE:
            log.info("Bounce started", marker=state.marker, cycles=cycles if cycles else "∞")
            self._move()
        else:
            # Previous animation still finishing its last phase: keep that
            # chain going instead of starting a second one.
            log.info("Bounce re-armed", marker=state.marker, phase=state.phase.name)
        return True

    def stop(self, immediate: bool = False) -> None:
        """
        Stop bouncing.

        The current phase finishes visually unless ``immediate`` is set, in
        which case pending timers are cancelled and the marker snaps to rest.
        """
        was_bouncing = self.state.is_bouncing
        self.release()
        self._registry.remove(self)

        if immediate:
            self._timers.cancel_owner(self)
            self._apply_move_step(0)
            self._settle()

        if was_bouncing:
            log.info("Bounce stopped", marker=self.state.marker, immediate=immediate)

    def release(self) -> None:
        """Clear the bouncing flags without touching the registry."""
        self.state.is_bouncing = False
        if self.state.phase is not SchedulerState.IDLE:
            self.state.stop_requested = True

    def toggle(self) -> None:
        if self.state.is_bouncing:
            self.stop()
        else:
            self.start()

    def detach(self) -> None:
        """Marker left the surface: drop everything still queued."""
        self.release()
        self._registry.remove(self)
        cancelled = self._timers.cancel_owner(self)
        self._settle()
        log.debug("Scheduler detached", marker=self.state.marker, cancelled=cancelled)

    # ============================================================
    # Phases
    # ============================================================

    def _move(self) -> None:
        state = self.state

        if state.remaining_cycles is not None:
            state.remaining_cycles -= 1
            if state.remaining_cycles <= 0:
                # Last pass: it still plays (and may still contract) but the
                # marker no longer counts as bouncing.
                state.is_bouncing = False
                self._registry.remove(self)

        state.cycles_played += 1
        state.phase = SchedulerState.MOVING
        timeline = state.timeline
        self._schedule_phase(
            timeline.move_steps,
            timeline.move_delays,
            self._apply_move_step,
            TimerCategory.MOVE_STEP,
            self._on_move_end,
        )

    def _on_move_end(self) -> None:
        state = self.state

        if state.stop_requested:
            self._settle()
        elif state.config.elastic and state.motion is not None and state.motion.can_resize:
            self._resize()
        elif state.is_bouncing:
            state.phase = SchedulerState.WAITING
            self._timers.schedule(
                self,
                state.config.bounce_speed,
                self._after_pause,
                category=TimerCategory.PAUSE,
                description=f"{state.marker!r} pause",
            )
        else:
            self._settle()

    def _after_pause(self) -> None:
        if self.state.is_bouncing:
            self._move()
        else:
            self._settle()

    def _resize(self) -> None:
        state = self.state
        state.phase = SchedulerState.RESIZING
        timeline = state.timeline
        self._schedule_phase(
            timeline.resize_steps,
            timeline.resize_delays,
            self._apply_resize_step,
            TimerCategory.RESIZE_STEP,
            self._on_resize_end,
        )

    def _on_resize_end(self) -> None:
        if self.state.is_bouncing:
            self._move()
        else:
            self._settle()

    def _settle(self) -> None:
        state = self.state
        if state.phase is not SchedulerState.IDLE:
            log.debug("Marker at rest", marker=state.marker, cycles_played=state.cycles_played)
        state.phase = SchedulerState.IDLE
        state.stop_requested = False

    def _schedule_phase(
        self,
        steps: Tuple[int, ...],
        delays: Tuple[int, ...],
        apply: Callable[[int], None],
        category: TimerCategory,
        on_end: Callable[[], None],
    ) -> None:
        """Queue every step of a phase, then the boundary at the last delay."""
        for step, delay in zip(steps, delays):
            self._timers.schedule(self, delay, apply, step, category=category)

        end_delay = delays[-1] if delays else 0
        self._timers.schedule(
            self,
            end_delay,
            on_end,
            category=TimerCategory.PHASE_BOUNDARY,
            description=f"{self.state.marker!r} {self.state.phase.name} end",
        )

    # ============================================================
    # Step application
    # ============================================================

    def _apply_move_step(self, step: int) -> None:
        marker = self.state.marker
        motion = self.state.motion
        if not marker.attached or motion is None:
            return
        if step >= len(motion.icon_move) or step >= len(motion.shadow_move):
            return

        if motion.uses_transforms:
            marker.apply_transforms(motion.icon_move[step], motion.shadow_move[step])
        else:
            marker.apply_positions(motion.icon_move[step], motion.shadow_move[step])

    def _apply_resize_step(self, step: int) -> None:
        marker = self.state.marker
        motion = self.state.motion
        if not marker.attached or motion is None or not motion.can_resize:
            return
        if step >= len(motion.icon_resize) or step >= len(motion.shadow_resize):
            return

        marker.apply_transforms(motion.icon_resize[step], motion.shadow_resize[step])

    def __repr__(self) -> str:
        return f"BounceScheduler({self.state.marker!r}, {self.state.phase.name})"
