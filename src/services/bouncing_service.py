"""Bouncing service - public API of the marker bouncing engine"""

from __future__ import annotations

import weakref
from typing import Any, Dict, List, Mapping, Optional

from animations.bounce_scheduler import BounceScheduler
from engine.motion_compiler import compile_motion
from engine.timeline import TimelineCalculator
from lifecycle.timer_registry import TimerRegistry
from models.bouncing import AnimationConfig, MarkerAnimationState
from models.errors import NotAttached
from services.bouncing_registry import BouncingRegistry
from surface_layer.marker import Marker
from surface_layer.surface import Surface
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SCHEDULER)
config_log = log.with_category(LogCategory.CONFIG)


class BouncingService:
    """
    Bouncing options, per-marker animation state and bounce control.

    Hooks into the surface: every attached marker gets a
    MarkerAnimationState and a BounceScheduler; moving a marker recompiles
    its visual states; removing it cancels whatever is still queued.

    Options live in the service defaults until a marker gets its own with
    set_options(); from then on that marker no longer follows the defaults.

    Example:
        service = BouncingService(surface)
        service.set_default_options({"bounce_height": 20})
        service.set_options(marker, {"elastic": False})
        service.bounce(marker, cycles=3)
    """

    def __init__(
        self,
        surface: Surface,
        defaults: Optional[AnimationConfig] = None,
        timers: Optional[TimerRegistry] = None,
        registry: Optional[BouncingRegistry] = None,
        calculator: Optional[TimelineCalculator] = None,
    ):
        self.surface = surface
        # Host capability is read once
        self.supports_transforms = bool(surface.supports_transforms)

        self.timers = timers if timers is not None else TimerRegistry()
        self.registry = registry if registry is not None else BouncingRegistry()
        self.calculator = calculator if calculator is not None else TimelineCalculator.instance()

        self._defaults = defaults or AnimationConfig()
        self._overrides: "weakref.WeakKeyDictionary[Marker, AnimationConfig]" = weakref.WeakKeyDictionary()
        self._schedulers: Dict[Marker, BounceScheduler] = {}

        if not self.supports_transforms:
            log.warn("Surface has no transform support: contraction disabled, markers placed by left/top")
        self._check_elastic(self._defaults)

        surface.on("markeradd", self._on_marker_add)
        surface.on("markerremove", self._on_marker_remove)
        for marker in surface.markers:
            self._track(marker)

        log.info("BouncingService initialized", markers=len(self._schedulers), transforms=self.supports_transforms)

    # ============================================================
    # Options
    # ============================================================

    @property
    def defaults(self) -> AnimationConfig:
        return self._defaults

    def set_default_options(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> AnimationConfig:
        """
        Merge options into the defaults.

        Markers without their own options follow the new defaults
        immediately (timeline and motion recompiled).
        """
        merged_options = {**(options or {}), **kwargs}
        self._warn_unknown(merged_options)
        config = self._defaults.merged(merged_options)
        self._check_elastic(config)
        self._defaults = config

        followers = [s for m, s in self._schedulers.items() if m not in self._overrides]
        for scheduler in followers:
            scheduler.state.config = config
            self._recompile(scheduler.state)

        config_log.info("Default options updated", updated=len(followers), options=merged_options)
        return config

    def set_options(self, marker: Marker, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> AnimationConfig:
        """
        Give ``marker`` its own options, merged over the current defaults.

        Calling it again starts over from the defaults, not from the
        previous per-marker options.
        """
        merged_options = {**(options or {}), **kwargs}
        self._warn_unknown(merged_options)
        config = self._defaults.merged(merged_options)
        self._check_elastic(config)
        self._overrides[marker] = config

        scheduler = self._schedulers.get(marker)
        if scheduler is not None:
            scheduler.state.config = config
            self._recompile(scheduler.state)
        else:
            # Not attached yet: validate the timeline now, motion comes on attach
            self.calculator.timeline(config)

        config_log.info("Marker options set", marker=marker, options=merged_options)
        return config

    def get_options(self, marker: Marker) -> AnimationConfig:
        return self._overrides.get(marker, self._defaults)

    # ============================================================
    # Bounce control
    # ============================================================

    def bounce(self, marker: Marker, cycles: Optional[int] = None, exclusive: bool = False) -> bool:
        """Start bouncing; False if it already was. Raises NotAttached."""
        return self._scheduler_for(marker).start(cycles, exclusive)

    def stop_bouncing(self, marker: Marker, immediate: bool = False) -> None:
        scheduler = self._schedulers.get(marker)
        if scheduler is not None:
            scheduler.stop(immediate)

    def toggle_bouncing(self, marker: Marker) -> None:
        self._scheduler_for(marker).toggle()

    def is_bouncing(self, marker: Marker) -> bool:
        scheduler = self._schedulers.get(marker)
        return scheduler is not None and scheduler.is_bouncing

    def get_bouncing_markers(self) -> List[Marker]:
        return self.registry.markers()

    def stop_all_bouncing(self) -> None:
        count = len(self.registry)
        self.registry.stop_all()
        if count:
            log.info(f"Stopped {count} bouncing markers")

    def state_of(self, marker: Marker) -> MarkerAnimationState:
        return self._scheduler_for(marker).state

    def shutdown(self) -> None:
        """Stop everything, cancel queued timers, unhook from the surface."""
        self.registry.stop_all()
        for scheduler in list(self._schedulers.values()):
            scheduler.detach()
        cancelled = self.timers.cancel_all()

        self.surface.off("markeradd", self._on_marker_add)
        self.surface.off("markerremove", self._on_marker_remove)
        for marker in self._schedulers:
            marker.off("move", self._on_marker_move)
        self._schedulers.clear()

        log.info("BouncingService shut down", cancelled_timers=cancelled)

    # ============================================================
    # Surface hooks
    # ============================================================

    def _on_marker_add(self, surface: Surface, marker: Marker) -> None:
        self._track(marker)

    def _on_marker_remove(self, surface: Surface, marker: Marker) -> None:
        scheduler = self._schedulers.pop(marker, None)
        if scheduler is None:
            return
        marker.off("move", self._on_marker_move)
        scheduler.detach()

    def _on_marker_move(self, marker: Marker, x: int, y: int) -> None:
        scheduler = self._schedulers.get(marker)
        if scheduler is None:
            return
        state = scheduler.state
        state.x, state.y = x, y
        self._recompile(state, timeline=False)

    def _track(self, marker: Marker) -> None:
        if marker in self._schedulers:
            return

        pos = marker.position
        state = MarkerAnimationState(marker=marker, config=self.get_options(marker), x=pos.x, y=pos.y)
        self._recompile(state)

        self._schedulers[marker] = BounceScheduler(state, self.timers, self.registry)
        marker.on("move", self._on_marker_move)

    # ============================================================
    # Helpers
    # ============================================================

    def _scheduler_for(self, marker: Marker) -> BounceScheduler:
        scheduler = self._schedulers.get(marker)
        if scheduler is None:
            raise NotAttached(marker)
        return scheduler

    def _recompile(self, state: MarkerAnimationState, timeline: bool = True) -> None:
        if timeline:
            state.timeline = self.calculator.timeline(state.config)

        icon_w, icon_h = state.marker.icon_size
        shadow_w, shadow_h = state.marker.shadow_size
        state.motion = compile_motion(
            state.x,
            state.y,
            icon_h,
            shadow_w,
            shadow_h,
            state.config,
            use_transforms=self.supports_transforms,
        )

    def _check_elastic(self, config: AnimationConfig) -> None:
        if config.elastic and not self.supports_transforms:
            config_log.warn("elastic=True needs transform support; contraction will be skipped")

    def _warn_unknown(self, options: Mapping[str, Any]) -> None:
        unknown = sorted(set(options) - set(AnimationConfig.option_names()))
        if unknown:
            config_log.warn("Unknown bouncing options ignored", options=", ".join(unknown))
