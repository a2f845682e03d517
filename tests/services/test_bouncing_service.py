"""
Tests for BouncingService: options, surface hooks, bounce control.
"""

import pytest

from lifecycle.timer_registry import TimerRegistry
from models.bouncing import AnimationConfig, Point, TransformDescriptor
from models.enums import SchedulerState
from models.errors import InvalidExtent, InvalidOption, InvalidSpeed, NotAttached
from services.bouncing_registry import BouncingRegistry
from services.bouncing_service import BouncingService
from surface_layer.marker import Marker
from surface_layer.surface import Surface


@pytest.fixture
def pins(surface, service, small_options):
    service.set_default_options(small_options)
    return [surface.add_marker(Marker(f"pin-{i}"), 10 * i, 100) for i in range(1, 4)]


class TestTracking:

    def test_existing_markers_tracked_at_start(self, marker, timers, registry, calculator, surface):
        service = BouncingService(surface, timers=timers, registry=registry, calculator=calculator)
        state = service.state_of(marker)

        assert (state.x, state.y) == (100, 200)
        assert state.timeline is not None
        assert state.motion.icon_move[0] == TransformDescriptor(100, 200)
        service.shutdown()

    def test_marker_added_later_is_tracked(self, service, surface):
        marker = surface.add_marker(Marker("late"), 5, 6)
        assert service.state_of(marker).config == service.defaults

    def test_unattached_marker(self, service):
        with pytest.raises(NotAttached):
            service.bounce(Marker("nowhere"))
        with pytest.raises(NotAttached):
            service.state_of(Marker("nowhere"))

    def test_move_recompiles_motion_only(self, service, marker):
        state = service.state_of(marker)
        timeline = state.timeline

        marker.set_position(300, 50)

        assert (state.x, state.y) == (300, 50)
        assert state.motion.icon_move[0] == TransformDescriptor(300, 50)
        assert state.timeline is timeline

    def test_removal_cancels_pending_steps(self, service, surface, marker, timers):
        service.bounce(marker)
        surface.remove_marker(marker)

        assert timers.pending() == []
        assert not service.is_bouncing(marker)
        assert service.get_bouncing_markers() == []

    def test_readded_marker_starts_fresh(self, service, surface, marker):
        service.bounce(marker)
        surface.remove_marker(marker)
        surface.add_marker(marker, 1, 2)

        state = service.state_of(marker)
        assert state.phase is SchedulerState.IDLE
        assert (state.x, state.y) == (1, 2)


class TestOptions:

    def test_set_options_rebuilds_timeline(self, service, marker):
        config = service.set_options(marker, {"bounce_height": 20})

        state = service.state_of(marker)
        assert config.bounce_height == 20
        assert len(state.timeline.move_steps) == 40
        assert len(state.motion.icon_move) == 21

    def test_keyword_options(self, service, marker):
        service.set_options(marker, elastic=False, bounce_speed=30)
        config = service.get_options(marker)
        assert config.elastic is False
        assert config.bounce_speed == 30

    def test_set_options_starts_from_defaults(self, service, marker):
        service.set_options(marker, bounce_height=20)
        service.set_options(marker, contract_height=4)

        config = service.get_options(marker)
        assert config.bounce_height == service.defaults.bounce_height
        assert config.contract_height == 4

    def test_unknown_keys_ignored(self, service, marker):
        config = service.set_options(marker, {"bounceHeight": 99, "colour": "red"})
        assert config == service.defaults

    @pytest.mark.parametrize("options, error", [
        ({"bounce_height": 0}, InvalidExtent),
        ({"contract_height": -3}, InvalidExtent),
        ({"bounce_speed": 0}, InvalidSpeed),
        ({"contract_speed": -1}, InvalidSpeed),
        ({"elastic": "yes"}, InvalidOption),
        ({"bounce_height": 2.5}, InvalidOption),
    ])
    def test_invalid_options(self, service, marker, options, error):
        before = service.get_options(marker)
        with pytest.raises(error):
            service.set_options(marker, options)
        assert service.get_options(marker) == before

    def test_defaults_reach_following_markers(self, service, surface):
        follower = surface.add_marker(Marker("follower"), 0, 0)
        custom = surface.add_marker(Marker("custom"), 0, 0)
        service.set_options(custom, bounce_height=7)

        service.set_default_options(bounce_height=4)

        assert service.get_options(follower).bounce_height == 4
        assert len(service.state_of(follower).timeline.move_steps) == 8
        assert service.get_options(custom).bounce_height == 7

    def test_options_before_attach(self, service, surface):
        marker = Marker("early")
        service.set_options(marker, bounce_height=5)

        surface.add_marker(marker, 0, 0)
        assert service.state_of(marker).config.bounce_height == 5

    def test_invalid_defaults_keep_previous(self, service):
        with pytest.raises(InvalidSpeed):
            service.set_default_options(bounce_speed=0)
        assert service.defaults == AnimationConfig()


class TestBounceControl:

    def test_bounce_and_stop(self, service, pins, clock):
        a = pins[0]
        assert service.bounce(a) is True
        assert service.is_bouncing(a)
        assert service.get_bouncing_markers() == [a]

        service.stop_bouncing(a)
        assert not service.is_bouncing(a)
        clock.advance(1000)
        assert service.state_of(a).phase is SchedulerState.IDLE

    def test_bounce_twice(self, service, pins):
        assert service.bounce(pins[0]) is True
        assert service.bounce(pins[0]) is False

    def test_cycles(self, service, pins, clock):
        service.bounce(pins[0], cycles=2)
        clock.advance(10_000)
        state = service.state_of(pins[0])
        assert state.cycles_played == 2
        assert state.phase is SchedulerState.IDLE

    def test_toggle(self, service, pins):
        service.toggle_bouncing(pins[0])
        assert service.is_bouncing(pins[0])
        service.toggle_bouncing(pins[0])
        assert not service.is_bouncing(pins[0])

    def test_stop_unknown_marker_is_noop(self, service):
        service.stop_bouncing(Marker("nowhere"))

    def test_exclusive_bounce(self, service, pins):
        a, b, c = pins
        service.bounce(a)
        service.bounce(b)
        service.bounce(c, exclusive=True)

        assert service.get_bouncing_markers() == [c]
        assert not service.is_bouncing(a)
        assert not service.is_bouncing(b)

        service.bounce(a)
        assert service.get_bouncing_markers() == [a]
        assert not service.is_bouncing(c)

    def test_exclusive_option(self, service, pins):
        a, b, _ = pins
        service.set_options(b, exclusive=True)
        service.bounce(a)
        service.bounce(b)
        assert service.get_bouncing_markers() == [b]

    def test_stop_all_bouncing(self, service, pins, clock):
        for pin in pins:
            service.bounce(pin)
        service.stop_all_bouncing()

        assert service.get_bouncing_markers() == []
        clock.advance(1000)
        assert all(service.state_of(p).phase is SchedulerState.IDLE for p in pins)

    def test_immediate_stop_snaps_to_rest(self, service, pins, clock, timers):
        a = pins[0]
        service.bounce(a)
        clock.advance(80)

        service.stop_bouncing(a, immediate=True)
        assert timers.pending() == []
        assert a.icon.get("transform") == TransformDescriptor(10, 100).to_css()

    def test_shutdown(self, service, pins, timers):
        for pin in pins:
            service.bounce(pin)
        service.shutdown()

        assert timers.pending() == []
        assert service.get_bouncing_markers() == []


class TestFallbackSurface:

    @pytest.fixture
    def flat(self, timers, calculator):
        surface = Surface(supports_transforms=False)
        service = BouncingService(
            surface, timers=timers, registry=BouncingRegistry(), calculator=calculator
        )
        service.set_default_options(bounce_height=3, bounce_speed=52)
        yield surface, service
        service.shutdown()

    def test_compiles_points(self, flat):
        surface, service = flat
        marker = surface.add_marker(Marker("flat"), 40, 60)

        motion = service.state_of(marker).motion
        assert motion.uses_transforms is False
        assert motion.icon_move[3] == Point(40, 57)
        assert not motion.can_resize

    def test_renders_left_top(self, flat, clock):
        surface, service = flat
        marker = surface.add_marker(Marker("flat"), 40, 60)
        service.bounce(marker)

        clock.advance(78)
        assert marker.icon.get("left") == "40px"
        assert marker.icon.get("top") == "57px"
        assert marker.shadow.get("left") == "43px"

    def test_waits_instead_of_contracting(self, flat, clock):
        surface, service = flat
        marker = surface.add_marker(Marker("flat"), 40, 60)
        service.bounce(marker)

        clock.advance(208)
        assert service.state_of(marker).phase is SchedulerState.WAITING


def test_service_on_running_loop_defaults():
    """Without an explicit clock, timers go to the running loop at schedule time."""
    service = BouncingService(Surface(), timers=TimerRegistry())
    assert service.timers.pending() == []
    service.shutdown()
