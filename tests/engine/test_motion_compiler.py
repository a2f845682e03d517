"""
Tests for compile_motion(): per-step visual states of a marker.
"""

import pytest

from engine.motion_compiler import compile_motion
from models.bouncing import AnimationConfig, Point, TransformDescriptor
from models.errors import InvalidExtent


@pytest.fixture
def motion():
    return compile_motion(100, 200, 41, 41, 41, AnimationConfig())


class TestTransformPath:

    def test_one_state_per_offset(self, motion):
        assert len(motion.icon_move) == 16
        assert len(motion.shadow_move) == 16
        assert len(motion.icon_resize) == 13
        assert len(motion.shadow_resize) == 13

    def test_offset_zero_is_rest(self, motion):
        rest = TransformDescriptor(100, 200)
        assert motion.icon_move[0] == rest
        assert motion.shadow_move[0] == rest
        assert motion.icon_resize[0] == rest
        assert motion.shadow_resize[0] == rest

    def test_icon_lifts_one_pixel_per_offset(self, motion):
        assert motion.icon_move[15] == TransformDescriptor(100, 185)
        assert all(t.translate_x == 100 for t in motion.icon_move)

    def test_shadow_follows_projection_angle(self, motion):
        """Default angle -pi/4: the shadow slides up and to the right."""
        assert motion.shadow_move[1] == TransformDescriptor(101, 199)
        assert motion.shadow_move[15] == TransformDescriptor(115, 185)

    def test_icon_squashes_on_the_ground(self, motion):
        deepest = motion.icon_resize[12]
        assert deepest.translate_y == 212
        assert deepest.scale_x == 1
        assert deepest.scale_y == pytest.approx(29 / 41)

    def test_shadow_resize_scales_both_axes(self, motion):
        for t in motion.shadow_resize[1:]:
            assert t.scale_x >= 1
            assert t.scale_y > 1

    def test_can_resize(self, motion):
        assert motion.uses_transforms is True
        assert motion.can_resize is True

    def test_follows_options(self):
        config = AnimationConfig(bounce_height=3, contract_height=2)
        motion = compile_motion(0, 0, 41, 41, 41, config)
        assert len(motion.icon_move) == 4
        assert len(motion.icon_resize) == 3

    def test_deterministic(self, motion):
        assert compile_motion(100, 200, 41, 41, 41, AnimationConfig()) == motion


class TestFallbackPath:

    @pytest.fixture
    def fallback(self):
        return compile_motion(100, 200, 41, 41, 41, AnimationConfig(), use_transforms=False)

    def test_move_states_are_points(self, fallback):
        assert fallback.icon_move[0] == Point(100, 200)
        assert fallback.icon_move[3] == Point(100, 197)
        assert fallback.shadow_move[15] == Point(115, 185)

    def test_no_contraction(self, fallback):
        assert fallback.uses_transforms is False
        assert fallback.icon_resize == ()
        assert fallback.shadow_resize == ()
        assert fallback.can_resize is False


class TestValidation:

    @pytest.mark.parametrize("sizes", [(0, 41, 41), (41, 0, 41), (41, 41, -2)])
    def test_non_positive_sizes(self, sizes):
        with pytest.raises(InvalidExtent):
            compile_motion(0, 0, *sizes, AnimationConfig())
