"""
Tests for RigidTransform composition, mapping and scale extraction.
"""

import math

import numpy as np
import pytest

from snake_ik.utils import Vector2, RigidTransform, NotAffineError


def assert_transform_close(a: RigidTransform, b: RigidTransform):
    np.testing.assert_allclose(a.as_matrix(), b.as_matrix(), atol=1e-12)


# Transforms built only through the provided builders
SAMPLE_TRANSFORMS = [
    RigidTransform.identity(),
    RigidTransform.translation(Vector2(5.0, 7.0)),
    RigidTransform.rotation(-1.1),
    RigidTransform.rotation(0.3).translate(Vector2(2.0, -1.0)).scale(1.5),
    RigidTransform.translation(Vector2(-4.0, 0.5)).rotate(2.2).scale(0.25),
]


class TestTransformBuilders:
    """identity / translate / rotate / scale."""

    def test_identity_maps_points_to_themselves(self):
        p = Vector2(3.0, -2.0)

        assert RigidTransform.identity().apply_to_position(p) == p

    def test_translate_only_moves_origin(self):
        t = RigidTransform.identity().translate(Vector2(1.0, 2.0))

        assert t.x_axis == Vector2(1.0, 0.0)
        assert t.y_axis == Vector2(0.0, 1.0)
        assert t.get_position() == Vector2(1.0, 2.0)

    def test_rotate_turns_axes_and_origin(self):
        t = RigidTransform.translation(Vector2(10.0, 0.0)).rotate(math.pi / 2)

        np.testing.assert_allclose(t.x_axis.as_array(), [0.0, 1.0], atol=1e-12)
        np.testing.assert_allclose(t.y_axis.as_array(), [-1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(t.origin.as_array(), [0.0, 10.0], atol=1e-12)

    def test_scale_keeps_origin(self):
        t = RigidTransform.translation(Vector2(1.0, 1.0)).scale(3.0)

        assert t.origin == Vector2(1.0, 1.0)
        assert t.x_axis == Vector2(3.0, 0.0)

    def test_builders_return_new_transforms(self):
        t = RigidTransform.identity()
        t.translate(Vector2(1.0, 1.0)).rotate(0.5).scale(2.0)

        assert t == RigidTransform.identity()

    def test_direction_ignores_origin(self):
        t = RigidTransform.translation(Vector2(100.0, 100.0))

        assert t.apply_to_direction(Vector2(1.0, 2.0)) == Vector2(1.0, 2.0)
        assert t.apply_to_position(Vector2(1.0, 2.0)) == Vector2(101.0, 102.0)


class TestTransformComposition:
    """after() applies self first, then the other transform."""

    @pytest.mark.parametrize("a", SAMPLE_TRANSFORMS)
    @pytest.mark.parametrize("b", SAMPLE_TRANSFORMS)
    def test_composition_law(self, a, b):
        p = Vector2(0.4, -2.2)
        composed = a.after(b).apply_to_position(p)
        expected = b.apply_to_position(a.apply_to_position(p))

        np.testing.assert_allclose(composed.as_array(), expected.as_array(), atol=1e-9)

    @pytest.mark.parametrize("t", SAMPLE_TRANSFORMS)
    def test_identity_laws(self, t):
        identity = RigidTransform.identity()

        assert_transform_close(identity.after(t), t)
        assert_transform_close(t.after(identity), t)

    def test_matches_homogeneous_matrix_product(self):
        a = SAMPLE_TRANSFORMS[3]
        b = SAMPLE_TRANSFORMS[4]

        np.testing.assert_allclose(a.after(b).as_matrix(), b.as_matrix() @ a.as_matrix(), atol=1e-12)

    def test_matrix_maps_points_like_apply_to_position(self):
        t = SAMPLE_TRANSFORMS[3]
        p = Vector2(1.5, -2.0)

        mapped = t.as_matrix() @ np.array([p.x, p.y, 1.0])
        np.testing.assert_allclose(mapped, [*t.apply_to_position(p).as_array(), 1.0], atol=1e-12)


class TestScaleExtraction:
    """get_scale() and the 1% affine tolerance band."""

    @pytest.mark.parametrize("theta, s", [(0.0, 1.0), (0.7, 2.5), (-2.0, 0.1), (3.0, 12.0)])
    def test_scale_of_rotation_times_scale(self, theta, s):
        t = RigidTransform.rotation(theta).scale(s)

        assert t.get_scale() == pytest.approx(s)

    def test_skewed_transform_raises(self):
        skewed = RigidTransform(Vector2(1.0, 0.0), Vector2(0.0, 1.1), Vector2(0.0, 0.0))

        with pytest.raises(NotAffineError):
            skewed.get_scale()

    def test_small_drift_inside_band_is_accepted(self):
        drifted = RigidTransform(Vector2(1.0, 0.0), Vector2(0.0, 1.004), Vector2(0.0, 0.0))

        assert drifted.get_scale() == pytest.approx(1.0)

    def test_not_affine_error_is_value_error(self):
        assert issubclass(NotAffineError, ValueError)
