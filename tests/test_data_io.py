"""
Tests for config-driven construction, target trajectories and JSON export.
"""

import json
import math

import numpy as np
import pytest

from snake_ik.data_io import (
    build_snake_from_config,
    load_chain_state,
    save_chain_state,
    load_targets,
    interpolate_targets,
    extract_current_joint_states,
    export_result
)
from snake_ik.model import build_chain
from snake_ik.utils import Vector2


def write_json(path, data):
    path.write_text(json.dumps(data), encoding='utf-8')
    return str(path)


class TestSnakeFromConfig:
    """Missing keys fall back to the reference constants."""

    def test_defaults(self):
        root = build_snake_from_config({})

        assert root.joint_count() == 50
        assert root.angles()[0] == pytest.approx(4 * math.pi / 50)

    def test_explicit_values(self):
        root = build_snake_from_config({'num_joints': 5, 'initial_angle': 0.0})

        assert root.lengths() == pytest.approx([14.0, 13.0, 12.0, 11.0, 10.0])
        np.testing.assert_allclose(root.tip_position().as_array(), [60.0, 0.0], atol=1e-9)

    def test_null_initial_angle_uses_default(self):
        root = build_snake_from_config({'num_joints': 8, 'initial_angle': None})

        assert root.angles() == pytest.approx([4 * math.pi / 8] * 8)

    def test_null_joint_count_is_rejected(self):
        with pytest.raises(ValueError):
            build_snake_from_config({'num_joints': None})


class TestChainState:
    """Snapshots restore both lengths and angles."""

    def test_round_trip(self, tmp_path):
        root = build_chain([3.0, 2.0, 1.0], [0.1, -0.2, 0.3])
        path = str(tmp_path / "state" / "chain.json")

        save_chain_state(root, path)
        restored = load_chain_state(path)

        assert restored.lengths() == root.lengths()
        assert restored.angles() == pytest.approx(root.angles())

    def test_angles_optional(self, tmp_path):
        path = write_json(tmp_path / "chain.json", {'lengths': [1.0, 1.0]})

        assert load_chain_state(path).angles() == [0.0, 0.0]


class TestTargets:
    """Keyframe loading and interpolation."""

    def test_load_sorts_by_frame(self, tmp_path):
        path = write_json(tmp_path / "targets.json", [
            {'frame': 20, 'pos': [2.0, 2.0]},
            {'frame': 0, 'pos': [0.0, 0.0]},
        ])
        keyframes = load_targets(path)

        assert [kf['frame'] for kf in keyframes] == [0, 20]
        np.testing.assert_array_equal(keyframes[1]['pos'], [2.0, 2.0])

    def test_load_rejects_bad_input(self, tmp_path):
        with pytest.raises(ValueError):
            load_targets(write_json(tmp_path / "empty.json", []))
        with pytest.raises(ValueError):
            load_targets(write_json(tmp_path / "3d.json", [{'frame': 0, 'pos': [1.0, 2.0, 3.0]}]))

    def test_load_rejects_duplicate_frames(self, tmp_path):
        path = write_json(tmp_path / "targets.json", [
            {'frame': 0, 'pos': [0.0, 0.0]},
            {'frame': 10, 'pos': [1.0, 1.0]},
            {'frame': 10, 'pos': [2.0, 2.0]},
            {'frame': 20, 'pos': [3.0, 3.0]},
        ])

        with pytest.raises(ValueError, match="Duplicate keyframe"):
            load_targets(path)

    def test_linear_interpolation_and_clamping(self):
        keyframes = [
            {'frame': 0, 'pos': np.array([0.0, 0.0])},
            {'frame': 10, 'pos': np.array([10.0, 20.0])},
        ]

        assert interpolate_targets(keyframes, 5) == Vector2(5.0, 10.0)
        assert interpolate_targets(keyframes, -3) == Vector2(0.0, 0.0)
        assert interpolate_targets(keyframes, 15) == Vector2(10.0, 20.0)

    def test_spline_passes_through_keyframes(self):
        keyframes = [
            {'frame': 0, 'pos': np.array([0.0, 0.0])},
            {'frame': 10, 'pos': np.array([10.0, 5.0])},
            {'frame': 20, 'pos': np.array([0.0, 10.0])},
        ]

        middle = interpolate_targets(keyframes, 10, mode='spline')
        np.testing.assert_allclose(middle.as_array(), [10.0, 5.0], atol=1e-9)

        between = interpolate_targets(keyframes, 5, mode='spline')
        assert between.x > 5.0, "spline should bulge past the straight chord"

    def test_spline_with_two_keyframes_is_linear(self):
        keyframes = [
            {'frame': 0, 'pos': np.array([0.0, 0.0])},
            {'frame': 4, 'pos': np.array([4.0, 8.0])},
        ]

        assert interpolate_targets(keyframes, 1, mode='spline') == Vector2(1.0, 2.0)

    def test_unknown_mode_raises(self):
        keyframes = [{'frame': 0, 'pos': np.array([0.0, 0.0])}]

        with pytest.raises(ValueError):
            interpolate_targets(keyframes, 0, mode='cubic')


class TestExport:
    """Per-frame records and the animation file."""

    def test_extract_current_joint_states(self):
        root = build_chain([10.0, 10.0])
        state = extract_current_joint_states(7, root, Vector2(1.0, 2.0), True)

        assert state == {
            'frame': 7,
            'angles': [0.0, 0.0],
            'joints': [[10.0, 0.0], [20.0, 0.0]],
            'tip': [20.0, 0.0],
            'target': [1.0, 2.0],
            'converged': True
        }

    def test_export_creates_directories(self, tmp_path):
        root = build_chain([10.0, 10.0])
        frames = [extract_current_joint_states(0, root, Vector2(0.0, 0.0), False)]
        output_path = tmp_path / "nested" / "out" / "animation.json"

        export_result(frames, root, str(output_path))

        data = json.loads(output_path.read_text(encoding='utf-8'))
        assert data['lengths'] == [10.0, 10.0]
        assert data['frames'] == frames

    def test_export_writes_final_joint_matrices(self, tmp_path):
        root = build_chain([10.0, 5.0], [math.pi / 2, 0.3])
        output_path = tmp_path / "animation.json"

        export_result([], root, str(output_path))

        data = json.loads(output_path.read_text(encoding='utf-8'))
        matrices = np.array(data['final_transforms'])
        assert matrices.shape == (2, 3, 3)
        np.testing.assert_allclose(matrices[-1][:2, 2], root.tip_position().as_array(), atol=1e-9)
        np.testing.assert_allclose(matrices[:, 2], [[0.0, 0.0, 1.0]] * 2)

    def test_joint_positions_end_at_tip(self):
        root = build_chain([4.0, 3.0, 2.0], [0.4, -0.9, 1.3])
        state = extract_current_joint_states(0, root, Vector2(0.0, 0.0), False)

        assert len(state['joints']) == 3
        np.testing.assert_allclose(state['joints'][-1], state['tip'], atol=1e-12)
