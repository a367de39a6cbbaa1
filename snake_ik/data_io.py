"""
数据交换功能实现
"""
import json
import os
import numpy as np
from typing import Dict, List
from scipy.interpolate import CubicSpline

from snake_ik.model.joint import ArmJoint, build_chain, build_snake
from snake_ik.utils import Vector2


# 目标插值方式
INTERPOLATION_MODES = ('linear', 'spline')


def build_snake_from_config(config: Dict) -> ArmJoint:
    """
    根据配置构建蛇形链

    :param config: 配置字典，可含 num_joints / min_length / max_length / initial_angle
    :return: 根关节
    :raises ValueError: 数值字段为 null 等无法转换的值
    """
    try:
        num_joints = int(config.get('num_joints', 50))
        min_length = float(config.get('min_length', 10.0))
        max_length = float(config.get('max_length', 15.0))
    except TypeError as e:
        raise ValueError(f"Invalid snake config: {e}") from e

    return build_snake(
        num_joints=num_joints,
        min_length=min_length,
        max_length=max_length,
        initial_angle=config.get('initial_angle')  # None -> 4π / num_joints
    )


def load_chain_state(json_path: str) -> ArmJoint:
    """
    从 JSON 快照恢复关节链 {"lengths": [...], "angles": [...]}

    :param json_path: 快照文件路径
    :return: 根关节
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    lengths = [float(length) for length in data['lengths']]
    angles = data.get('angles')
    if angles is not None:
        angles = [float(angle) for angle in angles]
    return build_chain(lengths, angles)


def save_chain_state(root: ArmJoint, json_path: str):
    """
    保存关节链快照（长度 + 角度，根 -> 末端），可用作下次运行的初值
    """
    os.makedirs(os.path.dirname(os.path.abspath(json_path)), exist_ok=True)
    data = {
        'lengths': root.lengths(),
        'angles': root.angles()
    }
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_targets(json_path: str) -> List[Dict]:
    """
    从targets.json加载目标轨迹

    :param json_path: targets.json文件路径
    :return: 关键帧列表，每个元素为 {"frame": int, "pos": np.ndarray([x, y])}，按帧号严格递增
    :raises ValueError: 文件为空、位置不是二维或帧号重复
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    keyframes = []
    for item in data:
        pos = np.array(item['pos'], dtype=np.float64)
        if pos.shape != (2,):
            raise ValueError(f"Keyframe {item.get('frame')} needs a 2D position, got {item['pos']}")
        keyframes.append({
            'frame': int(item['frame']),
            'pos': pos
        })

    if not keyframes:
        raise ValueError(f"No keyframes in {json_path}")

    # 按帧号排序，样条插值要求帧号严格递增
    keyframes.sort(key=lambda kf: kf['frame'])
    for prev, curr in zip(keyframes, keyframes[1:]):
        if curr['frame'] == prev['frame']:
            raise ValueError(f"Duplicate keyframe at frame {curr['frame']} in {json_path}")

    return keyframes


def interpolate_targets(keyframes: List[Dict], frame: int, mode: str = 'linear') -> Vector2:
    """
    在关键帧之间插值，得到当前帧的目标位置

    :param keyframes: 关键帧列表（已排序）
    :param frame: 当前帧号
    :param mode: 'linear' 分段线性；'spline' 三次样条（关键帧少于3个时退化为线性）
    :return: 目标位置
    """
    if mode not in INTERPOLATION_MODES:
        raise ValueError(f"Unknown interpolation mode: {mode}")

    # 区间外取端点
    if frame <= keyframes[0]['frame']:
        return Vector2.from_array(keyframes[0]['pos'])
    if frame >= keyframes[-1]['frame']:
        return Vector2.from_array(keyframes[-1]['pos'])

    frames = np.array([kf['frame'] for kf in keyframes], dtype=np.float64)
    positions = np.stack([kf['pos'] for kf in keyframes])

    if mode == 'spline' and len(keyframes) >= 3:
        spline = CubicSpline(frames, positions, axis=0, bc_type='natural')
        return Vector2.from_array(spline(frame))

    x = np.interp(frame, frames, positions[:, 0])
    y = np.interp(frame, frames, positions[:, 1])
    return Vector2(float(x), float(y))


def extract_current_joint_states(frame: int, root: ArmJoint, target: Vector2, converged: bool) -> Dict:
    """提取当前帧的关节状态（角度、各关节末端位置、目标），存为字典"""
    joints = [transform.get_position() for transform in root.global_transforms()]
    tip = joints[-1]
    return {
        'frame': frame,
        'angles': [float(angle) for angle in root.angles()],
        'joints': [[joint.x, joint.y] for joint in joints],
        'tip': [tip.x, tip.y],
        'target': [target.x, target.y],
        'converged': bool(converged)
    }


def export_result(solved_frames: List[Dict], root: ArmJoint, output_path: str):
    """
    导出动画 JSON {"lengths": [...], "final_transforms": [...], "frames": [...]}

    :param solved_frames: extract_current_joint_states 得到的逐帧记录
    :param root: 求解结束后的根关节
    :param output_path: 输出路径
    """
    # 确保输出目录存在
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

    output = {
        'lengths': root.lengths(),
        # 末帧各关节的 3x3 齐次变换（根 -> 末端）
        'final_transforms': [transform.as_matrix().tolist() for transform in root.global_transforms()],
        'frames': solved_frames
    }
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
