"""
平滑启发式：与目标无关，每个动画帧把链往"无弯曲"的姿态松弛一点
"""
import numpy as np
from typing import List

from snake_ik.model.joint import ArmJoint
from .ik_core import apply_controls


TWO_PI = 2 * np.pi

# 非末端关节跟随子关节弯曲的比例
CHILD_FOLLOW_RATIO = 0.2


def normalize_angle(angle: float) -> float:
    """
    把角度映射到 [-π, π)，保证修正量走最短方向
    """
    return float(((angle + np.pi) % TWO_PI + TWO_PI) % TWO_PI - np.pi)


def compute_smoothing_deltas(root: ArmJoint) -> List[float]:
    """
    计算使链变平滑的各关节角增量（根 -> 末端）

    - 根关节：没有父级可比较，直接转向子关节的弯曲方向 normalize(child.angle)
    - 中间关节：normalize(自修正 + 0.2 * normalize(child.angle))，自修正为 normalize(-angle)
    - 末端关节：只做自修正

    :param root: 链的根关节，None 表示空链
    :return: 增量列表
    """
    if root is None:
        return []
    if root.child is None:
        return [0.0]

    deltas = [normalize_angle(root.child.angle)]
    joint = root
    while joint.child is not None:
        joint = joint.child
        self_correction = normalize_angle(-joint.angle)
        if joint.child is None:
            deltas.append(self_correction)
        else:
            child_correction = normalize_angle(joint.child.angle)
            deltas.append(normalize_angle(self_correction + CHILD_FOLLOW_RATIO * child_correction))
    return deltas


def smooth_arm(root: ArmJoint, damping: float = 0.1):
    """
    应用一次平滑：增量乘以阻尼系数后加到链上，多帧累积才逐渐变直

    :param root: 链的根关节
    :param damping: 阻尼系数，默认 0.1
    """
    deltas = compute_smoothing_deltas(root)
    apply_controls(root, [delta * damping for delta in deltas])
