"""
IK求解器实现
基于近似伪逆的速度控制：每次迭代把末端以固定速度推向目标
"""
import numpy as np

from snake_ik.model.joint import ArmJoint
from snake_ik.utils import Vector2
from .ik_core import (
    build_ik_chain,
    compute_jacobian,
    compute_parameters,
    apply_tip_bias,
    compute_velocity,
    apply_controls
)


def move_arm(
    root: ArmJoint,
    target: Vector2,
    tolerance: float = 3.0,
    max_iterations: int = 1000,
    speed: float = 0.1,
    tip_bias: float = 1.1
) -> bool:
    """
    迭代调整关节角，使链末端逼近目标；末端进入容差范围或迭代次数用尽即返回

    :param root: 链的根关节
    :param target: 目标位置（链基坐标系）
    :param tolerance: 位置收敛容差，默认 3
    :param max_iterations: 最大迭代次数，默认 1000
    :param speed: 每次迭代末端的（线性化）移动速度，默认 0.1
    :param tip_bias: 末端偏置底数，默认 1.1
    :return: True 表示末端在容差内，False 表示迭代用尽仍未到达
    """
    ik_chain = build_ik_chain(root)

    for iteration in range(max_iterations):
        offset = target.sub(root.tip_position())
        if offset.length() < tolerance:
            return True

        # 求解朝目标方向移动所需的参数
        jacobian = compute_jacobian(ik_chain)
        parameters = compute_parameters(jacobian, offset)

        # 指数偏置：靠近末端的关节动得更自由
        parameters = apply_tip_bias(parameters, tip_bias)

        # 归一化步长，使末端瞬时速度恒为 speed；速度为 0 时得到 inf/nan，不拦截
        head_velocity = compute_velocity(jacobian, parameters)
        with np.errstate(divide='ignore', invalid='ignore'):
            speed_factor = np.float64(speed) / head_velocity.length()
            deltas = parameters * speed_factor

        apply_controls(root, deltas)

    return target.sub(root.tip_position()).length() < tolerance
