"""
IK核心算法实现
雅可比构建、近似伪逆、速度计算与控制量应用
"""
import numpy as np
from typing import List, Sequence, Union

from snake_ik.model.joint import ArmJoint
from snake_ik.utils import Vector2, RigidTransform


class ParameterCountMismatchError(ValueError):
    """参数/增量序列长度与关节数（或梯度数）不一致"""


def build_ik_chain(root: ArmJoint) -> List[ArmJoint]:
    """
    构建IK Chain：从根到末端的全部关节的有序列表
    雅可比的行、参数向量的分量都按此顺序一一对应

    :param root: 链的根关节
    :return: IK Chain 列表
    """
    return list(root.iter_chain())


def compute_jacobian(ik_chain: List[ArmJoint]) -> np.ndarray:
    """
    构建雅可比矩阵 J (Nx2)，第 i 行为关节 i 的梯度向量：
    关节 i 角速度为 1、其余不动时，该关节连杆末端在世界坐标系中的瞬时速度

    单次根 -> 末端遍历，累积变换 T 初始为单位变换：
    1. 梯度 = T.apply_to_direction(joint.offset().rotate90())
    2. T <- joint.local_transform().after(T)

    :param ik_chain: IK Chain（根 -> 末端）
    :return: Nx2 雅可比矩阵
    """
    jacobian = np.zeros((len(ik_chain), 2), dtype=np.float64)
    transform = RigidTransform.identity()
    for i, joint in enumerate(ik_chain):
        gradient = transform.apply_to_direction(joint.offset().rotate90())
        jacobian[i] = gradient.as_array()
        transform = joint.local_transform().after(transform)
    return jacobian


def compute_pseudo_inverse(jacobian: np.ndarray) -> np.ndarray:
    """
    近似伪逆：J · (J^T J)

    注意这里乘的是 J^T J 本身而不是它的逆，只在 J^T J 接近数量矩阵时才近似于
    Moore-Penrose 伪逆。速度的模长由调用方再归一化。

    :param jacobian: Nx2 雅可比矩阵
    :return: Nx2 矩阵，第 i 行为 (M[0]·g_i, M[1]·g_i)
    """
    jacobian = np.asarray(jacobian, dtype=np.float64).reshape(-1, 2)

    # J^T J 对称，只算上三角，下三角直接复制
    normal = np.zeros((2, 2), dtype=np.float64)
    normal[0, 0] = np.sum(jacobian[:, 0] * jacobian[:, 0])
    normal[0, 1] = np.sum(jacobian[:, 0] * jacobian[:, 1])
    normal[1, 1] = np.sum(jacobian[:, 1] * jacobian[:, 1])
    normal[1, 0] = normal[0, 1]

    return jacobian @ normal.T


def compute_parameters(jacobian: np.ndarray, offset: Vector2) -> np.ndarray:
    """
    给定末端期望位移，求各关节的角速度参数

    :param jacobian: Nx2 雅可比矩阵
    :param offset: 期望位移 target - tip_position()
    :return: 长度为 N 的参数向量
    """
    inverse = compute_pseudo_inverse(jacobian)
    return inverse @ offset.as_array()


def apply_tip_bias(parameters: np.ndarray, tip_bias: float = 1.1) -> np.ndarray:
    """
    指数偏置：parameters[i] *= tip_bias ** i（根为 0），让靠近末端的关节动得更多

    :param parameters: 原始参数向量
    :param tip_bias: 偏置底数
    :return: 偏置后的参数向量（新数组）
    """
    parameters = np.asarray(parameters, dtype=np.float64)
    return parameters * np.power(tip_bias, np.arange(len(parameters)))


def compute_velocity(jacobian: np.ndarray, parameters: Sequence[float]) -> Vector2:
    """
    给定雅可比与参数，求末端速度 Σ g_i * p_i

    :param jacobian: Nx2 雅可比矩阵
    :param parameters: 长度为 N 的参数向量
    :return: 末端速度
    :raises ParameterCountMismatchError: 梯度数与参数数不一致
    """
    jacobian = np.asarray(jacobian, dtype=np.float64).reshape(-1, 2)
    parameters = np.asarray(parameters, dtype=np.float64)
    if len(jacobian) != len(parameters):
        raise ParameterCountMismatchError(
            f"Number of gradients ({len(jacobian)}) does not match number of parameters ({len(parameters)})")
    return Vector2.from_array(parameters @ jacobian)


def apply_controls(root: ArmJoint, deltas: Union[Sequence[float], np.ndarray]):
    """
    把角度增量按根 -> 末端顺序加到各关节上
    长度不符时先报错，不做部分更新

    :param root: 链的根关节
    :param deltas: 增量序列
    :raises ParameterCountMismatchError: 增量比关节多或少
    """
    ik_chain = build_ik_chain(root)
    if len(deltas) > len(ik_chain):
        raise ParameterCountMismatchError(
            f"More deltas than arm segments ({len(deltas)} > {len(ik_chain)})")
    if len(deltas) < len(ik_chain):
        raise ParameterCountMismatchError(
            f"More arm segments than deltas ({len(ik_chain)} > {len(deltas)})")

    for joint, delta in zip(ik_chain, deltas):
        joint.apply_delta(float(delta))
