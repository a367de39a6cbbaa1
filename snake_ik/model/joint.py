"""
蛇形链关节实现
"""
import numpy as np
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from snake_ik.utils import Vector2, RigidTransform


@dataclass(frozen=True)
class Segment:
    """
    渲染接口的单段输出

    :param start: 关节基点（世界坐标）
    :param end: 关节末端（世界坐标）
    :param radius: 末端可扫过的圆轨迹半径 = length * 累积缩放
    """
    start: Vector2
    end: Vector2
    radius: float


class ArmJoint:
    """
    旋转关节：一段固定长度的刚性连杆，末端接一个自由旋转

    链为单向链表，每个关节独占其 child 及全部后代（不共享、无环）。
    构造后只有 angle 会被修改，且只由控制器修改。
    """

    def __init__(self, length: float, child: Optional['ArmJoint'] = None, angle: float = 0.0):
        """
        初始化关节

        :param length: 连杆长度（>= 0，构造后不变）
        :param child: 子关节（链的下一节），None 表示末端
        :param angle: 关节角（弧度）
        """
        if length < 0:
            raise ValueError(f"Joint length must be non-negative, got {length}")
        self.length: float = float(length)
        self.child: Optional['ArmJoint'] = child
        self.angle: float = float(angle)

    def local_offset(self) -> Vector2:
        """自身坐标系下的连杆向量 (length, 0)"""
        return Vector2(self.length, 0.0)

    def offset(self) -> Vector2:
        """旋转后，末端相对自身基点的位移"""
        return self.local_offset().rotate(self.angle)

    def local_transform(self) -> RigidTransform:
        """先平移 (length, 0)，再旋转 angle"""
        return RigidTransform.identity().translate(self.local_offset()).rotate(self.angle)

    def global_transform(self, parent_transform: RigidTransform) -> RigidTransform:
        """
        给定父级累积变换 T，返回 T ∘ local

        :param parent_transform: 父级累积变换
        :return: 本关节的全局变换
        """
        return self.local_transform().after(parent_transform)

    def apply_delta(self, delta: float):
        """累加关节角增量"""
        self.angle += delta

    def iter_chain(self) -> Iterator['ArmJoint']:
        """从本关节开始，按根 -> 末端顺序遍历"""
        node: Optional[ArmJoint] = self
        while node is not None:
            yield node
            node = node.child

    def joint_count(self) -> int:
        return sum(1 for _ in self.iter_chain())

    def tip_position(self) -> Vector2:
        """
        正向运动学：自末端向根依次应用局部变换，得到链末端在本关节基坐标系中的位置
        """
        position = Vector2.zero()
        for joint in reversed(list(self.iter_chain())):
            position = joint.local_transform().apply_to_position(position)
        return position

    def global_transforms(self, base_transform: Optional[RigidTransform] = None) -> List[RigidTransform]:
        """
        每个关节末端的全局变换（根 -> 末端）

        :param base_transform: 链基座的放置变换，默认单位变换
        :return: 全局变换列表
        """
        transform = base_transform if base_transform is not None else RigidTransform.identity()
        transforms = []
        for joint in self.iter_chain():
            transform = joint.global_transform(transform)
            transforms.append(transform)
        return transforms

    def render(self, base_transform: RigidTransform) -> List[Segment]:
        """
        渲染接口：给出每个关节的线段端点与轨迹圆半径，不修改链

        :param base_transform: 累积的放置变换
        :return: Segment 列表（根 -> 末端）
        """
        segments = []
        transform = base_transform
        for joint in self.iter_chain():
            composed = joint.global_transform(transform)
            segments.append(Segment(
                start=transform.get_position(),
                end=composed.get_position(),
                radius=joint.length * composed.get_scale(),
            ))
            transform = composed
        return segments

    def angles(self) -> List[float]:
        return [joint.angle for joint in self.iter_chain()]

    def lengths(self) -> List[float]:
        return [joint.length for joint in self.iter_chain()]

    def set_angles(self, angles: Sequence[float]):
        """
        整体设置关节角（根 -> 末端）

        :param angles: 角度序列，长度必须等于关节数
        """
        joints = list(self.iter_chain())
        if len(angles) != len(joints):
            raise ValueError(f"Expected {len(joints)} angles, got {len(angles)}")
        for joint, angle in zip(joints, angles):
            joint.angle = float(angle)

    def __repr__(self):
        return f"<{self.__class__.__name__}: length={self.length:.3f} angle={self.angle:.4f}>"


def build_chain(lengths: Sequence[float], angles: Optional[Sequence[float]] = None) -> ArmJoint:
    """
    按根 -> 末端顺序构建关节链

    :param lengths: 各连杆长度（根 -> 末端），至少一个
    :param angles: 各关节角，None 表示全部为 0
    :return: 根关节
    """
    if len(lengths) == 0:
        raise ValueError("A chain needs at least one joint")
    if angles is None:
        angles = [0.0] * len(lengths)
    if len(angles) != len(lengths):
        raise ValueError(f"lengths/angles size mismatch: {len(lengths)} vs {len(angles)}")

    # 自末端向根构建，每个关节持有其子关节
    root: Optional[ArmJoint] = None
    for length, angle in zip(reversed(lengths), reversed(angles)):
        root = ArmJoint(length, root, angle)
    return root


def build_snake(num_joints: int = 50,
                min_length: float = 10.0,
                max_length: float = 15.0,
                initial_angle: Optional[float] = None) -> ArmJoint:
    """
    构建蛇形链：连杆长度在 [min_length, max_length) 间线性插值，根部最长、末端最短

    :param num_joints: 关节数
    :param min_length: 末端连杆长度
    :param max_length: 长度插值上界（不含）
    :param initial_angle: 统一初始角，None 时为 4π / num_joints
    :return: 根关节
    """
    if num_joints < 1:
        raise ValueError(f"num_joints must be positive, got {num_joints}")
    if initial_angle is None:
        initial_angle = 4 * np.pi / num_joints

    # 第 i 节长度 min + (max - min) * i / n，i 越大越靠近根部
    lengths = [min_length + (max_length - min_length) * i / num_joints
               for i in reversed(range(num_joints))]
    return build_chain(lengths, [initial_angle] * num_joints)
