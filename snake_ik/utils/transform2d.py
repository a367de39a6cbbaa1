"""
二维刚体/相似变换工具
"""
import numpy as np
from dataclasses import dataclass

from .vector2 import Vector2


# getScale() 允许的两轴长度平方比偏差
AFFINE_TOLERANCE = 0.01


class NotAffineError(ValueError):
    """变换的线性部分不是（1% 容差内的）均匀缩放 + 旋转"""


@dataclass(frozen=True)
class RigidTransform:
    """
    二维仿射变换: p -> x_axis * p.x + y_axis * p.y + origin

    通过 identity/translation/rotation/scale/after 构造时，两轴等长且正交，
    即线性部分为均匀缩放乘以旋转。所有方法都返回新变换，不修改自身。
    """
    x_axis: Vector2
    y_axis: Vector2
    origin: Vector2

    @staticmethod
    def identity() -> 'RigidTransform':
        return RigidTransform(Vector2(1.0, 0.0), Vector2(0.0, 1.0), Vector2(0.0, 0.0))

    @staticmethod
    def translation(offset: Vector2) -> 'RigidTransform':
        return RigidTransform.identity().translate(offset)

    @staticmethod
    def rotation(radians: float) -> 'RigidTransform':
        return RigidTransform.identity().rotate(radians)

    def as_matrix(self) -> np.ndarray:
        """返回 3x3 齐次矩阵"""
        matrix = np.identity(3, dtype=np.float64)
        matrix[:2, 0] = self.x_axis.as_array()
        matrix[:2, 1] = self.y_axis.as_array()
        matrix[:2, 2] = self.origin.as_array()
        return matrix

    def translate(self, offset: Vector2) -> 'RigidTransform':
        """在世界坐标系中平移（只改变原点）"""
        return RigidTransform(self.x_axis, self.y_axis, self.origin.add(offset))

    def rotate(self, radians: float) -> 'RigidTransform':
        """绕世界原点旋转：两轴和原点一起转"""
        return RigidTransform(self.x_axis.rotate(radians),
                              self.y_axis.rotate(radians),
                              self.origin.rotate(radians))

    def scale(self, factor: float) -> 'RigidTransform':
        """缩放两轴，原点不变"""
        return RigidTransform(self.x_axis.scale(factor), self.y_axis.scale(factor), self.origin)

    def get_position(self) -> Vector2:
        return self.origin

    def get_scale(self) -> float:
        """
        提取均匀缩放系数

        :return: x 轴长度
        :raises NotAffineError: |x_axis|^2 / |y_axis|^2 偏离 1 超过 1%（数值漂移或误用）
        """
        squared_length = self.x_axis.squared_length()
        with np.errstate(divide='ignore', invalid='ignore'):
            ratio = np.float64(squared_length) / self.y_axis.squared_length()
        if ratio < 1.0 - AFFINE_TOLERANCE or 1.0 + AFFINE_TOLERANCE < ratio:
            raise NotAffineError(f"Transform is not affine (axis length ratio {ratio:.4f})")
        return float(np.sqrt(squared_length))

    def apply_to_direction(self, v: Vector2) -> Vector2:
        """只应用线性部分（方向/速度）"""
        return self.x_axis.scale(v.x).add(self.y_axis.scale(v.y))

    def apply_to_position(self, v: Vector2) -> Vector2:
        return self.apply_to_direction(v).add(self.origin)

    def after(self, other: 'RigidTransform') -> 'RigidTransform':
        """
        复合变换：先应用 self，再应用 other
        满足 T.apply_to_position(p) == other.apply_to_position(self.apply_to_position(p))

        :param other: 后应用的变换（通常是父级的累积变换）
        :return: 复合后的变换
        """
        return RigidTransform(other.apply_to_direction(self.x_axis),
                              other.apply_to_direction(self.y_axis),
                              other.apply_to_position(self.origin))
