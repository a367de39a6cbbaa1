"""
二维向量工具
"""
import numpy as np
from dataclasses import dataclass
from typing import Sequence, Union


@dataclass(frozen=True)
class Vector2:
    """
    不可变二维向量 (x, y)

    所有运算返回新向量；除以零不抛异常，按 IEEE 语义得到 inf/nan 并向后传播。
    """
    x: float
    y: float

    @staticmethod
    def zero() -> 'Vector2':
        return Vector2(0.0, 0.0)

    @staticmethod
    def from_array(values: Union[np.ndarray, Sequence[float]]) -> 'Vector2':
        """
        从长度为2的数组构造向量

        :param values: [x, y]
        :return: Vector2
        """
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (2,):
            raise ValueError(f"Vector2 needs a 2-element array, got shape {values.shape}")
        return Vector2(float(values[0]), float(values[1]))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    def add(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x + other.x, self.y + other.y)

    def sub(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x - other.x, self.y - other.y)

    def negate(self) -> 'Vector2':
        return Vector2(-self.x, -self.y)

    def scale(self, scalar: float) -> 'Vector2':
        return Vector2(self.x * scalar, self.y * scalar)

    def divide(self, scalar: float) -> 'Vector2':
        """除法；scalar 为 0 时分量为 inf 或 nan"""
        with np.errstate(divide='ignore', invalid='ignore'):
            x = np.float64(self.x) / scalar
            y = np.float64(self.y) / scalar
        return Vector2(float(x), float(y))

    def dot(self, other: 'Vector2') -> float:
        return self.x * other.x + self.y * other.y

    def squared_length(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return float(np.sqrt(self.squared_length()))

    def rotate(self, radians: float) -> 'Vector2':
        """绕原点逆时针旋转 radians 弧度"""
        c, s = np.cos(radians), np.sin(radians)
        return Vector2(float(c * self.x - s * self.y), float(s * self.x + c * self.y))

    def rotate90(self) -> 'Vector2':
        """
        固定旋转 90°: (x, y) -> (-y, x)
        即 rotate(θ) 在 θ=0 处的导数方向，也就是绕原点转动时该点的瞬时速度方向
        """
        return Vector2(-self.y, self.x)

    # 运算符别名
    def __add__(self, other: 'Vector2') -> 'Vector2':
        return self.add(other)

    def __sub__(self, other: 'Vector2') -> 'Vector2':
        return self.sub(other)

    def __neg__(self) -> 'Vector2':
        return self.negate()

    def __mul__(self, scalar: float) -> 'Vector2':
        return self.scale(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> 'Vector2':
        return self.divide(scalar)
