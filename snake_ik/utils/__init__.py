"""
工具层 (Utils Layer)
二维向量与变换代数
"""

from .vector2 import Vector2
from .transform2d import RigidTransform, NotAffineError

__all__ = [
    'Vector2',
    'RigidTransform',
    'NotAffineError'
]
