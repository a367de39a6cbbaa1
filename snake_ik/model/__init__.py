"""
模型层 (Model Layer)
蛇形关节链的表示与正向运动学

导出：
- ArmJoint: 旋转关节，1自由度，固定长度连杆后接自由旋转，单向链表持有子关节
- Segment: 渲染接口输出的单段（两端点 + 轨迹圆半径）
- build_chain / build_snake: 构建关节链
"""

from .joint import (
    ArmJoint,
    Segment,
    build_chain,
    build_snake
)

__all__ = [
    'ArmJoint',
    'Segment',
    'build_chain',
    'build_snake'
]
