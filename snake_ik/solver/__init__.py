"""
求解层 (Solver Layer)
纯数学计算，负责雅可比构建、近似伪逆、速度计算、平滑启发式及关节角更新
"""

from .ik_core import (
    ParameterCountMismatchError,
    build_ik_chain,
    compute_jacobian,
    compute_pseudo_inverse,
    compute_parameters,
    apply_tip_bias,
    compute_velocity,
    apply_controls
)
from .smoothing import (
    normalize_angle,
    compute_smoothing_deltas,
    smooth_arm
)
from .solve_ik import move_arm

__all__ = [
    'ParameterCountMismatchError',
    'build_ik_chain',
    'compute_jacobian',
    'compute_pseudo_inverse',
    'compute_parameters',
    'apply_tip_bias',
    'compute_velocity',
    'apply_controls',
    'normalize_angle',
    'compute_smoothing_deltas',
    'smooth_arm',
    'move_arm'
]
