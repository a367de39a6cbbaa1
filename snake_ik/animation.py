"""
动画帧驱动
每帧：先平滑一次，再做目标跟踪迭代
"""
from dataclasses import dataclass

from snake_ik.model.joint import ArmJoint
from snake_ik.solver import smooth_arm, move_arm
from snake_ik.utils import Vector2


@dataclass
class SnakeContext:
    """
    动画全局状态，由驱动方持有并在每帧传给 update_snake

    :param chain: 蛇形链根关节（只由控制器修改）
    :param target: 当前目标位置，输入端随时覆盖，每帧读取一次最新值
    :param tick: 已执行的帧数
    :param converged: 上一帧跟踪结束时末端是否在容差内
    """
    chain: ArmJoint
    target: Vector2
    tick: int = 0
    converged: bool = False

    @staticmethod
    def create(chain: ArmJoint) -> 'SnakeContext':
        """初始目标取链末端当前位置"""
        return SnakeContext(chain=chain, target=chain.tip_position())


def update_snake(
    ctx: SnakeContext,
    smoothing_damping: float = 0.1,
    tolerance: float = 3.0,
    max_iterations: int = 1000,
    speed: float = 0.1,
    tip_bias: float = 1.1
) -> bool:
    """
    执行一帧：平滑（乘阻尼）后跟踪 ctx.target

    :return: 本帧结束时末端是否在容差内
    """
    smooth_arm(ctx.chain, smoothing_damping)
    ctx.converged = move_arm(
        root=ctx.chain,
        target=ctx.target,
        tolerance=tolerance,
        max_iterations=max_iterations,
        speed=speed,
        tip_bias=tip_bias
    )
    ctx.tick += 1
    return ctx.converged
