"""
交互式查看器
matplotlib 定时驱动动画，鼠标移动更新目标，每帧绘制各段连杆及其淡色轨迹圆

用法: python -m snake_ik.viewer [config.json]
"""
import json
import os
import sys
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.patches import Circle
from typing import Dict, List, Optional

from snake_ik.animation import SnakeContext, update_snake
from snake_ik.data_io import build_snake_from_config
from snake_ik.model.joint import Segment
from snake_ik.utils import Vector2, RigidTransform


# 轨迹圆透明度
LOCUS_ALPHA = 0.1


class SnakeViewer:
    """
    画布中心为链基座；鼠标位置（数据坐标）即目标
    """

    def __init__(self, ctx: SnakeContext, params: Optional[Dict] = None,
                 tick_interval: int = 20, extent: Optional[float] = None):
        """
        :param ctx: 动画状态
        :param params: 传给 update_snake 的参数
        :param tick_interval: 帧间隔（毫秒）
        :param extent: 坐标轴半宽，None 时取链总长
        """
        self.ctx = ctx
        self.params = params or {}
        self.tick_interval = tick_interval
        self.base_transform = RigidTransform.identity()

        if extent is None:
            extent = sum(ctx.chain.lengths())

        self.fig, self.ax = plt.subplots()
        self.ax.set_aspect('equal')
        self.ax.set_xlim(-extent, extent)
        self.ax.set_ylim(-extent, extent)
        self.ax.set_title("Snake IK")

        self.arm_lines = LineCollection([], colors='black', linewidths=1.5)
        self.ax.add_collection(self.arm_lines)
        self.loci: Optional[PatchCollection] = None
        self.target_marker, = self.ax.plot([], [], 'r+', markersize=10)

        self.animation: Optional[FuncAnimation] = None
        self.fig.canvas.mpl_connect('motion_notify_event', self.on_mouse_move)

    def on_mouse_move(self, event):
        """输入端：只记录最新目标，下一帧读取"""
        if event.inaxes is not self.ax or event.xdata is None or event.ydata is None:
            return
        self.ctx.target = Vector2(float(event.xdata), float(event.ydata))

    def draw(self) -> List[Segment]:
        """只读链状态，重绘连杆、轨迹圆与目标"""
        segments = self.ctx.chain.render(self.base_transform)

        self.arm_lines.set_segments([[(s.start.x, s.start.y), (s.end.x, s.end.y)] for s in segments])

        if self.loci is not None:
            self.loci.remove()
        circles = [Circle((s.start.x, s.start.y), s.radius) for s in segments]
        self.loci = PatchCollection(circles, facecolors='none', edgecolors='black', alpha=LOCUS_ALPHA)
        self.ax.add_collection(self.loci)

        self.target_marker.set_data([self.ctx.target.x], [self.ctx.target.y])
        return segments

    def update(self, frame):
        update_snake(self.ctx, **self.params)
        self.draw()
        return self.arm_lines, self.loci, self.target_marker

    def start(self):
        self.draw()
        self.animation = FuncAnimation(self.fig, self.update, interval=self.tick_interval,
                                       blit=False, cache_frame_data=False)
        plt.show()


def main(config_path: Optional[str] = None):
    config = {}
    if config_path is not None:
        if not os.path.exists(config_path):
            print(f"❌ 找不到配置文件: {config_path}")
            return
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)

    params = {
        'smoothing_damping': config.get('smoothing_damping', 0.1),
        'tolerance': config.get('tolerance', 3.0),
        'max_iterations': config.get('max_iterations', 1000),
        'speed': config.get('speed', 0.1),
        'tip_bias': config.get('tip_bias', 1.1)
    }

    ctx = SnakeContext.create(build_snake_from_config(config))
    viewer = SnakeViewer(ctx, params, tick_interval=int(config.get('tick_interval', 20)))
    viewer.start()


if __name__ == "__main__":
    if len(sys.argv) > 1:
        main(sys.argv[1])
    else:
        main()
