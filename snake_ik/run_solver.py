"""
无界面求解入口
按配置构建蛇形链，逐帧驱动目标轨迹，导出动画 JSON

用法: python -m snake_ik.run_solver [config.json]
"""
import json
import os
import sys
import time

from snake_ik.animation import SnakeContext, update_snake
from snake_ik.data_io import (
    INTERPOLATION_MODES,
    build_snake_from_config,
    load_chain_state,
    load_targets,
    interpolate_targets,
    extract_current_joint_states,
    export_result
)


def run_solver(config_path="config.json"):
    # 1. 加载配置
    if not os.path.exists(config_path):
        print(f"❌ 找不到配置文件: {config_path}")
        return None

    with open(config_path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    print("----------- Snake IK Headless -----------")
    print(f"配置加载: {config_path}")

    targets_path = config.get('targets_path')
    initial_state_path = config.get('initial_state_path')
    output_path = config.get('output_path', 'animation.json')
    interpolation = config.get('interpolation', 'linear')

    # 跟踪参数
    params = {
        'smoothing_damping': config.get('smoothing_damping', 0.1),
        'tolerance': config.get('tolerance', 3.0),
        'max_iterations': config.get('max_iterations', 1000),
        'speed': config.get('speed', 0.1),
        'tip_bias': config.get('tip_bias', 1.1)
    }

    # 2. 构建蛇形链
    try:
        total_frames = int(config.get('total_frames', 200))
        if initial_state_path:
            print(f"正在加载初始姿态: {initial_state_path} ...")
            chain = load_chain_state(initial_state_path)
        else:
            chain = build_snake_from_config(config)
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"❌ 蛇形链构建失败: {e}")
        return None
    print(f"蛇形链构建成功，包含 {chain.joint_count()} 个关节")

    ctx = SnakeContext.create(chain)

    # 3. 加载目标轨迹；未配置时目标固定为初始末端位置
    keyframes = None
    if targets_path:
        print(f"正在加载目标轨迹: {targets_path} ...")
        try:
            if interpolation not in INTERPOLATION_MODES:
                raise ValueError(f"Unknown interpolation mode: {interpolation}")
            keyframes = load_targets(targets_path)
            print(f"轨迹加载成功，共 {len(keyframes)} 个关键帧")
        except (OSError, ValueError, KeyError) as e:
            print(f"❌ 目标轨迹加载失败: {e}")
            return None
    else:
        print(f"未配置目标轨迹，目标固定为 ({ctx.target.x:.2f}, {ctx.target.y:.2f})")

    # 4. 逐帧求解
    solved_frames = []
    converged_frames = 0
    start_time = time.time()

    for frame in range(total_frames + 1):
        # 打印进度
        if frame % 10 == 0:
            sys.stdout.write(f"\r进度: {frame}/{total_frames}")
            sys.stdout.flush()

        if keyframes is not None:
            ctx.target = interpolate_targets(keyframes, frame, interpolation)

        if update_snake(ctx, **params):
            converged_frames += 1

        solved_frames.append(extract_current_joint_states(frame, ctx.chain, ctx.target, ctx.converged))

    print()  # 换行
    duration = time.time() - start_time
    print(f"求解完成，耗时: {duration:.2f} 秒")
    print(f"收敛帧数: {converged_frames}/{total_frames + 1}")

    # 5. 导出结果
    print(f"正在导出到: {output_path} ...")
    export_result(solved_frames, ctx.chain, output_path)
    print("✅ 任务完成！")
    return solved_frames


if __name__ == "__main__":
    if len(sys.argv) > 1:
        run_solver(sys.argv[1])
    else:
        run_solver()
