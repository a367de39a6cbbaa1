"""
Snake IK
二维多关节蛇形链的速度式逆运动学：末端跟踪目标，同时平滑链姿态
"""

__version__ = "0.1.0"
