"""计数相关的骨架连线（仅用于画面叠加显示）。

索引遵循 MediaPipe Pose 33 关键点定义，不依赖 mediapipe 包本身。
"""
from __future__ import annotations

from .joints import BodyJoint as J

# 躯干 + 双腿，连接对 (a, b)
POSE_CONNECTIONS: set[tuple[int, int]] = {
    (J.LEFT_SHOULDER, J.RIGHT_SHOULDER),
    (J.LEFT_SHOULDER, J.LEFT_HIP),
    (J.RIGHT_SHOULDER, J.RIGHT_HIP),
    (J.LEFT_HIP, J.RIGHT_HIP),
    (J.LEFT_HIP, J.LEFT_KNEE),
    (J.LEFT_KNEE, J.LEFT_ANKLE),
    (J.RIGHT_HIP, J.RIGHT_KNEE),
    (J.RIGHT_KNEE, J.RIGHT_ANKLE),
    # feet
    (J.LEFT_ANKLE, 31),
    (31, 29),
    (J.RIGHT_ANKLE, 32),
    (32, 30),
}

# 参与计算的四个关节角 (p1, 顶点, p3)，顺序与 compute_step_angles 一致
STEP_ANGLE_TRIPLETS: list[tuple[int, int, int]] = [
    (J.LEFT_ANKLE, J.LEFT_KNEE, J.LEFT_HIP),
    (J.LEFT_KNEE, J.LEFT_HIP, J.LEFT_SHOULDER),
    (J.RIGHT_ANKLE, J.RIGHT_KNEE, J.RIGHT_HIP),
    (J.RIGHT_KNEE, J.RIGHT_HIP, J.RIGHT_SHOULDER),
]
