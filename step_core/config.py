from __future__ import annotations

from dataclasses import dataclass

from .types import AngleVector


# 下蹲迈步的理想姿态关节角（单位：圈，已除以 360）
LEFT_STEP_TEMPLATE: AngleVector = (0.25, 0.25, 0.25, 0.5)
RIGHT_STEP_TEMPLATE: AngleVector = (0.25, 0.5, 0.25, 0.25)


@dataclass(frozen=True)
class StepCounterConfig:
    """迈步计数的经验阈值。默认值来自真实训练数据的标定，非必要不要修改。"""

    left_template: AngleVector = LEFT_STEP_TEMPLATE
    right_template: AngleVector = RIGHT_STEP_TEMPLATE
    smoothing_factor: float = 0.3
    # 计一次数：另一侧相似度与平滑进度都需超过该值
    rep_similarity: float = 0.985
    rep_progress: float = 0.99
    # 站立状态下两侧相似度差超过该值即进入迈步状态
    start_similarity_gap: float = 0.07
    # 两侧相似度都低于该值时回到站立
    stand_similarity: float = 0.96
    # 相似度 [floor, floor + span] 线性映射到进度 [0, 1]
    progress_floor: float = 0.95
    progress_span: float = 0.04
    min_landmarks: int = 33
