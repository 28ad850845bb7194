from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .config import StepCounterConfig
from .geometry import joint_angle
from .joints import StepJoints
from .types import AngleVector


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """两个等长向量的余弦相似度。

    输入: a, b 为等长实数序列。
    输出: [-1, 1] 的浮点数；任一向量模长为 0 时返回 0.0。
    作用: 衡量当前关节角向量与模板的方向接近程度（与幅值无关）。
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"向量长度不一致: {va.shape} vs {vb.shape}")
    na = float(np.linalg.norm(va))
    nb = float(np.linalg.norm(vb))
    if na <= 0.0 or nb <= 0.0:
        return 0.0
    return float(np.dot(va, vb) / (na * nb))


def compute_step_angles(joints: StepJoints) -> AngleVector:
    """按固定顺序计算左膝、左髋、右膝、右髋四个关节角（单位：圈）。"""
    return (
        joint_angle(joints.left_ankle, joints.left_knee, joints.left_hip),
        joint_angle(joints.left_knee, joints.left_hip, joints.left_shoulder),
        joint_angle(joints.right_ankle, joints.right_knee, joints.right_hip),
        joint_angle(joints.right_knee, joints.right_hip, joints.right_shoulder),
    )


def step_progress(best_similarity: float, config: Optional[StepCounterConfig] = None) -> float:
    """将最佳模板相似度映射为瞬时进度。

    相似度在 [0.95, 0.99] 内线性映射到 [0, 1]，低于下限记为 0，上限不截断。
    """
    cfg = config or StepCounterConfig()
    return max((best_similarity - cfg.progress_floor) / cfg.progress_span, 0.0)
