from __future__ import annotations

import numpy as np

from .types import Landmark


def vector_between(p1: Landmark, p2: Landmark) -> Landmark:
    """返回从 p1 指向 p2 的向量 (p2 - p1)。"""
    return Landmark(p2.x - p1.x, p2.y - p1.y, p2.z - p1.z)


def angle_between(v1: Landmark, v2: Landmark) -> float:
    """计算两个向量的夹角，单位为圈（度数 / 360）。

    输入: v1, v2 为 Landmark 表示的三维向量。
    输出: [0, 0.5] 的浮点数；任一向量长度为 0 时返回 0.0。
    作用: 余弦值先截断到 [-1, 1]，避免浮点误差使 arccos 越界。
    """
    a = v1.as_array()
    b = v2.as_array()
    denom = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denom == 0.0:
        return 0.0
    cosv = float(np.clip(np.dot(a, b) / denom, -1.0, 1.0))
    return float(np.degrees(np.arccos(cosv))) / 360.0


def joint_angle(p1: Landmark, p2: Landmark, p3: Landmark) -> float:
    """计算 ∠p1-p2-p3，即在 p2 处两条射线的夹角（单位：圈）。"""
    return angle_between(vector_between(p1, p2), vector_between(p3, p2))
