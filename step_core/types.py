from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class Landmark:
    """三维点/向量 (x, y, z)，世界坐标（单位与姿态模型一致，MediaPipe 为米）。"""

    x: float
    y: float
    z: float

    def __neg__(self) -> "Landmark":
        return Landmark(-self.x, -self.y, -self.z)

    def as_array(self) -> np.ndarray:
        """返回 (3,) 的 float64 数组，便于向量运算。"""
        return np.array([self.x, self.y, self.z], dtype=np.float64)


# 四个关节角度（单位：圈，0.5 = 180°），顺序：
# 左踝-左膝-左髋, 左膝-左髋-左肩, 右踝-右膝-右髋, 右膝-右髋-右肩
AngleVector = tuple[float, float, float, float]


class Posture(Enum):
    STAND = "stand"
    LEFT_STEP = "left_step"
    RIGHT_STEP = "right_step"


@dataclass(frozen=True)
class PoseFrame:
    """单帧姿态结果。

    属性:
    - timestamp_s: 帧时间戳（秒）。
    - world_landmarks: (33,3) 世界坐标关键点，未检测到人体时为 None。
    - landmarks: (33,4) 归一化图像坐标 x,y,z,visibility，仅用于画面叠加。
    """

    timestamp_s: float
    world_landmarks: Optional[np.ndarray]
    landmarks: Optional[np.ndarray] = None
