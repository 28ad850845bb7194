from __future__ import annotations

import numpy as np
import pytest

from step_core.joints import BodyJoint as J

# 世界坐标（米），y 轴向上，z 轴向前。每个姿态的四个关节角与注释一致。

# 左膝 90°、左髋 90°、右膝 90°、右髋 180° -> (0.25, 0.25, 0.25, 0.5)
LEFT_STEP_POSE = {
    J.LEFT_SHOULDER: (0.1, 0.5, 0.0),
    J.LEFT_HIP: (0.1, 0.0, 0.0),
    J.LEFT_KNEE: (0.1, 0.0, 0.4),
    J.LEFT_ANKLE: (0.1, -0.4, 0.4),
    J.RIGHT_SHOULDER: (-0.1, 0.5, 0.0),
    J.RIGHT_HIP: (-0.1, 0.0, 0.0),
    J.RIGHT_KNEE: (-0.1, -0.4, 0.0),
    J.RIGHT_ANKLE: (-0.1, -0.4, -0.4),
}

# 左右镜像 -> (0.25, 0.5, 0.25, 0.25)
RIGHT_STEP_POSE = {
    J.LEFT_SHOULDER: (0.1, 0.5, 0.0),
    J.LEFT_HIP: (0.1, 0.0, 0.0),
    J.LEFT_KNEE: (0.1, -0.4, 0.0),
    J.LEFT_ANKLE: (0.1, -0.4, -0.4),
    J.RIGHT_SHOULDER: (-0.1, 0.5, 0.0),
    J.RIGHT_HIP: (-0.1, 0.0, 0.0),
    J.RIGHT_KNEE: (-0.1, 0.0, 0.4),
    J.RIGHT_ANKLE: (-0.1, -0.4, 0.4),
}

# 直立 -> (0.5, 0.5, 0.5, 0.5)，与两个模板的相似度都约 0.945
STAND_POSE = {
    J.LEFT_SHOULDER: (0.1, 0.5, 0.0),
    J.LEFT_HIP: (0.1, 0.0, 0.0),
    J.LEFT_KNEE: (0.1, -0.4, 0.0),
    J.LEFT_ANKLE: (0.1, -0.8, 0.0),
    J.RIGHT_SHOULDER: (-0.1, 0.5, 0.0),
    J.RIGHT_HIP: (-0.1, 0.0, 0.0),
    J.RIGHT_KNEE: (-0.1, -0.4, 0.0),
    J.RIGHT_ANKLE: (-0.1, -0.8, 0.0),
}


def make_world_landmarks(pose: dict, n_points: int = 33) -> np.ndarray:
    pts = np.zeros((n_points, 3), dtype=np.float64)
    for joint, xyz in pose.items():
        if int(joint) < n_points:
            pts[int(joint)] = xyz
    return pts


@pytest.fixture
def left_step() -> np.ndarray:
    return make_world_landmarks(LEFT_STEP_POSE)


@pytest.fixture
def right_step() -> np.ndarray:
    return make_world_landmarks(RIGHT_STEP_POSE)


@pytest.fixture
def stand() -> np.ndarray:
    return make_world_landmarks(STAND_POSE)


class RecordingListener:
    def __init__(self) -> None:
        self.progress: list[float] = []
        self.counts: list[int] = []

    def on_progress(self, progress: float) -> None:
        self.progress.append(progress)

    def on_rep_count(self, count: int) -> None:
        self.counts.append(count)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()
