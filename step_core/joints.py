from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

import numpy as np

from .types import Landmark


class BodyJoint(IntEnum):
    """MediaPipe Pose 33 关键点中计数所需的关节索引。

    https://developers.google.com/mediapipe/solutions/vision/pose_landmarker
    """

    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


class StepJoints(NamedTuple):
    left_ankle: Landmark
    right_ankle: Landmark
    left_knee: Landmark
    right_knee: Landmark
    left_hip: Landmark
    right_hip: Landmark
    left_shoulder: Landmark
    right_shoulder: Landmark


# 字段 -> 关键点索引，顺序与 StepJoints 字段一致
STEP_JOINTS: tuple[BodyJoint, ...] = (
    BodyJoint.LEFT_ANKLE,
    BodyJoint.RIGHT_ANKLE,
    BodyJoint.LEFT_KNEE,
    BodyJoint.RIGHT_KNEE,
    BodyJoint.LEFT_HIP,
    BodyJoint.RIGHT_HIP,
    BodyJoint.LEFT_SHOULDER,
    BodyJoint.RIGHT_SHOULDER,
)


def missing_joints(n_points: int) -> list[BodyJoint]:
    """返回索引超出 n_points 的关节（为空表示全部可取）。"""
    return [j for j in STEP_JOINTS if int(j) >= n_points]


def extract_step_joints(points: np.ndarray) -> StepJoints:
    """从 (N,>=3) 关键点数组中按固定索引取出 8 个关节。

    输入: points 为 (N,3) 或 (N,4) 数组，N 需大于最大关节索引。
    输出: StepJoints，每个字段为 Landmark。
    作用: 将魔数索引集中到 BodyJoint 表，便于单独审查与测试。
    """
    return StepJoints(*(
        Landmark(float(points[j, 0]), float(points[j, 1]), float(points[j, 2]))
        for j in STEP_JOINTS
    ))
