from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np


@dataclass(frozen=True)
class PoseDetectorConfig:
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


class PoseDetector:
    """MediaPipe Pose 的薄封装。业务层只拿到 numpy 关键点，不接触 MediaPipe 对象。"""

    def __init__(self, config: Optional[PoseDetectorConfig] = None):
        """初始化 PoseDetector。

        输入:
        - config: 可选的 PoseDetectorConfig，用于控制模型复杂度与置信度阈值。

        输出: 无（构造器）。

        作用: 延迟导入 mediapipe 并创建内部的 Pose 推理对象。
        """
        self._config = config or PoseDetectorConfig()
        # 延迟导入，只做计数逻辑/测试时不需要 mediapipe
        import mediapipe as mp

        self._pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=self._config.model_complexity,
            enable_segmentation=False,
            smooth_landmarks=True,
            min_detection_confidence=self._config.min_detection_confidence,
            min_tracking_confidence=self._config.min_tracking_confidence,
        )

    def detect(self, frame_bgr: np.ndarray) -> tuple[Optional[np.ndarray], Optional[np.ndarray]]:
        """对单帧图像运行姿态推理。

        输入:
        - frame_bgr: BGR 图像，numpy 数组，形状 (h,w,3)。

        输出:
        - (landmarks, world_landmarks)：
          landmarks 为 (33,4) float32，每行 x,y,z,visibility（归一化图像坐标，用于绘制）；
          world_landmarks 为 (33,3) float64，以髋部中点为原点的世界坐标（米，用于计数）。
        - 未检测到人体或输入无效时对应项为 None。
        """
        if frame_bgr is None or frame_bgr.size == 0:
            return None, None

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        result = self._pose.process(frame_rgb)

        landmarks = None
        if result.pose_landmarks is not None:
            lm = result.pose_landmarks.landmark
            landmarks = np.zeros((len(lm), 4), dtype=np.float32)
            for i, p in enumerate(lm):
                landmarks[i] = (p.x, p.y, p.z, p.visibility)

        world = None
        if result.pose_world_landmarks is not None:
            wl = result.pose_world_landmarks.landmark
            world = np.array([(p.x, p.y, p.z) for p in wl], dtype=np.float64)
        return landmarks, world

    def close(self) -> None:
        """释放内部 MediaPipe 资源，调用后不应再使用该实例。"""
        self._pose.close()
