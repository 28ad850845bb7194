from __future__ import annotations

import os
from typing import Optional

import cv2
import numpy as np

from step_core.pose_connections import POSE_CONNECTIONS, STEP_ANGLE_TRIPLETS

# 将临时目录设置为项目根目录下的 .temp
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
TEMP_DIR = os.path.join(PROJECT_ROOT, ".temp")
os.makedirs(TEMP_DIR, exist_ok=True)

VISIBILITY_TH = 0.5
POSTURE_LABELS = {
    "stand": "STAND",
    "left_step": "LEFT STEP",
    "right_step": "RIGHT STEP",
}


def save_uploaded(video: Optional[str], name: str) -> Optional[str]:
    """将上传的文件复制到 项目根目录/.temp 下并返回新路径。"""
    if not video:
        return None
    basename = os.path.basename(video)
    target = os.path.join(TEMP_DIR, f"{name}_{basename}")
    try:
        if os.path.abspath(video) != os.path.abspath(target):
            with open(video, "rb") as fsrc, open(target, "wb") as fdst:
                fdst.write(fsrc.read())
    except OSError:
        return None
    return target


def draw_annotations(frame: np.ndarray,
                     landmarks: Optional[np.ndarray],
                     rep_count: int,
                     progress: float,
                     posture: str,
                     angles: Optional[tuple[float, ...]] = None) -> np.ndarray:
    """在帧上绘制骨架、计数、姿态与进度条。

    输入: frame 为 BGR 图像；landmarks 为 (33,4) 归一化关键点或 None；angles 为四个关节角（圈）。
    输出: 标注后的图像副本。
    """
    vis = frame.copy()
    h, w = vis.shape[:2]
    color_skeleton = (150, 150, 150)
    color_pts = (0, 255, 0)
    color_text = (0, 0, 255)

    def to_xy(idx: int):
        return (int(landmarks[idx, 0] * w), int(landmarks[idx, 1] * h))

    if landmarks is not None:
        for a, b in POSE_CONNECTIONS:
            if landmarks[a, 3] >= VISIBILITY_TH and landmarks[b, 3] >= VISIBILITY_TH:
                cv2.line(vis, to_xy(a), to_xy(b), color_skeleton, 2)
        for _, vertex, _ in STEP_ANGLE_TRIPLETS:
            if landmarks[vertex, 3] >= VISIBILITY_TH:
                cv2.circle(vis, to_xy(vertex), 6, color_pts, -1)

    lines = [
        f"Reps: {rep_count}",
        f"Posture: {POSTURE_LABELS.get(posture, posture)}",
    ]
    if angles is not None:
        names = ["L knee", "L hip", "R knee", "R hip"]
        lines.append("  ".join(f"{n}:{a * 360.0:.0f}" for n, a in zip(names, angles)))
    for i, t in enumerate(lines):
        cv2.putText(vis, t, (20, 30 + i * 28), cv2.FONT_HERSHEY_SIMPLEX, 0.8, color_text, 2, cv2.LINE_AA)

    # 进度条：平滑进度可能略超过 1，显示时截断
    p = min(max(float(progress), 0.0), 1.0)
    x0, y0, x1, y1 = 20, h - 30, max(21, w - 20), h - 12
    cv2.rectangle(vis, (x0, y0), (x1, y1), (200, 200, 200), 1)
    cv2.rectangle(vis, (x0, y0), (x0 + int((x1 - x0) * p), y1), (0, 200, 0), -1)
    return vis
