from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

import cv2

from .pose_detector import PoseDetector
from .types import PoseFrame


@dataclass(frozen=True)
class FrameSourceConfig:
    sample_fps: float = 30.0
    max_seconds: Optional[float] = None


class FrameSourceError(RuntimeError):
    pass


def iter_pose_frames(
    source: Union[str, int],
    detector: PoseDetector,
    config: Optional[FrameSourceConfig] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Iterator[tuple[PoseFrame, object]]:
    """逐帧读取视频/摄像头并做姿态检测。

    输入:
    - source: 视频文件路径，或摄像头索引（int）。
    - detector: PoseDetector 实例。
    - config: 可选的抽样配置（帧率、最长时长）。
    - should_stop: 可选回调，返回 True 时提前结束。

    输出:
    - 按时间顺序产出 (PoseFrame, 原始 BGR 帧)；未检测到人体时 PoseFrame 的关键点为 None。

    作用:
    - 按 sample_fps 抽帧，保证计数器按到达顺序逐帧处理；
    - 无法打开视频源时抛出 FrameSourceError。
    """
    cfg = config or FrameSourceConfig()

    cap = cv2.VideoCapture(source)
    if not cap.isOpened():
        raise FrameSourceError(f"无法打开视频源：{source}")

    src_fps = cap.get(cv2.CAP_PROP_FPS)
    if not src_fps or src_fps <= 1e-6:
        src_fps = 30.0
    step = max(1, int(round(src_fps / max(1e-6, cfg.sample_fps))))

    max_frames = None
    if cfg.max_seconds is not None:
        max_frames = int(cfg.max_seconds * src_fps)

    idx = 0
    try:
        while True:
            if should_stop is not None and should_stop():
                break
            if max_frames is not None and idx >= max_frames:
                break
            ok, frame = cap.read()
            if not ok:
                break

            if idx % step == 0:
                landmarks, world = detector.detect(frame)
                yield PoseFrame(timestamp_s=idx / src_fps, world_landmarks=world, landmarks=landmarks), frame

            idx += 1
    finally:
        cap.release()
