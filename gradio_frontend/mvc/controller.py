from __future__ import annotations

import logging
import time
from typing import Callable, Generator, Optional, Tuple

import numpy as np

from .model import save_uploaded, draw_annotations

from step_core.config import StepCounterConfig
from step_core.frame_source import FrameSourceConfig, iter_pose_frames
from step_core.pose_detector import PoseDetector, PoseDetectorConfig
from step_core.rep_counter import StepRepCounter
from step_core.types import PoseFrame

logger = logging.getLogger(__name__)


class StepCountController:
    """业务控制器：组织检测器与计数器，逐帧产出计数文本与标注画面。

    同时实现 RepCounterListener，接收计数器推送的进度与次数。
    """

    def __init__(self,
                 config: Optional[StepCounterConfig] = None,
                 detector_factory: Optional[Callable[[], PoseDetector]] = None) -> None:
        self.cfg = config or StepCounterConfig()
        self._detector_factory = detector_factory or (lambda: PoseDetector(PoseDetectorConfig()))
        self.counter = StepRepCounter(self.cfg, listener=self)
        # 监听者视角的最新进度与次数
        self.progress: float = 0.0
        self.rep_count: int = 0
        self.last_proc_fps: Optional[float] = None
        # 停止标志（用于摄像头模式手动停止）
        self._stop: bool = False

    def on_progress(self, progress: float) -> None:
        self.progress = progress

    def on_rep_count(self, count: int) -> None:
        self.rep_count = count
        logger.info("计数: %d", count)

    def stop(self) -> None:
        """请求停止当前评测（主要用于摄像头实时模式）。"""
        self._stop = True

    def reset(self) -> None:
        """新会话：重新创建计数器，清空进度、姿态与次数。"""
        self.counter = StepRepCounter(self.cfg, listener=self)
        self.progress = 0.0
        self.rep_count = 0

    def process(self, pose_frame: PoseFrame, frame_bgr: np.ndarray) -> Tuple[str, np.ndarray]:
        """处理单帧：送入计数器并生成状态文本与标注图。"""
        count, info = self.counter.update(pose_frame.world_landmarks)
        if info["accepted"]:
            sim_txt = f"相似度 左/右: {info['sim_left']:.3f}/{info['sim_right']:.3f}"
        else:
            sim_txt = f"本帧跳过: {info['rejected']}"
        txt = f"已完成: {count} | 进度: {info['progress']:.2f} | 姿态: {info['posture']} | {sim_txt}"
        ann = draw_annotations(
            frame_bgr,
            pose_frame.landmarks,
            count,
            info["progress"],
            info["posture"],
            info["angles"],
        )
        return txt, ann

    def start_evaluation(self, eval_file: Optional[str], use_webcam: bool = False,
                         sample_fps: float = 30.0) -> Generator[Tuple[str, Optional[np.ndarray]], None, None]:
        """对视频文件或摄像头逐帧计数，产出 (文本, 标注帧)。"""
        self._stop = False
        self.reset()
        source = 0 if use_webcam else save_uploaded(eval_file, "eval")
        if source is None:
            yield ("未提供待评测视频", None)
            return

        detector = self._detector_factory()
        logger.info("开始计数: %s", "摄像头" if use_webcam else source)
        t0 = time.time()
        frames_done = 0
        last_ann = None
        try:
            frames = iter_pose_frames(
                source,
                detector,
                FrameSourceConfig(sample_fps=sample_fps),
                should_stop=lambda: self._stop,
            )
            for pose_frame, frame in frames:
                txt, last_ann = self.process(pose_frame, frame)

                frames_done += 1
                elapsed = time.time() - t0
                self.last_proc_fps = frames_done / elapsed if elapsed > 0 else 0.0
                yield (f"{txt} | 处理FPS:{self.last_proc_fps:.1f}", last_ann)
        except Exception as e:
            logger.exception("计数过程出错")
            yield (f"计数过程出错: {e}", last_ann)
            return
        finally:
            detector.close()
            logger.info("计数结束，共 %d 帧，%d 次", frames_done, self.rep_count)

        if not use_webcam:
            yield (f"评测结束，共完成 {self.rep_count} 次", last_ann)
