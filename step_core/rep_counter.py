from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol

import numpy as np

from .config import StepCounterConfig
from .joints import extract_step_joints, missing_joints
from .posture import PostureStateMachine
from .scoring import compute_step_angles, cosine_similarity, step_progress
from .smoothing import ProgressSmoother
from .types import Posture, PoseFrame

logger = logging.getLogger(__name__)


class FrameRejectedError(RuntimeError):
    """单帧被丢弃。只在计数器内部抛出并就地处理，不会传给调用方。"""

    reason = "rejected"
    level = logging.ERROR


class MissingLandmarksError(FrameRejectedError):
    reason = "missing_data"
    level = logging.WARNING


class InsufficientLandmarksError(FrameRejectedError):
    reason = "insufficient_landmarks"
    level = logging.WARNING


class LandmarkIndexError(FrameRejectedError):
    reason = "index_out_of_range"


class ComputationError(FrameRejectedError):
    reason = "computation_failure"


class RepCounterListener(Protocol):
    """计数结果的接收方（界面/宿主程序）。"""

    def on_progress(self, progress: float) -> None:
        """平滑进度更新，约在 [0, 1]，每个有效帧一次。"""
        ...

    def on_rep_count(self, count: int) -> None:
        """计数加一后回调，参数为累计次数。"""
        ...


class ExerciseRepCounter(ABC):
    """计数器基类：持有累计次数并转发给监听者。子类只负责“何时加一”。"""

    def __init__(self, listener: Optional[RepCounterListener] = None) -> None:
        self.listener = listener
        self.rep_count = 0

    def increment_rep_count(self) -> None:
        self.rep_count += 1
        if self.listener is not None:
            self.listener.on_rep_count(self.rep_count)

    def send_progress_update(self, progress: float) -> None:
        if self.listener is not None:
            self.listener.on_progress(float(progress))

    def reset_rep_count(self) -> None:
        self.rep_count = 0
        if self.listener is not None:
            self.listener.on_rep_count(0)

    @abstractmethod
    def set_results(self, bundle: Optional[PoseFrame]) -> None:
        """接收一帧姿态结果。"""


def _as_points(world_landmarks: Any) -> np.ndarray:
    """将世界坐标关键点转为 (N,>=3) 的 float64 数组。

    支持 numpy 数组、(x,y,z) 元组序列，以及带 x/y/z 属性的对象序列（如 MediaPipe 的 Landmark）。
    """
    if world_landmarks is None:
        raise MissingLandmarksError("未获得关键点结果")
    try:
        if isinstance(world_landmarks, np.ndarray):
            pts = world_landmarks.astype(np.float64, copy=False)
        else:
            rows = [(p.x, p.y, p.z) if hasattr(p, "x") else p for p in world_landmarks]
            pts = np.asarray(rows, dtype=np.float64)
    except (AttributeError, TypeError, ValueError) as e:
        raise MissingLandmarksError(f"关键点格式无效: {e}") from e
    if pts.size == 0:
        raise MissingLandmarksError("关键点为空")
    if pts.ndim != 2 or pts.shape[1] < 3:
        raise MissingLandmarksError(f"关键点形状无效: {pts.shape}")
    return pts


class StepRepCounter(ExerciseRepCounter):
    """原地迈步（左右交替下蹲步）计数器。

    每帧流程：
    - 校验关键点数量与所需索引；
    - 取左右踝/膝/髋/肩 8 个关节，计算 4 个关节角；
    - 与左/右步模板做余弦相似度，取较大者映射为瞬时进度并做指数平滑；
    - 推送平滑进度，再由姿态状态机判断是否计数。

    任一步骤失败只丢弃当前帧（记录日志），保留上一有效帧的状态。调用需串行。
    """

    def __init__(
        self,
        config: Optional[StepCounterConfig] = None,
        listener: Optional[RepCounterListener] = None,
    ) -> None:
        super().__init__(listener)
        self.cfg = config or StepCounterConfig()
        self.smoother = ProgressSmoother(self.cfg.smoothing_factor)
        self.machine = PostureStateMachine(self.cfg)
        self.last_rejection: Optional[str] = None

    @property
    def smoothed_progress(self) -> float:
        return self.smoother.value

    @property
    def posture(self) -> Posture:
        return self.machine.posture

    def set_results(self, bundle: Optional[PoseFrame]) -> None:
        self.update(None if bundle is None else bundle.world_landmarks)

    def _validate(self, world_landmarks: Any) -> np.ndarray:
        pts = _as_points(world_landmarks)
        if pts.shape[0] < self.cfg.min_landmarks:
            raise InsufficientLandmarksError(
                f"关键点数量不足: {pts.shape[0]} < {self.cfg.min_landmarks}"
            )
        missing = missing_joints(pts.shape[0])
        if missing:
            names = ", ".join(f"{j.name}={int(j)}" for j in missing)
            raise LandmarkIndexError(f"关节索引越界 ({names})，关键点数量: {pts.shape[0]}")
        return pts

    def _process(self, pts: np.ndarray, info: dict) -> None:
        angles = compute_step_angles(extract_step_joints(pts))
        sim_left = cosine_similarity(self.cfg.left_template, angles)
        sim_right = cosine_similarity(self.cfg.right_template, angles)
        if not np.all(np.isfinite([*angles, sim_left, sim_right])):
            raise ComputationError(f"出现非有限值: angles={angles}")
        info.update(angles=angles, sim_left=sim_left, sim_right=sim_right)

        progress = self.smoother.update(step_progress(max(sim_left, sim_right), self.cfg))
        self.send_progress_update(progress)
        info["progress_sent"] = True

        if self.machine.update(sim_left, sim_right, progress):
            self.increment_rep_count()
            info["counted"] = True
            logger.debug("完成一次计数，累计 %d", self.rep_count)

    def _resync_progress(self) -> None:
        """监听者已收到被丢弃帧的进度时，回滚后重新推送保留的进度。"""
        try:
            self.send_progress_update(self.smoother.value)
        except Exception:
            logger.exception("回滚后同步进度失败")

    def update(self, world_landmarks: Any) -> tuple[int, dict]:
        """处理一帧世界坐标关键点。

        输入: world_landmarks 为 (N,3) 数组、(x,y,z) 序列或 None（本帧无结果）。
        输出: (累计次数, info)。info 含 accepted/rejected/angles/sim_left/sim_right/progress/posture/counted。
        作用: 见类说明；被丢弃的帧不改变任何状态。校验失败的帧不推送任何事件；
        推送进度后才失败的帧（如监听者计数回调出错）会再推送一次回滚后的进度，使监听者与计数器一致。
        """
        info: dict = {
            "accepted": False,
            "rejected": None,
            "angles": None,
            "sim_left": None,
            "sim_right": None,
            "counted": False,
        }
        saved = (self.smoother.value, self.machine.posture, self.rep_count)
        try:
            pts = self._validate(world_landmarks)
            try:
                self._process(pts, info)
            except FrameRejectedError:
                raise
            except Exception as e:
                raise ComputationError(f"关键点处理失败: {e}") from e
        except FrameRejectedError as e:
            self.smoother.value, self.machine.posture, self.rep_count = saved
            if info.pop("progress_sent", False):
                self._resync_progress()
            self.last_rejection = e.reason
            info["rejected"] = e.reason
            info["counted"] = False
            logger.log(e.level, "丢弃本帧 [%s]: %s", e.reason, e)
        else:
            info.pop("progress_sent", None)
            self.last_rejection = None
            info["accepted"] = True
        info["progress"] = self.smoother.value
        info["posture"] = self.machine.posture.value
        return self.rep_count, info
