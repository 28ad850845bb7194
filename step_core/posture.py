from __future__ import annotations

import logging
from typing import Optional

from .config import StepCounterConfig
from .types import Posture

logger = logging.getLogger(__name__)


class PostureStateMachine:
    """站立/左步/右步 三状态机，按优先级依次匹配规则，首条命中即生效：

    1. 右侧相似度达标、当前为左步且平滑进度达标：计数，转为右步；
    2. 左侧相似度达标、当前为右步且平滑进度达标：计数，转为左步；
    3. 站立状态下两侧相似度差距足够大：相似度较高一侧的“对侧”作为当前步
       （右侧更像则记为左步，反之为右步；该映射经实测校准，保持不变）；
    4. 两侧相似度均低于站立阈值且当前不是站立：回到站立。

    均不命中时状态不变。
    """

    def __init__(self, config: Optional[StepCounterConfig] = None) -> None:
        self.cfg = config or StepCounterConfig()
        self.posture = Posture.STAND

    def update(self, sim_left: float, sim_right: float, smoothed_progress: float) -> bool:
        """根据本帧相似度与平滑进度推进状态。

        输入: sim_left/sim_right 为与左/右模板的余弦相似度；smoothed_progress 为平滑进度。
        输出: bool，本帧是否完成一次计数。
        """
        cfg = self.cfg
        prev = self.posture
        counted = False
        if (sim_right > cfg.rep_similarity and prev is Posture.LEFT_STEP
                and smoothed_progress > cfg.rep_progress):
            counted = True
            self.posture = Posture.RIGHT_STEP
        elif (sim_left > cfg.rep_similarity and prev is Posture.RIGHT_STEP
                and smoothed_progress > cfg.rep_progress):
            counted = True
            self.posture = Posture.LEFT_STEP
        elif abs(sim_left - sim_right) > cfg.start_similarity_gap and prev is Posture.STAND:
            self.posture = Posture.LEFT_STEP if sim_right > sim_left else Posture.RIGHT_STEP
        elif sim_left < cfg.stand_similarity and sim_right < cfg.stand_similarity and prev is not Posture.STAND:
            self.posture = Posture.STAND

        if self.posture is not prev:
            logger.debug("姿态切换: %s -> %s (计数=%s)", prev.value, self.posture.value, counted)
        return counted
