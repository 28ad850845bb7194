from __future__ import annotations


class ProgressSmoother:
    """进度的指数滑动平均：value = a * x + (1 - a) * value。"""

    def __init__(self, smoothing_factor: float = 0.3, initial: float = 0.0) -> None:
        self.smoothing_factor = float(smoothing_factor)
        self.value = float(initial)

    def update(self, progress: float) -> float:
        a = self.smoothing_factor
        self.value = a * float(progress) + (1.0 - a) * self.value
        return self.value
