import math
from collections import deque
from typing import Optional, Sequence

from HandData import INDEX_TIP, GestureCandidate, Landmark

DEFAULT_OVERRIDES = {"1": "Z", "D": "Z"}


class MotionOverride:
    """
    Replaces a static single-finger shape with its drawn counterpart when the
    index fingertip keeps moving. Velocity is the mean planar displacement of
    the index tip over the last `window` eligible frames.
    """

    def __init__(self, cfg=None):
        self.window = 5
        self.velocity_threshold = 0.04
        self.raw_confidence = 95.0
        self.overrides = dict(DEFAULT_OVERRIDES)
        self._velocities = deque(maxlen=self.window)
        self._prev_tip = None
        if cfg:
            self.update_config(cfg)

    def update_config(self, cfg):
        c = cfg.get("motion", {})
        window = max(1, int(c.get("window", 5)))
        if window != self.window:
            self.window = window
            self._velocities = deque(self._velocities, maxlen=window)
        self.velocity_threshold = c.get("velocity_threshold", 0.04)
        self.raw_confidence = c.get("raw_confidence", 95.0)
        self.overrides = dict(c.get("overrides", DEFAULT_OVERRIDES))

    def reset(self) -> None:
        self._velocities.clear()
        self._prev_tip = None

    @property
    def average_velocity(self) -> float:
        if not self._velocities:
            return 0.0
        return sum(self._velocities) / len(self._velocities)

    def apply(self, candidate: GestureCandidate, landmarks: Sequence[Landmark]) -> GestureCandidate:
        motion_label: Optional[str] = self.overrides.get(candidate.label) if candidate.label else None
        if motion_label is None:
            self.reset()
            return candidate

        tip = landmarks[INDEX_TIP]
        prev = self._prev_tip
        self._prev_tip = (tip.x, tip.y)
        if prev is None:
            return candidate

        self._velocities.append(math.hypot(tip.x - prev[0], tip.y - prev[1]))
        if self.average_velocity > self.velocity_threshold:
            return GestureCandidate(motion_label, self.raw_confidence)
        return candidate
