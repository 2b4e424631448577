import math
from typing import List, Sequence

from HandData import MIDDLE_MCP, WRIST, Landmark

SCALE_EPSILON = 0.01
SCALE_FLOOR = 0.1


# ---------- vector & geometry ----------
def planar_dist(a: Landmark, b: Landmark) -> float:
    """Euclidean distance in image space (x, y) between two landmarks."""
    return math.hypot(a.x - b.x, a.y - b.y)


def palm_size(lm: Sequence[Landmark]) -> float:
    """Use wrist -> middle MCP as palm reference length."""
    return planar_dist(lm[WRIST], lm[MIDDLE_MCP])


def raw_vector(lm: Sequence[Landmark]) -> List[float]:
    return [c for p in lm for c in (p.x, p.y, p.z)]


def wrist_relative_vector(lm: Sequence[Landmark]) -> List[float]:
    """Flatten landmarks translated so the wrist sits at the origin."""
    if not lm:
        return []
    w = lm[WRIST]
    return [c for p in lm for c in (p.x - w.x, p.y - w.y, p.z - w.z)]


class NormalizedHand:
    """
    One frame of landmarks with its palm scale.
    Every distance read through nd() is divided by the scale, so thresholds
    compare the same for near and far hands.
    """

    def __init__(self, landmarks: Sequence[Landmark], scale_epsilon: float = SCALE_EPSILON,
                 scale_floor: float = SCALE_FLOOR):
        self.landmarks = landmarks
        size = palm_size(landmarks)
        self.degenerate = size < scale_epsilon
        self.scale = scale_floor if self.degenerate else size

    def __getitem__(self, idx: int) -> Landmark:
        return self.landmarks[idx]

    def normalized_distance(self, p1: Landmark, p2: Landmark) -> float:
        return planar_dist(p1, p2) / self.scale

    def nd(self, i: int, j: int) -> float:
        """Normalized distance between landmark indices i and j."""
        return self.normalized_distance(self.landmarks[i], self.landmarks[j])


class Normalizer:
    def __init__(self, cfg=None):
        self.scale_epsilon = SCALE_EPSILON
        self.scale_floor = SCALE_FLOOR
        if cfg:
            self.update_config(cfg)

    def update_config(self, cfg):
        c = cfg.get("normalizer", {})
        self.scale_epsilon = c.get("scale_epsilon", SCALE_EPSILON)
        self.scale_floor = c.get("scale_floor", SCALE_FLOOR)

    def normalize(self, landmarks: Sequence[Landmark]) -> NormalizedHand:
        return NormalizedHand(landmarks, self.scale_epsilon, self.scale_floor)
