# GeometricClassifier.py
from typing import Callable, Dict, NamedTuple, Optional, Sequence, Tuple

from HandData import (
    INDEX_MCP,
    INDEX_PIP,
    INDEX_TIP,
    Landmark,
    MIDDLE_MCP,
    MIDDLE_TIP,
    RING_MCP,
    THUMB_TIP,
)
from HandFeatures import FingerStates, HandFeatureExtractor, is_right_hand
from Normalizer import NormalizedHand, Normalizer

# Ratios of normalized distances (distance / palm size).
DEFAULT_THRESHOLDS = {
    "extension_ratio": 1.2,
    "thumb_far_ratio": 1.3,
    "thumb_straight_ratio": 1.0,
    # 4 fingers
    "four_thumb_tuck": 0.6,
    # 3 fingers
    "f_thumb_touch": 0.4,
    # 2 fingers
    "k_thumb_pip": 0.6,
    "u_tips_touch": 0.35,
    # 1 finger
    "d_thumb_touch": 0.5,
    # closed hand
    "curve_index_reach": 0.9,
    "o_thumb_touch": 0.35,
    "c_thumb_gap": 1.3,
    "hook_min": 0.7,
    "hook_max": 1.3,
    "t_thumb_pip": 0.6,
    "e_thumb_mcp": 0.7,
    "e_index_tight": 0.85,
}


class HandShape:
    """Per-frame measurements shared by every rule predicate."""

    def __init__(self, hand: NormalizedHand, fingers: FingerStates, thresholds: Dict[str, float]):
        self.hand = hand
        self.fingers = fingers
        self.t = thresholds
        self.right = is_right_hand(hand)

    def nd(self, i: int, j: int) -> float:
        return self.hand.nd(i, j)

    def thumb_past(self, idx: int) -> bool:
        """Thumb tip lies beyond landmark idx, moving from the index side toward the pinky side."""
        tip_x = self.hand[THUMB_TIP].x
        ref_x = self.hand[idx].x
        return tip_x > ref_x if self.right else tip_x < ref_x

    def thumb_between(self, a: int, b: int) -> bool:
        lo, hi = sorted((self.hand[a].x, self.hand[b].x))
        return lo < self.hand[THUMB_TIP].x < hi

    def thumb_above(self, idx: int) -> bool:
        # image y grows downward
        return self.hand[THUMB_TIP].y < self.hand[idx].y


class Rule(NamedTuple):
    label: str
    predicate: Callable[[HandShape], bool]


def _always(s: HandShape) -> bool:
    return True


# ---------- 4 fingers ----------
def _thumb_tucked(s):
    return s.nd(THUMB_TIP, INDEX_MCP) < s.t["four_thumb_tuck"]


# ---------- 3 fingers ----------
def _index_middle_ring(s):
    f = s.fingers
    return f.index and f.middle and f.ring


def _middle_ring_pinky(s):
    f = s.fingers
    return f.middle and f.ring and f.pinky


def _f_shape(s):
    return _middle_ring_pinky(s) and s.nd(THUMB_TIP, INDEX_TIP) < s.t["f_thumb_touch"]


# ---------- 2 fingers ----------
def _index_middle(s):
    return s.fingers.index and s.fingers.middle


def _three(s):
    return s.fingers.thumb and _index_middle(s)


def _k_shape(s):
    # thumb pushed up between index and middle
    return (
        _index_middle(s)
        and s.thumb_above(INDEX_MCP)
        and s.nd(THUMB_TIP, INDEX_PIP) < s.t["k_thumb_pip"]
        and not s.fingers.thumb
    )


def _crossed(s):
    if not _index_middle(s):
        return False
    index_x = s.hand[INDEX_TIP].x
    middle_x = s.hand[MIDDLE_TIP].x
    return index_x > middle_x if s.right else index_x < middle_x


def _u_shape(s):
    return _index_middle(s) and s.nd(INDEX_TIP, MIDDLE_TIP) < s.t["u_tips_touch"]


# ---------- 1 finger ----------
def _l_shape(s):
    return s.fingers.index and s.fingers.thumb


def _d_shape(s):
    return s.fingers.index and s.nd(THUMB_TIP, MIDDLE_TIP) < s.t["d_thumb_touch"]


def _index_only(s):
    return s.fingers.index


def _y_shape(s):
    return s.fingers.pinky and s.fingers.thumb


def _pinky_only(s):
    return s.fingers.pinky


# ---------- closed hand ----------
def _index_curved(s):
    return s.nd(INDEX_TIP, INDEX_MCP) > s.t["curve_index_reach"]


def _o_shape(s):
    return _index_curved(s) and s.nd(THUMB_TIP, INDEX_TIP) < s.t["o_thumb_touch"]


def _c_shape(s):
    gap = s.nd(THUMB_TIP, INDEX_TIP)
    return _index_curved(s) and s.t["o_thumb_touch"] < gap < s.t["c_thumb_gap"]


def _hooked(s):
    reach = s.nd(INDEX_TIP, INDEX_MCP)
    return s.t["hook_min"] < reach < s.t["hook_max"]


def _thumb_crossed(s):
    return s.thumb_past(MIDDLE_MCP) and s.thumb_above(INDEX_MCP)


def _thumb_sandwiched(s):
    return s.thumb_between(INDEX_MCP, MIDDLE_MCP) and s.nd(THUMB_TIP, INDEX_PIP) < s.t["t_thumb_pip"]


def _thumb_low(s):
    return (
        s.hand[THUMB_TIP].y > s.hand[INDEX_MCP].y
        and s.nd(THUMB_TIP, INDEX_MCP) < s.t["e_thumb_mcp"]
        and s.nd(INDEX_TIP, INDEX_MCP) < s.t["e_index_tight"]
    )


def _thumb_past_ring(s):
    return s.thumb_past(RING_MCP)


def _thumb_past_middle(s):
    return s.thumb_past(MIDDLE_MCP)


# First match wins inside a bucket; the order resolves shapes that satisfy
# more than one loose test.
BUCKETS: Dict[int, Tuple[Rule, ...]] = {
    4: (
        Rule("4", _thumb_tucked),
        Rule("5", _always),
    ),
    3: (
        Rule("W", _index_middle_ring),
        Rule("F", _f_shape),
        Rule("OK", _middle_ring_pinky),
    ),
    2: (
        Rule("3", _three),
        Rule("K", _k_shape),
        Rule("R", _crossed),
        Rule("U", _u_shape),
        Rule("V", _index_middle),
    ),
    1: (
        Rule("L", _l_shape),
        Rule("D", _d_shape),
        Rule("1", _index_only),
        Rule("Y", _y_shape),
        Rule("I", _pinky_only),
    ),
    0: (
        Rule("O", _o_shape),
        Rule("C", _c_shape),
        Rule("X", _hooked),
        Rule("S", _thumb_crossed),
        Rule("T", _thumb_sandwiched),
        Rule("E", _thumb_low),
        Rule("M", _thumb_past_ring),
        Rule("N", _thumb_past_middle),
        Rule("A", _always),
    ),
}


class GeometricClassifier:
    """
    Hierarchical hand-shape classifier: count extended fingers, then walk the
    rule table of that bucket.
    """

    def __init__(self, cfg=None):
        self.thresholds = dict(DEFAULT_THRESHOLDS)
        self.raw_confidence = 90.0
        self.normalizer = Normalizer()
        self.feature_extractor = HandFeatureExtractor()
        if cfg:
            self.update_config(cfg)

    def update_config(self, cfg):
        if not cfg:
            return
        c = cfg.get("geometric", {})
        for key in DEFAULT_THRESHOLDS:
            if key in c:
                self.thresholds[key] = c[key]
        self.raw_confidence = c.get("raw_confidence", self.raw_confidence)
        self.normalizer.update_config(cfg)
        self.feature_extractor.configure(
            extension_ratio=self.thresholds["extension_ratio"],
            thumb_far_ratio=self.thresholds["thumb_far_ratio"],
            thumb_straight_ratio=self.thresholds["thumb_straight_ratio"],
        )

    def shape(self, landmarks: Sequence[Landmark]) -> HandShape:
        hand = self.normalizer.normalize(landmarks)
        return HandShape(hand, self.feature_extractor.process(hand), self.thresholds)

    def match(self, landmarks: Sequence[Landmark]) -> Optional[Rule]:
        if not landmarks:
            return None
        s = self.shape(landmarks)
        for rule in BUCKETS.get(s.fingers.extended_count, ()):
            if rule.predicate(s):
                return rule
        return None

    def classify(self, landmarks: Sequence[Landmark]) -> Optional[str]:
        """Returns the matched label, or None when no rule of the bucket fits."""
        rule = self.match(landmarks)
        return rule.label if rule else None
