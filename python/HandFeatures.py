from typing import Dict, NamedTuple

from HandData import (
    FINGER_JOINTS,
    INDEX_MCP,
    PINKY_MCP,
    THUMB_IP,
    THUMB_MCP,
    THUMB_TIP,
    WRIST,
)
from Normalizer import NormalizedHand


class FingerStates(NamedTuple):
    index: bool
    middle: bool
    ring: bool
    pinky: bool
    thumb: bool

    @property
    def extended_count(self) -> int:
        """Extended non-thumb fingers (0-4)."""
        return sum((self.index, self.middle, self.ring, self.pinky))

    def as_dict(self) -> Dict[str, bool]:
        return self._asdict()


class HandFeatureExtractor:
    """
    Derives extended/curled state per finger from normalized distances.
    A finger counts as extended when its tip sits farther from the wrist than
    its PIP joint by more than extension_ratio.
    """

    def __init__(self, extension_ratio: float = 1.2, thumb_far_ratio: float = 1.3,
                 thumb_straight_ratio: float = 1.0):
        self.extension_ratio = extension_ratio
        self.thumb_far_ratio = thumb_far_ratio
        self.thumb_straight_ratio = thumb_straight_ratio

    def configure(self, extension_ratio: float = None, thumb_far_ratio: float = None,
                  thumb_straight_ratio: float = None) -> None:
        if extension_ratio is not None:
            self.extension_ratio = extension_ratio
        if thumb_far_ratio is not None:
            self.thumb_far_ratio = thumb_far_ratio
        if thumb_straight_ratio is not None:
            self.thumb_straight_ratio = thumb_straight_ratio

    def finger_extended(self, hand: NormalizedHand, finger_name: str) -> bool:
        _, pip, _, tip = FINGER_JOINTS[finger_name]
        return hand.nd(tip, WRIST) > hand.nd(pip, WRIST) * self.extension_ratio

    def thumb_extended(self, hand: NormalizedHand) -> bool:
        far_from_palm = hand.nd(THUMB_TIP, PINKY_MCP) > hand.nd(THUMB_MCP, PINKY_MCP) * self.thumb_far_ratio
        straight = hand.nd(THUMB_TIP, THUMB_MCP) > hand.nd(THUMB_IP, THUMB_MCP) * self.thumb_straight_ratio
        return far_from_palm and straight

    def process(self, hand: NormalizedHand) -> FingerStates:
        return FingerStates(
            index=self.finger_extended(hand, "index"),
            middle=self.finger_extended(hand, "middle"),
            ring=self.finger_extended(hand, "ring"),
            pinky=self.finger_extended(hand, "pinky"),
            thumb=self.thumb_extended(hand),
        )


def is_right_hand(hand: NormalizedHand) -> bool:
    """Index knuckle left of the pinky knuckle in image space."""
    return hand[INDEX_MCP].x < hand[PINKY_MCP].x
