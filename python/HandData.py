from dataclasses import dataclass
from typing import List, MutableMapping, NamedTuple, Optional, Sequence, Union

LANDMARK_COUNT = 21

# Landmark indices (MediaPipe hand topology)
WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

# (mcp, pip, dip, tip) per non-thumb finger
FINGER_JOINTS = {
    "index": (INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP),
    "middle": (MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP),
    "ring": (RING_MCP, RING_PIP, RING_DIP, RING_TIP),
    "pinky": (PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP),
}


class InputShapeError(ValueError):
    """Landmark payload that cannot be read as a 21-point hand."""


class Landmark(NamedTuple):
    x: float
    y: float
    z: float = 0.0


LandmarkLike = Union[Landmark, Sequence[float], MutableMapping[str, float], object]


def to_landmark(entry: LandmarkLike) -> Landmark:
    if isinstance(entry, Landmark):
        return entry
    if hasattr(entry, "x") and hasattr(entry, "y") and hasattr(entry, "z"):
        return Landmark(float(entry.x), float(entry.y), float(entry.z))
    if isinstance(entry, dict):
        return Landmark(float(entry.get("x", 0.0)), float(entry.get("y", 0.0)), float(entry.get("z", 0.0)))
    if not isinstance(entry, (str, bytes)) and hasattr(entry, "__getitem__") and len(entry) >= 3:
        return Landmark(float(entry[0]), float(entry[1]), float(entry[2]))
    raise InputShapeError("Unsupported landmark format; expected object with x,y,z or sequence of 3 values.")


def to_landmarks(points: Optional[Sequence[LandmarkLike]]) -> List[Landmark]:
    """
    Coerce a detector payload into a list of Landmark tuples.
    None or an empty sequence means "no hand" and yields [].
    """
    if points is None:
        return []
    if isinstance(points, (str, bytes, dict)):
        raise InputShapeError(f"Invalid landmarks: expected a list, got {type(points).__name__}")
    try:
        count = len(points)
    except TypeError as e:
        raise InputShapeError(f"Invalid landmarks: expected a list, got {type(points).__name__}") from e
    if count == 0:
        return []
    if count != LANDMARK_COUNT:
        raise InputShapeError(f"Invalid landmarks: expected {LANDMARK_COUNT}, got {count}")
    try:
        return [to_landmark(p) for p in points]
    except InputShapeError:
        raise
    except (TypeError, ValueError) as e:
        raise InputShapeError(f"Invalid landmark value: {e}") from e


class GestureCandidate(NamedTuple):
    label: Optional[str] = None
    raw_confidence: float = 0.0


NO_CANDIDATE = GestureCandidate()


class TrainingSample(NamedTuple):
    label: str
    vector: tuple

    def to_dict(self):
        return {"label": self.label, "vector": list(self.vector)}


@dataclass
class Classification:
    label: Optional[str] = None
    confidence: int = 0
    locked: bool = False
    verification_progress: int = 0
    status: str = "Waiting..."
    just_locked: bool = False
    candidate: Optional[str] = None

    def to_dict(self):
        return {
            "label": self.label,
            "confidence": self.confidence,
            "locked": self.locked,
            "verification_progress": self.verification_progress,
            "status": self.status,
            "just_locked": self.just_locked,
            "candidate": self.candidate,
        }


class HandData:
    """
    Simple container for per-hand data that flows between modules.
    """

    def __init__(self):
        # raw mediapipe landmark object (for drawing)
        self.raw_landmarks = None

        # list of Landmark tuples
        self.landmarks = []

        # "Left" / "Right"
        self.handedness = "Unknown"

        self.visible = False

        # timing
        self.timestamp = 0.0  # absolute time (seconds)
        self.dt = 0.0  # time since previous frame (seconds)

        # classification result
        self.classification = Classification()

    def to_dict(self):
        """Serialize to JSON-friendly dict."""
        return {
            "handedness": self.handedness,
            "visible": self.visible,
            "landmarks": [list(p) for p in self.landmarks],
            "timestamp": self.timestamp,
            "dt": self.dt,
            "classification": self.classification.to_dict(),
        }
