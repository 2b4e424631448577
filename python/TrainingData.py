import json
import os
import time
from typing import List, Optional, Sequence

from HandData import Landmark, TrainingSample, to_landmarks
from Normalizer import wrist_relative_vector

DEFAULT_DATASET = "custom_ml_dataset.json"
SAMPLE_COOLDOWN_S = 0.2


class DataCollector:
    """
    Captures labelled hand poses for the neighbor classifier.
    At most one pose is kept per cooldown window so a held sign does not
    flood the set with near-identical frames.
    """

    def __init__(self, cooldown: float = SAMPLE_COOLDOWN_S):
        self.cooldown = cooldown
        self.collecting = False
        self.label = ""
        self._poses: List[List[Landmark]] = []
        self._last_sample_time = None

    @property
    def sample_count(self) -> int:
        return len(self._poses)

    def start(self, label: str) -> None:
        label = (label or "").strip()
        if not label:
            raise ValueError("Enter a label before collecting samples")
        self.label = label
        self.collecting = True
        self._poses = []
        self._last_sample_time = None

    def stop(self) -> None:
        self.collecting = False

    def add_sample(self, landmarks, now: Optional[float] = None) -> bool:
        """Returns True when the frame was kept."""
        if not self.collecting:
            return False
        lm = to_landmarks(landmarks)
        if not lm:
            return False
        now = time.time() if now is None else now
        if self._last_sample_time is not None and now - self._last_sample_time <= self.cooldown:
            return False
        self._poses.append(lm)
        self._last_sample_time = now
        return True

    def commit(self) -> List[TrainingSample]:
        """Convert buffered poses to wrist-relative samples and stop collecting."""
        samples = [
            TrainingSample(self.label, tuple(wrist_relative_vector(pose))) for pose in self._poses
        ]
        self._poses = []
        self.collecting = False
        return samples


def save_dataset(samples: Sequence[TrainingSample], path: str = DEFAULT_DATASET) -> None:
    if not samples:
        raise ValueError("No data.")
    payload = [s.to_dict() for s in samples]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f)
    print(f"[DATA] Saved {len(payload)} samples to {path}")


def parse_dataset(payload) -> List[TrainingSample]:
    """
    Validate the JSON structure of a dataset.
    Vector lengths are not checked here; a short vector simply never matches.
    """
    if not isinstance(payload, list):
        raise ValueError("Dataset must be a JSON array of {label, vector} objects")
    samples = []
    for i, entry in enumerate(payload):
        if not isinstance(entry, dict) or "label" not in entry or "vector" not in entry:
            raise ValueError(f"Entry {i}: expected an object with 'label' and 'vector'")
        label, vector = entry["label"], entry["vector"]
        if not isinstance(label, str):
            raise ValueError(f"Entry {i}: label must be a string")
        if not isinstance(vector, list) or not all(
            isinstance(v, (int, float)) and not isinstance(v, bool) for v in vector
        ):
            raise ValueError(f"Entry {i}: vector must be a list of numbers")
        samples.append(TrainingSample(label, tuple(float(v) for v in vector)))
    return samples


def load_dataset(path: str = DEFAULT_DATASET) -> List[TrainingSample]:
    if not os.path.exists(path):
        raise ValueError(f"Dataset '{path}' not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse {path}: {e}") from e
    samples = parse_dataset(payload)
    print(f"[DATA] Loaded {len(samples)} samples from {path}")
    return samples
