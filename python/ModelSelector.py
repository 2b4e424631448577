import threading
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from GeometricClassifier import GeometricClassifier
from HandData import NO_CANDIDATE, GestureCandidate, Landmark, TrainingSample
from MotionOverride import MotionOverride
from NeighborClassifier import NeighborClassifier
from Normalizer import wrist_relative_vector


class ModelMode(str, Enum):
    GEOMETRIC = "geometric"
    NEIGHBOR = "neighbor"


def as_training_sample(sample) -> TrainingSample:
    if isinstance(sample, TrainingSample):
        return sample
    if isinstance(sample, dict):
        return TrainingSample(str(sample["label"]), tuple(float(v) for v in sample["vector"]))
    label, vector = sample
    return TrainingSample(str(label), tuple(float(v) for v in vector))


class ModelSelector:
    """
    Chooses the classifier that produces each frame's candidate and owns the
    trainable sample set.

    The sample set is replaced, never edited in place: writers build a new
    tuple under the lock, readers grab the current tuple once per frame.
    """

    def __init__(self, cfg=None):
        self.mode = ModelMode.GEOMETRIC
        self.geometric = GeometricClassifier()
        self.motion = MotionOverride()
        self.neighbor = NeighborClassifier()
        self._lock = threading.Lock()
        self._samples: Tuple[TrainingSample, ...] = ()
        if cfg:
            self.update_config(cfg)

    def update_config(self, cfg):
        self.geometric.update_config(cfg)
        self.motion.update_config(cfg)
        self.apply_config_mode(cfg.get("model", {}).get("mode"))

    def apply_config_mode(self, mode) -> None:
        if not mode:
            return
        try:
            self.set_mode(mode)
        except ValueError:
            print(f"[MODEL] Unknown mode '{mode}' in config, keeping '{self.mode.value}'")

    # ---------- mode ----------
    def set_mode(self, mode) -> None:
        mode = ModelMode(mode)
        if mode != self.mode:
            self.motion.reset()
        self.mode = mode

    # ---------- training set ----------
    def load_training_set(self, samples: Iterable) -> None:
        converted = tuple(as_training_sample(s) for s in samples)
        with self._lock:
            self._samples = converted
        print(f"[MODEL] Loaded {len(converted)} samples ({len(self.trained_classes)} classes)")

    def add_samples(self, samples: Iterable) -> None:
        converted = tuple(as_training_sample(s) for s in samples)
        with self._lock:
            self._samples = self._samples + converted

    def clear(self) -> None:
        with self._lock:
            self._samples = ()
        self.set_mode(ModelMode.GEOMETRIC)

    def snapshot(self) -> Tuple[TrainingSample, ...]:
        with self._lock:
            return self._samples

    @property
    def sample_count(self) -> int:
        return len(self.snapshot())

    @property
    def trained_classes(self) -> List[str]:
        seen = {}
        for s in self.snapshot():
            seen.setdefault(s.label, None)
        return list(seen)

    # ---------- per frame ----------
    def reset(self) -> None:
        """Forget cross-frame motion history (hand lost)."""
        self.motion.reset()

    def predict(self, landmarks: Sequence[Landmark]) -> Tuple[GestureCandidate, str]:
        if self.mode == ModelMode.NEIGHBOR:
            samples = self.snapshot()
            result, status = self.neighbor.classify(wrist_relative_vector(landmarks), samples)
            return (result or NO_CANDIDATE), status

        label = self.geometric.classify(landmarks)
        candidate = GestureCandidate(label, self.geometric.raw_confidence) if label else NO_CANDIDATE
        candidate = self.motion.apply(candidate, landmarks)
        if candidate.label is None:
            return candidate, "Analysing..."
        return candidate, f"Found: {candidate.label} ({round(candidate.raw_confidence)}%)"
