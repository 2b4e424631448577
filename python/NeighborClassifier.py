import math
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from HandData import GestureCandidate, TrainingSample

K = 5
WEIGHT_EPSILON = 1e-4


def euclidean_distance(v1, v2) -> float:
    """Distance between two feature vectors; mismatched lengths never compare."""
    a = np.asarray(v1, dtype=float)
    b = np.asarray(v2, dtype=float)
    if a.shape != b.shape:
        return math.inf
    return float(np.linalg.norm(a - b))


def predict_knn(vector: Sequence[float], samples: Sequence[TrainingSample], k: int = K) -> Optional[GestureCandidate]:
    """
    Distance-weighted vote of the k nearest samples.

    Neighbors are ordered by (distance, label), so the result does not depend on
    the order of `samples`. Each neighbor votes 1 / (distance + eps); on equal
    summed weight the label seen first among the ordered neighbors wins.
    Confidence is the winner's share of the total weight, in percent.
    """
    if not samples or len(vector) == 0:
        return None

    query = np.asarray(vector, dtype=float)
    distances = sorted(
        (euclidean_distance(query, s.vector), s.label) for s in samples
    )
    neighbors = distances[: min(k, len(distances))]

    votes: Dict[str, float] = {}
    total_weight = 0.0
    for dist, label in neighbors:
        weight = 1.0 / (dist + WEIGHT_EPSILON)
        votes[label] = votes.get(label, 0.0) + weight
        total_weight += weight

    if total_weight <= 0.0:
        return None

    winner, max_weight = None, -math.inf
    for label, weight in votes.items():
        if weight > max_weight:
            winner, max_weight = label, weight

    confidence = min(max_weight / total_weight * 100.0, 100.0)
    return GestureCandidate(winner, confidence)


class NeighborClassifier:
    def __init__(self, k: int = K):
        self.k = k

    def has_enough(self, samples: Sequence[TrainingSample]) -> bool:
        return len(samples) >= self.k

    def classify(self, vector: Sequence[float], samples: Sequence[TrainingSample]) -> Tuple[Optional[GestureCandidate], str]:
        if not self.has_enough(samples):
            return None, f"Need {self.k} samples (have {len(samples)})"
        result = predict_knn(vector, samples, self.k)
        if result is None:
            return None, "No comparable samples"
        return result, f"Found: {result.label} ({round(result.raw_confidence)}%)"
