import math
import random

import pytest

from HandData import TrainingSample
from NeighborClassifier import K, NeighborClassifier, euclidean_distance, predict_knn


def _s(label, *vec):
    return TrainingSample(label, tuple(float(v) for v in vec))


def test_distance():
    assert euclidean_distance([0, 0, 0], [3, 4, 0]) == pytest.approx(5.0)


def test_distance_of_mismatched_lengths_is_infinite():
    assert euclidean_distance([0.0, 0.0, 0.0], [0.0, 0.0]) == math.inf


def test_exact_match_dominates():
    samples = [_s("A", 0, 0, 0), _s("A", 0, 0, 0), _s("B", 10, 10, 10)]
    result = predict_knn([0, 0, 0], samples)
    assert result.label == "A"
    assert result.raw_confidence == pytest.approx(100.0, abs=0.01)


def test_closer_minority_outvotes_far_majority():
    samples = [_s("A", 5, 0), _s("A", 0, 5), _s("A", -5, 0), _s("B", 0.1, 0), _s("B", 0, 0.1)]
    result = predict_knn([0, 0], samples)
    assert result.label == "B"
    assert 95.0 < result.raw_confidence < 100.0


def test_only_k_nearest_vote():
    samples = [_s("A", i * 0.1) for i in range(5)] + [_s("B", 100 + i) for i in range(20)]
    assert predict_knn([0.0], samples).label == "A"
    assert predict_knn([0.0], samples).raw_confidence == pytest.approx(100.0)


def test_fewer_samples_than_k_uses_all():
    result = predict_knn([0.0], [_s("A", 0.5), _s("B", 1.0)], k=5)
    assert result.label == "A"


def test_equal_weight_tie_is_order_independent():
    first = predict_knn([0.0], [_s("B", 1.0), _s("A", -1.0)])
    second = predict_knn([0.0], [_s("A", -1.0), _s("B", 1.0)])
    assert first == second
    assert first.label == "A"
    assert first.raw_confidence == pytest.approx(50.0)


def test_result_does_not_depend_on_sample_order():
    rng = random.Random(7)
    samples = [_s(rng.choice("ABC"), rng.randint(0, 3), rng.randint(0, 3)) for _ in range(30)]
    expected = predict_knn([1, 1], samples)
    for _ in range(10):
        rng.shuffle(samples)
        assert predict_knn([1, 1], samples) == expected


def test_mismatched_samples_never_win():
    samples = [_s("A", 3, 3, 3), _s("B", 0, 0)]
    result = predict_knn([0, 0, 0], samples)
    assert result.label == "A"
    assert result.raw_confidence == pytest.approx(100.0)


def test_empty_inputs():
    assert predict_knn([0.0], []) is None
    assert predict_knn([], [_s("A", 0.0)]) is None


def test_classifier_needs_k_samples():
    clf = NeighborClassifier()
    samples = [_s("A", 0), _s("A", 0), _s("B", 1)]
    result, status = clf.classify([0], samples)
    assert result is None
    assert status == f"Need {K} samples (have 3)"


def test_classifier_status_on_match():
    clf = NeighborClassifier()
    samples = [_s("A", 0)] * 5
    result, status = clf.classify([0], samples)
    assert result.label == "A"
    assert status == "Found: A (100%)"


def test_classifier_with_no_comparable_samples():
    clf = NeighborClassifier()
    samples = [_s("A", 0, 0)] * 5
    result, status = clf.classify([0, 0, 0], samples)
    assert result is None
    assert status == "No comparable samples"
