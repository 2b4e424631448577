from types import SimpleNamespace

import pytest

from HandData import Classification, InputShapeError, Landmark, TrainingSample, to_landmark, to_landmarks


def test_to_landmark_accepts_common_formats():
    assert to_landmark(Landmark(0.1, 0.2, 0.3)) == Landmark(0.1, 0.2, 0.3)
    assert to_landmark(SimpleNamespace(x=0.1, y=0.2, z=0.3)) == Landmark(0.1, 0.2, 0.3)
    assert to_landmark({"x": 0.1, "y": 0.2}) == Landmark(0.1, 0.2, 0.0)
    assert to_landmark([0.1, 0.2, 0.3]) == Landmark(0.1, 0.2, 0.3)


def test_to_landmark_rejects_strings():
    with pytest.raises(InputShapeError):
        to_landmark("xyz")


def test_missing_hand_is_empty():
    assert to_landmarks(None) == []
    assert to_landmarks([]) == []


def test_wrong_count_raises():
    with pytest.raises(InputShapeError, match="expected 21, got 20"):
        to_landmarks([[0.0, 0.0, 0.0]] * 20)


def test_bad_values_raise_input_shape_error():
    pts = [[0.0, 0.0, 0.0]] * 20 + [["a", "b", "c"]]
    with pytest.raises(InputShapeError):
        to_landmarks(pts)


def test_input_shape_error_is_value_error():
    assert issubclass(InputShapeError, ValueError)


def test_to_dict_shapes():
    assert TrainingSample("A", (1.0, 2.0)).to_dict() == {"label": "A", "vector": [1.0, 2.0]}
    d = Classification(label="B", confidence=90, locked=True).to_dict()
    assert d["label"] == "B"
    assert d["locked"] is True
    assert d["status"] == "Waiting..."


def test_unsized_payloads_raise_input_shape_error():
    for payload in (5, True, 0.5, "x" * 21, {"x": 0.1}):
        with pytest.raises(InputShapeError, match="expected a list"):
            to_landmarks(payload)
