import dataclasses

import pytest

import Stabilizer
from HandData import GestureCandidate, NO_CANDIDATE
from Stabilizer import ACCUMULATING, IDLE, LOCKED, StabilizerConfig, StabilizerState, modal_label, step

FRAME = 0.033
SMALL = StabilizerConfig(window_size=10, required_frames=8)


def _run(labels, config=SMALL, raw=90.0, start=0.0, state=None):
    state = state or Stabilizer.idle_state()
    outputs = []
    for i, label in enumerate(labels):
        state, out = step(state, GestureCandidate(label, raw), start + i * FRAME, config)
        outputs.append(out)
    return state, outputs


def test_steady_sign_locks_at_required_frames():
    state, outs = _run(["B"] * 30)
    first_lock = next(i for i, o in enumerate(outs) if o.locked)
    assert first_lock == 7
    assert outs[7].just_locked
    assert outs[7].label == "B"
    assert outs[7].confidence == 84
    assert outs[9].locked
    assert outs[9].label == "B"
    # window resumes after the 600 ms hold and confirms the same sign
    assert outs[-1].locked
    assert outs[-1].label == "B"
    assert outs[-1].confidence >= 90
    assert state.phase == LOCKED


def test_steady_sign_fires_one_lock_event():
    _, outs = _run(["B"] * 120)
    assert [i for i, o in enumerate(outs) if o.just_locked] == [7]
    assert all(o.locked and o.label == "B" for o in outs[7:])


def test_nothing_before_min_frames():
    _, outs = _run(["B"] * 4)
    assert all(o.confidence == 0 and o.label is None and not o.locked for o in outs)


def test_progress_tracks_frequency():
    _, outs = _run(["B"] * 6)
    assert outs[4].verification_progress == round(5 / 8 * 100)
    assert outs[5].verification_progress == 75


def test_majority_within_window_locks():
    _, outs = _run(["X", "X"] + ["A"] * 8)
    assert outs[-1].just_locked
    assert outs[-1].label == "A"
    assert outs[-1].confidence == 84


def test_low_confidence_does_not_lock():
    _, outs = _run(["B"] * 30, raw=10.0)
    # 10 * 0.4 + 100 * 0.6 = 64
    assert not any(o.locked for o in outs)
    assert outs[-1].confidence == 64


def test_hysteresis_holds_label():
    state, outs = _run(["A"] * 8)
    assert outs[-1].just_locked
    lock_t = 7 * FRAME
    state, out = step(state, GestureCandidate("B", 90.0), lock_t + 0.1, SMALL)
    assert out.label == "A"
    assert out.locked
    assert not out.just_locked
    assert state.buffer == ("A",) * 8


def test_new_sign_takes_over_after_hold():
    state, _ = _run(["A"] * 8)
    state, outs = _run(["B"] * 40, start=1.0, state=state)
    assert outs[-1].label == "B"
    assert any(o.just_locked and o.label == "B" for o in outs)


def test_hold_expires_without_new_winner():
    # far past the hold delay, window split evenly: no lock, label kept
    state = StabilizerState(buffer=("A", "B") * 4, label="A", lock_time=0.231, locked=True)
    state, out = step(state, GestureCandidate("B", 90.0), 5.0, SMALL)
    assert out.label == "A"
    assert not out.locked


def test_reset_returns_to_idle():
    state, _ = _run(["A"] * 8)
    state, out = Stabilizer.reset(state)
    assert state.phase == IDLE
    assert state.buffer == ()
    assert state.lock_time is None
    assert out == (None, 0, False, 0, False)


def test_after_reset_progress_restarts():
    state, _ = _run(["A"] * 10)
    state, _ = Stabilizer.reset(state)
    state, out = step(state, GestureCandidate("A", 90.0), 2.0, SMALL)
    assert state.buffer == ("A",)
    assert state.phase == ACCUMULATING
    assert out.label is None


def test_missing_frame_shrinks_window():
    state, _ = _run(["A"] * 6)
    state, out = step(state, NO_CANDIDATE, 1.0, SMALL)
    assert len(state.buffer) == 5
    assert out.label is None


def test_missing_frame_skip_policy():
    cfg = StabilizerConfig(window_size=10, required_frames=8, missing_policy="skip")
    state, _ = _run(["A"] * 6, config=cfg)
    state, _ = step(state, NO_CANDIDATE, 1.0, cfg)
    assert len(state.buffer) == 6


def test_missing_frame_keeps_lock_during_hold():
    state, _ = _run(["A"] * 8)
    state, out = step(state, NO_CANDIDATE, 8 * FRAME, SMALL)
    assert out.locked
    assert out.label == "A"


def test_window_is_bounded():
    state, _ = _run(["A"] * 50)
    assert len(state.buffer) == 10


def test_modal_label_tie_goes_to_first_seen():
    assert modal_label(("A", "B", "B", "A")) == ("A", 2)
    assert modal_label(("B", "A", "A", "B")) == ("B", 2)


def test_config_from_dict():
    cfg = StabilizerConfig.from_dict({"window_size": 12, "missing_policy": "bogus"})
    assert cfg.window_size == 12
    assert cfg.required_frames == 25
    assert cfg.missing_policy == "shrink"
    assert StabilizerConfig.from_dict(None) == StabilizerConfig()


def test_config_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        SMALL.window_size = 3


def test_window_is_frozen_during_hold():
    state, _ = _run(["A"] * 8)
    for i in range(5):
        state, _ = step(state, GestureCandidate("B", 90.0), 0.3 + i * FRAME, SMALL)
    state, _ = step(state, NO_CANDIDATE, 0.5, SMALL)
    assert state.buffer == ("A",) * 8
    assert state.lock_time == pytest.approx(7 * FRAME)


def test_same_label_after_hold_keeps_lock_time():
    state, _ = _run(["A"] * 8)
    state, out = step(state, GestureCandidate("A", 90.0), 1.0, SMALL)
    assert out.locked
    assert not out.just_locked
    assert state.lock_time == pytest.approx(7 * FRAME)
