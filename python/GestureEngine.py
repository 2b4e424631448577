# GestureEngine.py
import copy
import time
from dataclasses import replace

import Stabilizer
from HandData import Classification, InputShapeError, to_landmarks
from ModelSelector import ModelSelector
from Stabilizer import StabilizerConfig

DEFAULT_CONFIG = {
    "normalizer": {
        "scale_epsilon": 0.01,
        "scale_floor": 0.1,
    },
    "geometric": {
        "raw_confidence": 90,
    },
    "motion": {
        "window": 5,
        "velocity_threshold": 0.04,
        "raw_confidence": 95,
        "overrides": {"1": "Z", "D": "Z"},
    },
    "stabilizer": {
        "window_size": 30,
        "required_frames": 25,
        "min_frames": 5,
        "hold_delay_ms": 600,
        "lock_threshold": 75,
        "raw_weight": 0.4,
        "missing_policy": "shrink",
    },
}


def merge_config(base, override):
    """Deep-merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = merge_config(merged[k], v)
        else:
            merged[k] = copy.deepcopy(v)
    return merged


class GestureEngine:
    """
    Pull-based recognizer: call feed() once per frame, in arrival order.

    feed(None) or feed([]) means the hand left the frame; the window, the held
    label and the motion history are dropped.
    """

    def __init__(self, cfg=None):
        self.cfg = copy.deepcopy(DEFAULT_CONFIG)
        self.selector = ModelSelector()
        self.stabilizer_cfg = StabilizerConfig()
        self.state = Stabilizer.idle_state()
        self.update_config(cfg or {})

    def update_config(self, cfg):
        cfg = cfg or {}
        self.cfg = merge_config(self.cfg, cfg)
        # only an update that names model.mode switches the classifier
        self.cfg.get("model", {}).pop("mode", None)
        self.selector.update_config(self.cfg)
        self.selector.apply_config_mode(cfg.get("model", {}).get("mode"))
        new_stab = StabilizerConfig.from_dict(self.cfg.get("stabilizer", {}))
        if new_stab.window_size < len(self.state.buffer):
            self.state = replace(self.state, buffer=self.state.buffer[-new_stab.window_size:])
        self.stabilizer_cfg = new_stab

    def reset(self) -> Classification:
        self.state, out = Stabilizer.reset(self.state)
        self.selector.reset()
        return Classification(
            label=out.label,
            confidence=out.confidence,
            locked=out.locked,
            verification_progress=out.verification_progress,
            status="No Hand",
        )

    def feed(self, landmarks, timestamp=None) -> Classification:
        now = time.time() if timestamp is None else timestamp
        try:
            lm = to_landmarks(landmarks)
        except InputShapeError as e:
            # bad frame: keep everything as it was
            s = self.state
            return Classification(
                label=s.label,
                confidence=s.confidence,
                locked=Stabilizer.is_holding(s, now, self.stabilizer_cfg),
                verification_progress=s.progress,
                status=str(e),
            )

        if not lm:
            return self.reset()

        candidate, status = self.selector.predict(lm)
        self.state, out = Stabilizer.step(self.state, candidate, now, self.stabilizer_cfg)
        return Classification(
            label=out.label,
            confidence=out.confidence,
            locked=out.locked,
            verification_progress=out.verification_progress,
            status=status,
            just_locked=out.just_locked,
            candidate=candidate.label,
        )

    @property
    def phase(self) -> str:
        return self.state.phase
