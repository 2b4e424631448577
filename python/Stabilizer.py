from collections import Counter
from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional, Tuple

from HandData import GestureCandidate

IDLE = "idle"
ACCUMULATING = "accumulating"
LOCKED = "locked"

MISSING_SHRINK = "shrink"
MISSING_SKIP = "skip"


@dataclass(frozen=True)
class StabilizerConfig:
    window_size: int = 30
    required_frames: int = 25
    min_frames: int = 5
    hold_delay_ms: float = 600.0
    lock_threshold: float = 75.0
    raw_weight: float = 0.4
    missing_policy: str = MISSING_SHRINK

    @classmethod
    def from_dict(cls, c):
        """Build from the 'stabilizer' config section; unknown keys are ignored."""
        c = c or {}
        default = cls()
        policy = c.get("missing_policy", default.missing_policy)
        if policy not in (MISSING_SHRINK, MISSING_SKIP):
            print(f"[PY] Unknown missing_policy '{policy}', using '{MISSING_SHRINK}'")
            policy = MISSING_SHRINK
        return cls(
            window_size=max(1, int(c.get("window_size", default.window_size))),
            required_frames=max(1, int(c.get("required_frames", default.required_frames))),
            min_frames=max(1, int(c.get("min_frames", default.min_frames))),
            hold_delay_ms=float(c.get("hold_delay_ms", default.hold_delay_ms)),
            lock_threshold=float(c.get("lock_threshold", default.lock_threshold)),
            raw_weight=min(1.0, max(0.0, float(c.get("raw_weight", default.raw_weight)))),
            missing_policy=policy,
        )


@dataclass(frozen=True)
class StabilizerState:
    buffer: Tuple[str, ...] = field(default_factory=tuple)
    label: Optional[str] = None
    lock_time: Optional[float] = None
    locked: bool = False
    confidence: int = 0
    progress: int = 0

    @property
    def phase(self) -> str:
        if self.locked:
            return LOCKED
        if not self.buffer and self.label is None:
            return IDLE
        return ACCUMULATING


class StabilizerOutput(NamedTuple):
    label: Optional[str]
    confidence: int
    locked: bool
    verification_progress: int
    just_locked: bool = False


def idle_state() -> StabilizerState:
    return StabilizerState()


def reset(state: StabilizerState = None) -> Tuple[StabilizerState, StabilizerOutput]:
    """Hand lost: drop the window, the held label and the lock timer."""
    return idle_state(), StabilizerOutput(None, 0, False, 0)


def modal_label(buffer: Tuple[str, ...]) -> Tuple[str, int]:
    """Most frequent label and its count; ties go to the earliest first occurrence."""
    return Counter(buffer).most_common(1)[0]


def is_holding(state: StabilizerState, now: float, config: StabilizerConfig) -> bool:
    if state.lock_time is None:
        return False
    return (now - state.lock_time) * 1000.0 < config.hold_delay_ms


def _output(state: StabilizerState, just_locked: bool = False) -> StabilizerOutput:
    return StabilizerOutput(state.label, state.confidence, state.locked, state.progress, just_locked)


def step(
    state: StabilizerState,
    candidate: GestureCandidate,
    now: float,
    config: StabilizerConfig,
) -> Tuple[StabilizerState, StabilizerOutput]:
    """
    Fold one frame's candidate into the sliding window.

    Returns the next state and what the user should see. `now` is in seconds
    and must not decrease between calls. While a fresh lock is held the window
    is frozen; accumulation resumes once the hold delay has elapsed.
    """
    if is_holding(state, now, config):
        state = replace(state, locked=True)
        return state, _output(state)

    buffer = state.buffer
    if candidate.label is None:
        # dropout frame: no immediate "unknown", just age the window
        if config.missing_policy == MISSING_SHRINK and buffer:
            buffer = buffer[1:]
        state = replace(state, buffer=buffer, locked=False)
        return state, _output(state)

    buffer = (buffer + (candidate.label,))[-config.window_size:]
    if len(buffer) < config.min_frames:
        state = replace(state, buffer=buffer, locked=False)
        return state, _output(state)

    winner, frequency = modal_label(buffer)
    consistency = frequency / config.window_size
    confidence = round(
        candidate.raw_confidence * config.raw_weight
        + consistency * 100.0 * (1.0 - config.raw_weight)
    )
    confidence = int(min(100, max(0, confidence)))
    progress = int(min(100, round(frequency / config.required_frames * 100.0)))
    state = replace(state, buffer=buffer, confidence=confidence, progress=progress)

    if frequency >= config.required_frames and confidence > config.lock_threshold:
        if winner == state.label:
            # same sign still confirmed: no new lock event, no new hold
            state = replace(state, locked=True)
            return state, _output(state)
        state = replace(state, label=winner, lock_time=now, locked=True)
        return state, _output(state, just_locked=True)

    state = replace(state, locked=False)
    return state, _output(state)
