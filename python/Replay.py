import json
from typing import Iterable, Iterator, List, Optional, Tuple

from GestureEngine import GestureEngine
from HandData import Classification

DEFAULT_FRAME_INTERVAL = 1.0 / 30.0

Frame = Tuple[Optional[float], list]


def parse_frame(line: str) -> Optional[Frame]:
    """
    One recorded frame per line: a landmark list, null/[] for "no hand", or
    {"t": seconds, "landmarks": [...]}. Blank lines yield None.
    """
    line = line.strip()
    if not line:
        return None
    payload = json.loads(line)
    if isinstance(payload, dict):
        t = payload.get("t")
        if not isinstance(t, (int, float)) or isinstance(t, bool):
            t = None
        return t, payload.get("landmarks") or []
    return None, payload or []


def read_recording(path: str) -> Iterator[Frame]:
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            try:
                frame = parse_frame(line)
            except json.JSONDecodeError as e:
                print(f"[PY] Skipping line {lineno} of {path}: {e}")
                continue
            if frame is not None:
                yield frame


def replay(engine: GestureEngine, frames: Iterable[Frame], start: float = 0.0,
           interval: float = DEFAULT_FRAME_INTERVAL) -> List[Classification]:
    """
    Feed recorded frames in order. Frames without a timestamp are spaced
    `interval` seconds after the previous one.
    """
    results = []
    t = start - interval
    for ts, landmarks in frames:
        t = ts if ts is not None else t + interval
        results.append(engine.feed(landmarks, timestamp=t))
    return results
