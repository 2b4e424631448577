import json
import os
import time

import cv2

HAND_CONNECTIONS = (
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (5, 9), (9, 10), (10, 11), (11, 12),
    (9, 13), (13, 14), (14, 15), (15, 16),
    (13, 17), (17, 18), (18, 19), (19, 20),
    (0, 17),
)


# ---------- debug drawing ----------
def draw_hand_debug(frame, hand_data, color=(0, 255, 0)):
    """Draw the hand skeleton from normalized landmarks."""
    if hand_data is None or not hand_data.landmarks:
        return
    h, w, _ = frame.shape
    pts = [(int(p.x * w), int(p.y * h)) for p in hand_data.landmarks]
    for a, b in HAND_CONNECTIONS:
        cv2.line(frame, pts[a], pts[b], color, 2, cv2.LINE_AA)
    for pt in pts:
        cv2.circle(frame, pt, 3, (0, 0, 255), -1)


def draw_classification(frame, result, mode="geometric", sentence="", extra_lines=(), offset_y=0):
    """
    Text overlay: label, confidence, lock state and a verification bar.
    """
    h, w, _ = frame.shape
    x0, y0 = 10, 30 + offset_y
    dy = 24
    color = (0, 255, 0) if result.locked else (0, 200, 255)
    lines = [
        f"label: {result.label or '-'}{'  [LOCKED]' if result.locked else ''}",
        f"conf: {result.confidence}%  candidate: {result.candidate or '-'}",
        f"mode: {mode}  status: {result.status}",
        f"sentence: {sentence}",
    ]
    lines.extend(extra_lines)
    for i, line in enumerate(lines):
        cv2.putText(
            frame,
            line,
            (x0, y0 + i * dy),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.6,
            color,
            1,
            cv2.LINE_AA,
        )

    # verification progress bar along the bottom edge
    bar_w = int((w - 20) * result.verification_progress / 100.0)
    cv2.rectangle(frame, (10, h - 20), (w - 10, h - 10), (60, 60, 60), -1)
    cv2.rectangle(frame, (10, h - 20), (10 + bar_w, h - 10), color, -1)


def _read_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_config(path="config.json"):
    """Load config once; a missing or broken file means built-in defaults."""
    if not os.path.exists(path):
        print(f"[PY] config '{path}' not found, using defaults.")
        return {}
    try:
        return _read_json(path)
    except (OSError, ValueError) as e:
        print("[PY] Failed to load config:", e)
        return {}


class ConfigWatcher:
    """
    Hot reload for config.json, polled from the classifier thread.
    The file is stat'ed at most every min_check_interval seconds; a file that
    disappears or fails to parse leaves the last good config in place.
    """

    def __init__(self, path="config.json", min_check_interval=0.5):
        self.path = path
        self.min_check_interval = min_check_interval
        self._cfg = {}
        self._mtime = None
        self._next_check = 0.0
        self._reload(self._stat())

    def _stat(self):
        try:
            return os.path.getmtime(self.path)
        except OSError:
            return None

    def _reload(self, mtime):
        if mtime is None:
            return
        try:
            self._cfg = _read_json(self.path)
        except (OSError, ValueError) as e:
            print("[ConfigWatcher] keeping previous config:", e)
        self._mtime = mtime

    def get_config(self):
        return self._cfg

    def check_reload(self, now=None):
        """Returns the current config, re-read if the file changed."""
        now = time.time() if now is None else now
        if now < self._next_check:
            return self._cfg
        self._next_check = now + self.min_check_interval

        mtime = self._stat()
        if mtime is not None and mtime != self._mtime:
            print(f"[ConfigWatcher] {self.path} changed, reloading")
            self._reload(mtime)
        return self._cfg
