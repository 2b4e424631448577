"""
Command-line launcher for the sign recognizer.

Usage examples:
    sign-server --mode camera                     # default, webcam + MediaPipe + TCP JSON
    sign-server --mode replay --frames rec.jsonl  # feed a recorded landmark stream
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

PY_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PY_DIR / "config.json"


def run_replay_mode(frames_path: str, config_path: str, dataset: str | None, mode: str | None) -> None:
    """Classify a recorded stream and print one JSON result per frame."""
    from GestureEngine import GestureEngine
    from Replay import read_recording, replay
    from TrainingData import load_dataset
    from helpers import load_config

    engine = GestureEngine(load_config(config_path))
    if dataset:
        engine.selector.load_training_set(load_dataset(dataset))
    if mode:
        engine.selector.set_mode(mode)

    for result in replay(engine, read_recording(frames_path)):
        print(json.dumps(result.to_dict()))


def run_camera_mode(config_path: str) -> None:
    """Delegate to the threaded capture + classifier loop (main_loop)."""
    from main_loop import main as run_main_loop

    config_path = str(Path(config_path).resolve())
    prev_cwd = os.getcwd()
    os.chdir(str(PY_DIR))
    try:
        run_main_loop(config_path)
    finally:
        os.chdir(prev_cwd)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sign recognizer launcher")
    parser.add_argument(
        "--mode",
        choices=("camera", "replay"),
        default="camera",
        help="'camera' runs the webcam loop, 'replay' classifies a recorded JSON-lines stream.",
    )
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Path to config.json")
    parser.add_argument("--frames", help="Recorded frames (JSON lines) for --mode replay")
    parser.add_argument("--dataset", help="Training dataset to load before replay")
    parser.add_argument(
        "--model",
        choices=("geometric", "neighbor"),
        default=None,
        help="Classifier to use for replay (default: config value)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    if args.mode == "replay":
        if not args.frames:
            sys.exit("--frames is required for --mode replay")
        run_replay_mode(args.frames, args.config, args.dataset, args.model)
    else:
        run_camera_mode(args.config)


if __name__ == "__main__":
    main()
