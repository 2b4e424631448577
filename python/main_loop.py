import time
import cv2
import threading
from queue import Queue, Empty
from collections import deque

from HandTracker import HandTracker
from GestureEngine import GestureEngine
from GestureServer import GestureServer
from ModelSelector import ModelMode
from SentenceBuilder import SentenceBuilder
from TrainingData import DEFAULT_DATASET, DataCollector, load_dataset, save_dataset
from helpers import (
    draw_classification,
    draw_hand_debug,
    load_config,
    ConfigWatcher,
)


# --------------------------------------------------------
# Queue for latest frame only (overwrite when full)
# --------------------------------------------------------
FRAME_QUEUE_MAX = 1

KEY_ESC = 27
KEY_BACKSPACE = 8


# --------------------------------------------------------
# CAPTURE THREAD
# --------------------------------------------------------
def capture_thread(frame_queue, stop_event, cfg):
    camera_cfg = cfg.get("camera", {})
    cap = cv2.VideoCapture(camera_cfg.get("index", 0))
    if not cap.isOpened():
        print("[PY] ERROR: Cannot open camera")
        stop_event.set()
        return
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, camera_cfg.get("frame_width", 640))
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, camera_cfg.get("frame_height", 480))

    try:
        tracker = HandTracker(cfg)
    except RuntimeError as e:
        print("[PY] ERROR:", e)
        cap.release()
        stop_event.set()
        return

    debug_cfg = cfg.get("debug", {})
    mirror = camera_cfg.get("mirror", True)

    # FPS calculation
    fps_window = debug_cfg.get("fps_window", 20)
    fps_times = deque(maxlen=fps_window)
    current_fps = 0.0

    print("[PY] Capture thread started.")

    while not stop_event.is_set():
        ok, frame = cap.read()
        if not ok:
            time.sleep(0.01)
            continue

        now = time.time()
        fps_times.append(now)
        if len(fps_times) > 1:
            current_fps = (len(fps_times) - 1) / (fps_times[-1] - fps_times[0])

        if mirror:
            frame = cv2.flip(frame, 1)
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        hands = tracker.process_frame(rgb, now)

        # Insert latest sample (frame, hands, timestamp, fps)
        if frame_queue.full():
            try:
                frame_queue.get_nowait()  # remove older frame
            except Empty:
                pass
        frame_queue.put_nowait((frame, hands, now, current_fps))

    tracker.close()
    cap.release()
    print("[PY] Capture thread exiting.")


# --------------------------------------------------------
# KEYBOARD CONTROL (runs on the classifier thread)
# --------------------------------------------------------
def handle_key(key, engine, collector, sentence, training_cfg):
    selector = engine.selector
    dataset_path = training_cfg.get("dataset_path", DEFAULT_DATASET)

    if key == ord("m"):
        new_mode = ModelMode.NEIGHBOR if selector.mode == ModelMode.GEOMETRIC else ModelMode.GEOMETRIC
        selector.set_mode(new_mode)
        engine.reset()
        print(f"[MODEL] Mode -> {new_mode.value}")
    elif key == ord("c"):
        if collector.collecting:
            collector.stop()
            print(f"[DATA] Paused collecting ({collector.sample_count} poses)")
        else:
            try:
                collector.start(training_cfg.get("label", ""))
                print(f"[DATA] Collecting '{collector.label}'")
            except ValueError as e:
                print("[DATA]", e)
    elif key == ord("a"):
        samples = collector.commit()
        if samples:
            selector.add_samples(samples)
            selector.set_mode(ModelMode.NEIGHBOR)
            engine.reset()
            print(f"[MODEL] Added {len(samples)} samples, total {selector.sample_count}")
    elif key == ord("s"):
        try:
            save_dataset(selector.snapshot(), dataset_path)
        except (OSError, ValueError) as e:
            print("[DATA] Save failed:", e)
    elif key == ord("l"):
        try:
            selector.load_training_set(load_dataset(dataset_path))
        except (OSError, ValueError) as e:
            print("[DATA] Load failed:", e)
    elif key == ord("x"):
        selector.clear()
        engine.reset()
        print("[MODEL] Cleared training data, back to geometric mode")
    elif key == ord("p"):
        predictions = sentence.predictions()
        if predictions:
            sentence.select_prediction(predictions[0])
    elif key == ord("o"):
        if sentence.alternates:
            sentence.select_alternate(sentence.alternates[0])
    elif key == KEY_BACKSPACE:
        sentence.backspace()
    elif key == ord("r"):
        sentence.clear()


# --------------------------------------------------------
# CLASSIFIER THREAD
# --------------------------------------------------------
def classifier_thread(frame_queue, stop_event, cfg, config_path="config.json"):
    cfg_watcher = ConfigWatcher(config_path)
    current_cfg = cfg_watcher.get_config() or cfg

    engine = GestureEngine(current_cfg)
    sentence = SentenceBuilder(current_cfg)
    collector = DataCollector()
    server_cfg = current_cfg.get("server", {})
    server = None
    if server_cfg.get("enabled", True):
        server = GestureServer(server_cfg.get("host", "127.0.0.1"), server_cfg.get("port", 5555))

    debug_window = "Sign Recognizer"
    cv2.namedWindow(debug_window, cv2.WINDOW_NORMAL)

    print("[PY] Classifier thread started.")

    while not stop_event.is_set():
        try:
            frame, hands, timestamp, fps = frame_queue.get(timeout=0.1)
        except Empty:
            continue

        new_cfg = cfg_watcher.check_reload()
        if new_cfg and new_cfg != current_cfg:
            current_cfg = new_cfg
            engine.update_config(current_cfg)
            sentence.update_config(current_cfg)

        hand = hands[0] if hands else None
        if hand is not None and collector.collecting:
            collector.add_sample(hand.landmarks, timestamp)

        result = engine.feed(hand.landmarks if hand else None, timestamp)
        if hand is not None:
            hand.classification = result
        sentence.update(result, timestamp)

        debug_cfg = current_cfg.get("debug", {})
        if debug_cfg.get("draw_landmarks", True) and hand is not None:
            draw_hand_debug(frame, hand)

        extra = []
        if collector.collecting:
            extra.append(f"collecting '{collector.label}': {collector.sample_count}")
        if sentence.alternates:
            extra.append("alternates: " + " ".join(sentence.alternates))
        predictions = sentence.predictions()
        if predictions:
            extra.append("suggest: " + " ".join(predictions))
        if debug_cfg.get("show_fps", True):
            extra.append(f"FPS: {fps:.1f}")
        draw_classification(
            frame,
            result,
            mode=engine.selector.mode.value,
            sentence=sentence.sentence,
            extra_lines=extra,
        )

        cv2.imshow(debug_window, frame)
        key = cv2.waitKey(1) & 0xFF
        if key == KEY_ESC:
            stop_event.set()
            break
        if key != 0xFF:
            handle_key(key, engine, collector, sentence, current_cfg.get("training", {}))

        if server is not None:
            server.update()
            server.send_result(result, sentence.sentence, fps=fps)

    if server is not None:
        server.close()
    cv2.destroyAllWindows()
    print("[PY] Classifier thread exiting.")


# --------------------------------------------------------
# MAIN ENTRY
# --------------------------------------------------------
def main(config_path="config.json"):
    cfg = load_config(config_path)
    if not cfg:
        print("[PY] WARNING: no config.json or failed to load.")

    frame_queue = Queue(maxsize=FRAME_QUEUE_MAX)
    stop_event = threading.Event()

    # --------------- start threads ----------------
    cap_thread = threading.Thread(
        target=capture_thread, args=(frame_queue, stop_event, cfg), daemon=True
    )
    class_thread = threading.Thread(
        target=classifier_thread, args=(frame_queue, stop_event, cfg, config_path), daemon=True
    )

    cap_thread.start()
    class_thread.start()

    # Keep main thread alive
    try:
        while not stop_event.is_set():
            time.sleep(0.1)
    except KeyboardInterrupt:
        stop_event.set()

    cap_thread.join(timeout=1.0)
    class_thread.join(timeout=1.0)

    print("[PY] Shutdown complete.")


if __name__ == "__main__":
    main()
