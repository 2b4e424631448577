import mediapipe as mp

from HandData import HandData, to_landmarks


class HandTracker:
    """
    Landmark source for the engine. Uses the legacy mp.solutions.hands API
    when the installed MediaPipe still ships it, otherwise the Tasks
    HandLandmarker (needs tracker.model_path pointing at hand_landmarker.task).
    """

    def __init__(
        self,
        cfg,
    ):
        self.cfg = cfg
        tcfg = cfg.get("tracker", {})
        self.max_num_hands = tcfg.get("max_num_hands", 1)
        self.min_detection_confidence = tcfg.get("min_detection_confidence", 0.5)
        self.min_tracking_confidence = tcfg.get("min_tracking_confidence", 0.5)
        self.backend = self._detect_backend()

        if self.backend == "solutions":
            self.mp_hands = mp.solutions.hands.Hands(
                model_complexity=tcfg.get("model_complexity", 1),
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence,
                max_num_hands=self.max_num_hands,
            )
        else:
            self.landmarker = self._init_tasks_backend(tcfg.get("model_path"))
        print(f"[PY] HandTracker using '{self.backend}' backend")

    @staticmethod
    def _detect_backend() -> str:
        if hasattr(mp, "solutions") and hasattr(mp.solutions, "hands"):
            return "solutions"
        return "tasks"

    def _init_tasks_backend(self, model_path):
        if not model_path:
            raise RuntimeError(
                "This MediaPipe build has no solutions API; set tracker.model_path to a hand_landmarker.task file"
            )
        vision = mp.tasks.vision
        options = vision.HandLandmarkerOptions(
            base_options=mp.tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=self.max_num_hands,
            min_hand_detection_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
        )
        return vision.HandLandmarker.create_from_options(options)

    def process_frame(self, frame_rgb, timestamp):
        """
        Process an RGB frame.
        Returns list of HandData instances with landmarks + handedness set.
        timestamp: absolute time (seconds) for this frame.
        """
        if self.backend == "solutions":
            result = self.mp_hands.process(frame_rgb)
            if not result.multi_hand_landmarks:
                return []
            pairs = [
                (lm, lm.landmark, handed.classification[0].label)
                for lm, handed in zip(result.multi_hand_landmarks, result.multi_handedness)
            ]
        else:
            image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
            result = self.landmarker.detect_for_video(image, int(timestamp * 1000))
            if not result.hand_landmarks:
                return []
            pairs = [
                (None, lm, handed[0].category_name)
                for lm, handed in zip(result.hand_landmarks, result.handedness)
            ]

        hands = []
        for raw, points, label in pairs:
            h = HandData()
            h.raw_landmarks = raw
            h.landmarks = to_landmarks(points)
            h.handedness = label
            h.visible = True
            h.timestamp = timestamp
            hands.append(h)
        return hands

    def close(self):
        if self.backend == "solutions":
            self.mp_hands.close()
        else:
            self.landmarker.close()
