import cv2
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision
import os
import time

from triggers import GestureIntentTracker, classify_gesture, fingers_open
from utils import draw_text, COLOR_ON

DEFAULT_MODEL_PATH = os.path.join(os.path.dirname(__file__), 'hand_landmarker.task')

# Landmark chains from the wrist out along each finger, plus the palm edge
HAND_CHAINS = (
    (0, 1, 2, 3, 4),
    (0, 5, 6, 7, 8),
    (5, 9, 10, 11, 12),
    (9, 13, 14, 15, 16),
    (13, 17, 18, 19, 20),
    (0, 17),
)
HAND_CONNECTIONS = [pair for chain in HAND_CHAINS for pair in zip(chain, chain[1:])]


def create_landmarker(model_path=DEFAULT_MODEL_PATH, confidence=0.7):
    """Single-hand landmarker in VIDEO mode; one confidence for all three thresholds."""
    options = vision.HandLandmarkerOptions(
        base_options=python.BaseOptions(model_asset_path=model_path),
        running_mode=vision.RunningMode.VIDEO,
        num_hands=1,
        **{f"min_{kind}_confidence": confidence
           for kind in ("hand_detection", "hand_presence", "tracking")},
    )
    return vision.HandLandmarker.create_from_options(options)


class GestureRecognizer:
    def __init__(self, model_path=DEFAULT_MODEL_PATH, frame_interval_ms=33):
        self.landmarker = create_landmarker(model_path)
        self.frame_interval_ms = frame_interval_ms
        self.frame_timestamp_ms = 0
        self.tracker = GestureIntentTracker()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _detect_points(self, frame):
        """Pixel (x, y) landmarks of the first detected hand, or None."""
        self.frame_timestamp_ms += self.frame_interval_ms
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB,
                            data=cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        result = self.landmarker.detect_for_video(mp_image, self.frame_timestamp_ms)
        if not result.hand_landmarks:
            return None
        h, w = frame.shape[:2]
        return [(int(lm.x * w), int(lm.y * h)) for lm in result.hand_landmarks[0]]

    def process_frame(self, frame, light_controller):
        """Detect a hand gesture in the frame and forward confirmed intents."""
        points = self._detect_points(frame)
        gesture = None
        if points is not None:
            draw_hand(frame, points)
            gesture = classify_gesture(fingers_open(points))

        now = time.time()
        intent = self.tracker.update(gesture, now)
        if intent:
            print(f"[GESTURE] {intent}")
            light_controller.handle_intent(intent)

        if self.tracker.current_gesture:
            bar_width = int(150 * self.tracker.progress(now))
            cv2.rectangle(frame, (10, 65), (10 + bar_width, 80), (0, 255, 255), -1)
            cv2.rectangle(frame, (10, 65), (160, 80), (100, 100, 100), 2)
            draw_text(frame, self.tracker.current_gesture, (170, 80), COLOR_ON, 0.5)

        return frame

    def close(self):
        self.landmarker.close()


def draw_hand(frame, points):
    for start, end in HAND_CONNECTIONS:
        cv2.line(frame, points[start], points[end], (0, 255, 0), 2)
    for point in points:
        cv2.circle(frame, point, 5, (255, 0, 0), cv2.FILLED)
