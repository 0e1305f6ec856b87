"""
Hand detector using MediaPipe Hands.

Wraps the landmark model that feeds the tracking session. Supports both
the legacy Solutions API and the Tasks API (with automatic model download).
"""

import time

import cv2
import mediapipe as mp
import numpy as np

from .config import (
    MEDIAPIPE_MAX_NUM_HANDS,
    MEDIAPIPE_MIN_DETECTION_CONFIDENCE,
    MEDIAPIPE_MIN_TRACKING_CONFIDENCE,
    MEDIAPIPE_MODEL_COMPLEXITY,
)
from .landmarks import HandLandmarks, Landmark
from .logger import get_logger

logger = get_logger("HandDetector")

# Solutions API was dropped from recent MediaPipe wheels
USING_TASKS_API = not (hasattr(mp, "solutions") and hasattr(mp.solutions, "hands"))

# Hand connections (same as MediaPipe HAND_CONNECTIONS)
HAND_CONNECTIONS: tuple[tuple[int, int], ...] = (
    (0, 1), (1, 2), (2, 3), (3, 4),  # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),  # Index
    (0, 9), (9, 10), (10, 11), (11, 12),  # Middle
    (0, 13), (13, 14), (14, 15), (15, 16),  # Ring
    (0, 17), (17, 18), (18, 19), (19, 20),  # Pinky
    (5, 9), (9, 13), (13, 17)  # Palm
)


def _to_landmark(lm) -> Landmark:
    return Landmark(
        x=lm.x,
        y=lm.y,
        z=lm.z,
        visibility=getattr(lm, "visibility", 1.0)
    )


class HandDetector:
    """
    Hand detector using MediaPipe Hands.

    Detects hand landmarks in RGB images. Configured for a single hand
    by default; when more hands are detected, callers only use the first.
    """

    def __init__(
        self,
        model_complexity: int = MEDIAPIPE_MODEL_COMPLEXITY,
        max_num_hands: int = MEDIAPIPE_MAX_NUM_HANDS,
        min_detection_confidence: float = MEDIAPIPE_MIN_DETECTION_CONFIDENCE,
        min_tracking_confidence: float = MEDIAPIPE_MIN_TRACKING_CONFIDENCE
    ):
        """
        Initialize hand detector.

        Args:
            model_complexity: Model complexity (0=Lite, 1=Full).
            max_num_hands: Maximum number of hands to detect.
            min_detection_confidence: Minimum detection confidence.
            min_tracking_confidence: Minimum tracking confidence.
        """
        self.model_complexity = model_complexity
        self.max_num_hands = max_num_hands
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence

        self._hands = None  # Solutions API Hands object
        self._landmarker = None  # Tasks API HandLandmarker object
        self._is_initialized = False
        self._frame_count = 0
        self._last_timestamp_ms = 0
        self._using_tasks_api = USING_TASKS_API

        api_type = "Tasks API" if self._using_tasks_api else "Solutions API"
        logger.info(
            f"HandDetector created ({api_type}, complexity={model_complexity}, "
            f"max_hands={max_num_hands})"
        )

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def initialize(self) -> None:
        """Load the MediaPipe model."""
        if self._is_initialized:
            return

        if self._using_tasks_api:
            self._initialize_tasks_api()
        else:
            self._initialize_solutions_api()

        self._is_initialized = True

    def _initialize_solutions_api(self) -> None:
        self._hands = mp.solutions.hands.Hands(
            static_image_mode=False,
            model_complexity=self.model_complexity,
            max_num_hands=self.max_num_hands,
            min_detection_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence
        )
        logger.info("MediaPipe Hands initialized (Solutions API)")

    def _initialize_tasks_api(self) -> None:
        from mediapipe.tasks import python as mp_python
        from mediapipe.tasks.python import vision as mp_vision

        from .model_manager import ensure_hand_landmarker_model

        model_path = ensure_hand_landmarker_model()

        options = mp_vision.HandLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=model_path),
            running_mode=mp_vision.RunningMode.VIDEO,
            num_hands=self.max_num_hands,
            min_hand_detection_confidence=self.min_detection_confidence,
            min_hand_presence_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence
        )

        try:
            self._landmarker = mp_vision.HandLandmarker.create_from_options(options)
        except Exception as e:
            logger.error(f"Failed to initialize Tasks API: {e}")
            raise

        self._last_timestamp_ms = 0
        logger.info("MediaPipe Hands initialized (Tasks API, VIDEO mode)")

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self._hands:
            self._hands.close()
            self._hands = None
        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None
        self._is_initialized = False
        logger.debug("HandDetector closed")

    def detect_hands(self, rgb_image: np.ndarray) -> list[HandLandmarks]:
        """
        Detect hand landmarks in an RGB image.

        Args:
            rgb_image: RGB image as numpy array (H, W, 3).

        Returns:
            Detected hands, possibly empty.
        """
        if not self._is_initialized:
            self.initialize()

        self._frame_count += 1

        if self._using_tasks_api:
            return self._detect_tasks_api(rgb_image)
        return self._detect_solutions_api(rgb_image)

    def _detect_solutions_api(self, rgb_image: np.ndarray) -> list[HandLandmarks]:
        results = self._hands.process(rgb_image)

        if not results.multi_hand_landmarks:
            return []

        hands = []
        for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
            handedness = "Right"
            score = 1.0
            if results.multi_handedness and i < len(results.multi_handedness):
                classification = results.multi_handedness[i].classification[0]
                handedness = classification.label
                score = classification.score

            hands.append(HandLandmarks(
                landmarks=[_to_landmark(lm) for lm in hand_landmarks.landmark],
                handedness=handedness,
                score=score
            ))

        return hands

    def _detect_tasks_api(self, rgb_image: np.ndarray) -> list[HandLandmarks]:
        if not rgb_image.flags["C_CONTIGUOUS"]:
            rgb_image = np.ascontiguousarray(rgb_image)

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)

        # VIDEO mode requires strictly increasing timestamps
        timestamp_ms = max(int(time.monotonic() * 1000), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms
        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.hand_landmarks:
            return []

        hands = []
        for i, hand_landmarks in enumerate(result.hand_landmarks):
            handedness = "Right"
            score = 1.0
            if result.handedness and i < len(result.handedness):
                category = result.handedness[i][0]
                handedness = category.category_name
                score = category.score

            hands.append(HandLandmarks(
                landmarks=[_to_landmark(lm) for lm in hand_landmarks],
                handedness=handedness,
                score=score
            ))

        return hands


def draw_landmarks(
    image: np.ndarray,
    hand_landmarks: HandLandmarks,
    draw_connections: bool = True
) -> np.ndarray:
    """
    Draw hand landmarks on a BGR image in place.

    Args:
        image: BGR image to draw on.
        hand_landmarks: Detected hand landmarks.
        draw_connections: Draw connections between landmarks.

    Returns:
        Image with landmarks drawn.
    """
    h, w = image.shape[:2]
    points = [(int(lm.x * w), int(lm.y * h)) for lm in hand_landmarks.landmarks]

    if draw_connections:
        for start_idx, end_idx in HAND_CONNECTIONS:
            if start_idx < len(points) and end_idx < len(points):
                cv2.line(image, points[start_idx], points[end_idx], (0, 0, 255), 2)

    for point in points:
        cv2.circle(image, point, 3, (0, 255, 0), -1)

    return image
