"""
Configuration constants for the Particle Flow hand tracker.

This module contains all tunable parameters for camera capture,
hand detection, feature calibration, smoothing and gesture recognition.
"""

from dataclasses import dataclass
from typing import Final


# Camera configuration
CAMERA_WIDTH: Final[int] = 640
CAMERA_HEIGHT: Final[int] = 480
CAMERA_FPS: Final[int] = 30
DEFAULT_CAMERA_INDEX: Final[int] = 0

# MediaPipe configuration
MEDIAPIPE_MODEL_COMPLEXITY: Final[int] = 1
MEDIAPIPE_MAX_NUM_HANDS: Final[int] = 1
MEDIAPIPE_MIN_DETECTION_CONFIDENCE: Final[float] = 0.5
MEDIAPIPE_MIN_TRACKING_CONFIDENCE: Final[float] = 0.5

# Landmark frame layout
NUM_LANDMARKS: Final[int] = 21

# =============================================================================
# Feature calibration
# =============================================================================
# Sum of the five fingertip-to-wrist distances (normalized image units).
# Hand-tuned bounds, not derived per user.
TENSION_MIN_DISTANCE: Final[float] = 0.5  # Closed fist
TENSION_MAX_DISTANCE: Final[float] = 2.0  # Fully spread hand

# Temporal smoothing (one-pole EMA, same factor for every channel)
SMOOTHING_ALPHA: Final[float] = 0.2

# Gesture recognition thresholds (applied to smoothed tension)
FIST_TENSION_THRESHOLD: Final[float] = 0.9
OPEN_TENSION_THRESHOLD: Final[float] = 0.1

# Consecutive identical raw readings needed to commit a gesture change
GESTURE_STABLE_FRAMES: Final[int] = 5

# =============================================================================
# Scene follower (display-rate consumer of the published hand state)
# =============================================================================
SCENE_FOLLOW_RATE: Final[float] = 0.1  # Lerp factor toward hand-driven rotation
SCENE_RETURN_RATE: Final[float] = 0.05  # Lerp factor back to upright without a hand
SCENE_IDLE_SPIN: Final[float] = 0.005  # Radians per display frame without a hand
SCENE_POSITION_GAIN: Final[float] = 2.0  # Hand position -> rotation sensitivity
SCENE_EXPANSION_RATE: Final[float] = 0.1  # Lerp factor toward hand tension

# Logging
LOG_FILENAME: Final[str] = "particle_flow_tracker.log"
LOG_MAX_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 3

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_PROFILE_ERROR: Final[int] = 1
EXIT_CAMERA_ERROR: Final[int] = 2
EXIT_RUNTIME_ERROR: Final[int] = 3


@dataclass
class TensionCalibration:
    """Distance bounds mapping fingertip reach to tension."""

    min_distance: float = TENSION_MIN_DISTANCE
    max_distance: float = TENSION_MAX_DISTANCE


@dataclass
class SmoothingSettings:
    """Container for temporal smoothing settings."""

    alpha: float = SMOOTHING_ALPHA


@dataclass
class GestureThresholds:
    """Container for gesture detection thresholds."""

    fist_tension: float = FIST_TENSION_THRESHOLD
    open_tension: float = OPEN_TENSION_THRESHOLD
    stable_frames: int = GESTURE_STABLE_FRAMES
