"""
Hand landmark types shared by the detector and the tracking core.

A frame is the fixed, positional list of 21 MediaPipe hand landmarks.
The core works on a (21, 3) numpy array built by `to_frame`.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .config import NUM_LANDMARKS
from .logger import get_logger

logger = get_logger("Landmarks")


# MediaPipe landmark indices
class LandmarkIndex:
    """MediaPipe hand landmark indices."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


FINGERTIPS: tuple[int, ...] = (
    LandmarkIndex.THUMB_TIP,
    LandmarkIndex.INDEX_TIP,
    LandmarkIndex.MIDDLE_TIP,
    LandmarkIndex.RING_TIP,
    LandmarkIndex.PINKY_TIP,
)


@dataclass
class Landmark:
    """Single hand landmark with 3D coordinates and visibility."""
    x: float  # Normalized x [0, 1]
    y: float  # Normalized y [0, 1]
    z: float  # Relative depth
    visibility: float = 1.0


@dataclass
class HandLandmarks:
    """
    Complete hand landmark data.

    Attributes:
        landmarks: List of 21 hand landmarks.
        handedness: 'Left' or 'Right'.
        score: Detection confidence score.
    """
    landmarks: list[Landmark]
    handedness: str = "Right"
    score: float = 1.0


def _point_xyz(point: Any) -> tuple[float, float, float]:
    """Read x, y, z from a landmark object or a coordinate sequence."""
    if hasattr(point, "x"):
        return float(point.x), float(point.y), float(point.z)
    x, y, z = point[:3]
    return float(x), float(y), float(z)


def to_frame(source: Any) -> Optional[np.ndarray]:
    """
    Build a (21, 3) float array from one hand's landmarks.

    Accepts HandLandmarks, a MediaPipe NormalizedLandmarkList (``.landmark``),
    a sequence of objects with ``x/y/z`` attributes, a sequence of
    ``(x, y, z)`` tuples, or an array of shape (N, 3).

    Returns:
        Coordinate array, or None when fewer than 21 points are available,
        a point cannot be read or a coordinate is not finite. Points beyond
        the 21st are ignored.
    """
    if source is None:
        return None

    if isinstance(source, HandLandmarks):
        points = source.landmarks
    elif hasattr(source, "landmark"):
        points = source.landmark
    else:
        points = source

    try:
        if len(points) < NUM_LANDMARKS:
            logger.debug(f"Short landmark frame ({len(points)} points), treated as no hand")
            return None
        frame = np.array(
            [_point_xyz(points[i]) for i in range(NUM_LANDMARKS)],
            dtype=np.float64
        )
    except (TypeError, ValueError, IndexError) as e:
        logger.debug(f"Malformed landmark frame, treated as no hand: {e}")
        return None

    if not np.isfinite(frame).all():
        logger.debug("Non-finite landmark coordinates, treated as no hand")
        return None

    return frame
