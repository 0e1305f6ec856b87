"""
Per-frame hand features for the particle controls.

Pure functions over a single (21, 3) landmark frame:
tension (open/closed), palm position and roll angle.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import TensionCalibration
from .landmarks import FINGERTIPS, LandmarkIndex


@dataclass(frozen=True)
class HandFeatures:
    """Raw (unsmoothed) features extracted from one frame."""
    tension: float
    position_x: float
    position_y: float
    rotation: float


def distance(p1: np.ndarray, p2: np.ndarray) -> float:
    """Euclidean distance between two 3D points."""
    return float(np.sqrt(np.sum((p1 - p2) ** 2)))


def fingertip_reach(frame: np.ndarray) -> float:
    """
    Sum of the five fingertip-to-wrist distances.

    Args:
        frame: (21, 3) landmark array.

    Returns:
        Total 3D distance in normalized image units.
    """
    wrist = frame[LandmarkIndex.WRIST]
    tips = frame[list(FINGERTIPS)]
    return float(np.sum(np.sqrt(np.sum((tips - wrist) ** 2, axis=1))))


def tension_from_distance(
    total_distance: float,
    calibration: Optional[TensionCalibration] = None
) -> float:
    """
    Map fingertip reach to tension in [0, 1].

    A reach near ``min_distance`` is a closed fist (1.0), near
    ``max_distance`` a fully open hand (0.0). Non-finite input is clamped:
    NaN maps to 0, infinities to the nearest bound.
    """
    calibration = calibration or TensionCalibration()
    span = calibration.max_distance - calibration.min_distance
    tension = 1.0 - (total_distance - calibration.min_distance) / span
    tension = np.nan_to_num(tension, nan=0.0, posinf=1.0, neginf=0.0)
    return float(np.clip(tension, 0.0, 1.0))


def compute_tension(
    frame: np.ndarray,
    calibration: Optional[TensionCalibration] = None
) -> float:
    """Raw tension of one frame."""
    return tension_from_distance(fingertip_reach(frame), calibration)


def compute_palm_position(frame: np.ndarray) -> tuple[float, float]:
    """
    Palm center mapped to the signed unit square.

    The palm center is the midpoint of the wrist and the middle finger base.
    Y is flipped so that raising the hand gives a positive value.

    Returns:
        (x, y), each in [-1, 1] for on-screen hands.
    """
    wrist = frame[LandmarkIndex.WRIST]
    middle_base = frame[LandmarkIndex.MIDDLE_MCP]
    center_x = (wrist[0] + middle_base[0]) / 2
    center_y = (wrist[1] + middle_base[1]) / 2
    return float((center_x - 0.5) * 2), float(-(center_y - 0.5) * 2)


def compute_roll(frame: np.ndarray) -> float:
    """
    Roll of the hand's long axis relative to vertical, in radians.

    An upright hand (middle base straight above the wrist) gives 0.
    """
    wrist = frame[LandmarkIndex.WRIST]
    middle_base = frame[LandmarkIndex.MIDDLE_MCP]
    dx = float(middle_base[0] - wrist[0])
    dy = float(middle_base[1] - wrist[1])
    return math.atan2(dy, dx) + math.pi / 2


def extract_features(
    frame: np.ndarray,
    calibration: Optional[TensionCalibration] = None
) -> HandFeatures:
    """
    Extract all raw features from one frame.

    Args:
        frame: (21, 3) landmark array.
        calibration: Tension distance bounds. Uses defaults if None.

    Returns:
        HandFeatures with raw tension, position and rotation.
    """
    position_x, position_y = compute_palm_position(frame)
    return HandFeatures(
        tension=compute_tension(frame, calibration),
        position_x=position_x,
        position_y=position_y,
        rotation=compute_roll(frame)
    )
