"""
Gesture classifier for the Particle Flow hand tracker.

Maps one landmark frame plus the smoothed tension to a raw gesture
label using fixed geometric rules. Stateless and deterministic.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .config import GestureThresholds
from .feature_extractor import distance
from .landmarks import LandmarkIndex


class GestureType(Enum):
    """Recognized gestures. Values are the labels shown to the user."""
    NONE = "None"
    UNKNOWN = "Unknown"
    CLOSED_FIST = "Closed Fist"
    OPEN_HAND = "Open Hand"
    VICTORY = "Victory"
    POINTING = "Pointing"
    ROCK = "Rock"
    THUMBS_UP = "Thumbs Up"


# (tip, reference joint) per finger
FINGER_JOINTS: dict[str, tuple[int, int]] = {
    "thumb": (LandmarkIndex.THUMB_TIP, LandmarkIndex.THUMB_MCP),
    "index": (LandmarkIndex.INDEX_TIP, LandmarkIndex.INDEX_PIP),
    "middle": (LandmarkIndex.MIDDLE_TIP, LandmarkIndex.MIDDLE_PIP),
    "ring": (LandmarkIndex.RING_TIP, LandmarkIndex.RING_PIP),
    "pinky": (LandmarkIndex.PINKY_TIP, LandmarkIndex.PINKY_PIP),
}


@dataclass(frozen=True)
class FingerExtension:
    """Extended/folded state of each finger."""
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool


def is_extended(frame: np.ndarray, tip: int, joint: int) -> bool:
    """A finger is extended when its tip is farther from the wrist than its joint."""
    wrist = frame[LandmarkIndex.WRIST]
    return distance(wrist, frame[tip]) > distance(wrist, frame[joint])


def finger_extension(frame: np.ndarray) -> FingerExtension:
    """
    Compute the extension state of all five fingers.

    Args:
        frame: (21, 3) landmark array.

    Returns:
        FingerExtension flags.
    """
    return FingerExtension(**{
        name: is_extended(frame, tip, joint)
        for name, (tip, joint) in FINGER_JOINTS.items()
    })


def classify(
    frame: np.ndarray,
    smoothed_tension: float,
    thresholds: Optional[GestureThresholds] = None
) -> GestureType:
    """
    Classify the raw gesture of one frame.

    Tension is checked first: a nearly closed hand is a fist and a nearly
    open hand is an open hand regardless of finger geometry. Otherwise the
    finger pattern decides, first match wins.

    Args:
        frame: (21, 3) landmark array.
        smoothed_tension: Smoothed tension for this frame.
        thresholds: Tension thresholds. Uses defaults if None.

    Returns:
        Raw (unstabilized) gesture label.
    """
    thresholds = thresholds or GestureThresholds()

    if smoothed_tension > thresholds.fist_tension:
        return GestureType.CLOSED_FIST
    if smoothed_tension < thresholds.open_tension:
        return GestureType.OPEN_HAND

    f = finger_extension(frame)

    if f.index and f.middle and not f.ring and not f.pinky:
        return GestureType.VICTORY
    if f.index and not f.middle and not f.ring and not f.pinky:
        return GestureType.POINTING
    if f.index and not f.middle and not f.ring and f.pinky and f.thumb:
        return GestureType.ROCK
    if not f.index and not f.middle and not f.ring and not f.pinky and f.thumb:
        return GestureType.THUMBS_UP

    return GestureType.UNKNOWN
