"""
Synthetic 21-point hand frames for tests.

All hands are upright: wrist at (0.5, 0.8), fingers pointing up (-y),
middle finger base straight above the wrist.
"""

import numpy as np

WRIST = (0.5, 0.8, 0.0)
MIDDLE_BASE = (0.5, 0.7, 0.0)

# Horizontal offset of each finger from the wrist
FINGER_OFFSETS = {"index": -0.06, "middle": 0.0, "ring": 0.06, "pinky": 0.12}
FINGER_INDICES = {
    # (mcp, pip, dip, tip)
    "index": (5, 6, 7, 8),
    "middle": (9, 10, 11, 12),
    "ring": (13, 14, 15, 16),
    "pinky": (17, 18, 19, 20),
}


def make_hand(thumb=False, index=False, middle=False, ring=False, pinky=False):
    """
    Build a (21, 3) frame with the given fingers extended.

    Extended fingertips sit farther from the wrist than their PIP joint,
    folded fingertips sit closer.
    """
    wx, wy, wz = WRIST
    frame = np.zeros((21, 3))
    frame[:] = WRIST
    frame[0] = WRIST

    # Thumb: CMC 1, MCP 2, IP 3, tip 4
    frame[1] = (wx - 0.05, wy - 0.02, wz)
    frame[2] = (wx - 0.08, wy - 0.05, wz)
    frame[3] = (wx - 0.11, wy - 0.08, wz)
    frame[4] = (wx - 0.16, wy - 0.12, wz) if thumb else (wx - 0.04, wy - 0.03, wz)

    extended = {"index": index, "middle": middle, "ring": ring, "pinky": pinky}
    for name, (mcp, pip, dip, tip) in FINGER_INDICES.items():
        ox = FINGER_OFFSETS[name]
        frame[mcp] = (wx + ox, wy - 0.10, wz)
        frame[pip] = (wx + ox, wy - 0.15, wz)
        if extended[name]:
            frame[dip] = (wx + ox, wy - 0.22, wz)
            frame[tip] = (wx + ox, wy - 0.30, wz)
        else:
            frame[dip] = (wx + ox, wy - 0.09, wz)
            frame[tip] = (wx + ox, wy - 0.05, wz)

    frame[9] = MIDDLE_BASE
    return frame


def make_reach_hand(tip_distance):
    """
    Build a frame whose five fingertips all sit `tip_distance` above the wrist.

    The fingertip reach (sum of tip-to-wrist distances) is 5 * tip_distance.
    Joints sit farther out than the tips, so every finger reads as folded.
    """
    wx, wy, wz = WRIST
    frame = np.zeros((21, 3))
    frame[:] = (wx, wy - tip_distance * 1.5, wz)
    frame[0] = WRIST
    frame[9] = MIDDLE_BASE
    for tip in (4, 8, 12, 16, 20):
        frame[tip] = (wx, wy - tip_distance, wz)
    return frame


def to_points(frame):
    """Convert a frame array into a list of (x, y, z) tuples."""
    return [tuple(float(v) for v in row) for row in frame]
