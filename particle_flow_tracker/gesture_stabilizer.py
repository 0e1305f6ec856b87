"""
Gesture stabilizer for the Particle Flow hand tracker.

Debounces the classifier's raw labels: a new gesture is only committed
after it has been read on several consecutive frames, while losing the
hand clears the committed gesture immediately.
"""

from enum import Enum, auto

from .config import GESTURE_STABLE_FRAMES
from .gesture_classifier import GestureType
from .logger import get_logger

logger = get_logger("GestureStabilizer")


class StabilizerState(Enum):
    """State of the debounce machine."""
    IDLE = auto()     # No pending label
    PENDING = auto()  # Counting consecutive readings of a label


class GestureStabilizer:
    """
    Commits a raw gesture label after N consecutive identical readings.

    The counter includes the first reading of a label, so with the default
    of 5 frames a label is committed on its 5th consecutive reading.
    A different reading restarts the count without touching the committed
    gesture.
    """

    def __init__(self, stable_frames: int = GESTURE_STABLE_FRAMES):
        """
        Initialize the stabilizer.

        Args:
            stable_frames: Consecutive identical readings required to commit.
        """
        if stable_frames < 1:
            raise ValueError(f"stable_frames must be >= 1, got {stable_frames}")
        self.stable_frames = stable_frames

        self.state = StabilizerState.IDLE
        self._pending = GestureType.NONE
        self._count = 0
        self._committed = GestureType.NONE

    @property
    def committed(self) -> GestureType:
        """Currently committed gesture."""
        return self._committed

    @property
    def pending(self) -> GestureType:
        """Label currently being counted (NONE when idle)."""
        return self._pending

    @property
    def count(self) -> int:
        """Consecutive readings of the pending label."""
        return self._count

    def update(self, raw: GestureType) -> GestureType:
        """
        Feed one raw reading from a frame with a hand present.

        Args:
            raw: Classifier output for this frame.

        Returns:
            Committed gesture after this frame.
        """
        if self.state == StabilizerState.PENDING and raw == self._pending:
            self._count += 1
        else:
            self.state = StabilizerState.PENDING
            self._pending = raw
            self._count = 1

        if self._count > self.stable_frames - 1 and self._committed != raw:
            logger.debug(
                f"Gesture committed: {raw.value} "
                f"(was {self._committed.value}, after {self._count} frames)"
            )
            self._committed = raw

        return self._committed

    def clear(self) -> GestureType:
        """
        Hand lost: drop the pending label and commit NONE immediately.

        Returns:
            The committed gesture (always NONE).
        """
        if self._committed != GestureType.NONE:
            logger.debug(f"Gesture cleared: {self._committed.value}")
        self.state = StabilizerState.IDLE
        self._pending = GestureType.NONE
        self._count = 0
        self._committed = GestureType.NONE
        return self._committed

    def reset(self) -> None:
        """Reset all state (call when the session is disabled)."""
        self.clear()
        logger.debug("GestureStabilizer reset")
