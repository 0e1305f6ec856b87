"""
Temporal smoother for the per-frame hand features.

Applies a one-pole exponential moving average independently to
tension, palm position (x, y) and roll. Accumulators start at 0.0
and persist across brief detection dropouts; they are only cleared
by an explicit reset.
"""

from dataclasses import dataclass
from typing import Optional

from .config import SmoothingSettings
from .feature_extractor import HandFeatures
from .logger import get_logger

logger = get_logger("TemporalSmoother")


class ExponentialSmoother:
    """
    Single-channel exponential moving average.

    s' = s + (x - s) * alpha
    """

    def __init__(self, alpha: float, initial: float = 0.0):
        """
        Initialize the filter.

        Args:
            alpha: Smoothing factor in (0, 1]. 1 = no smoothing.
            initial: Starting accumulator value.
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._initial = initial
        self._value = initial

    @property
    def value(self) -> float:
        """Current smoothed value."""
        return self._value

    def update(self, raw: float) -> float:
        """Feed one raw sample and return the new smoothed value."""
        self._value = self._value + (raw - self._value) * self.alpha
        return self._value

    def reset(self) -> None:
        """Restore the starting accumulator value."""
        self._value = self._initial


@dataclass(frozen=True)
class SmoothedSignals:
    """Smoothed control signals for one frame."""
    tension: float
    position_x: float
    position_y: float
    rotation: float


class HandSignalSmoother:
    """
    Smooths the four hand control channels.

    The rotation channel is fed the negated raw roll; the scene rotation
    direction depends on this sign. No angle wraparound is applied, so
    jumps across +/-pi pass through the filter unchanged.

    Attributes:
        settings: Smoothing configuration.
    """

    def __init__(self, settings: Optional[SmoothingSettings] = None):
        """
        Initialize the smoother.

        Args:
            settings: Smoothing configuration. Uses defaults if None.
        """
        self.settings = settings or SmoothingSettings()
        alpha = self.settings.alpha

        self._tension = ExponentialSmoother(alpha)
        self._position_x = ExponentialSmoother(alpha)
        self._position_y = ExponentialSmoother(alpha)
        self._rotation = ExponentialSmoother(alpha)
        self._smoothed_count = 0

        logger.debug(f"HandSignalSmoother initialized (alpha={alpha})")

    def update(self, features: HandFeatures) -> SmoothedSignals:
        """
        Smooth one frame of raw features.

        Args:
            features: Raw features for the current frame.

        Returns:
            Smoothed signals after this frame.
        """
        self._smoothed_count += 1
        return SmoothedSignals(
            tension=self._tension.update(features.tension),
            position_x=self._position_x.update(features.position_x),
            position_y=self._position_y.update(features.position_y),
            rotation=self._rotation.update(-features.rotation)
        )

    @property
    def current(self) -> SmoothedSignals:
        """Smoothed signals as of the last update."""
        return SmoothedSignals(
            tension=self._tension.value,
            position_x=self._position_x.value,
            position_y=self._position_y.value,
            rotation=self._rotation.value
        )

    @property
    def smoothed_count(self) -> int:
        """Frames smoothed since the last reset."""
        return self._smoothed_count

    def reset(self) -> None:
        """Clear all four accumulators (call when the session is disabled)."""
        self._tension.reset()
        self._position_x.reset()
        self._position_y.reset()
        self._rotation.reset()
        self._smoothed_count = 0
        logger.debug("HandSignalSmoother reset")
