"""
Tracking session controller for the Particle Flow hand tracker.

Runs the per-frame pipeline (features -> smoothing -> classification ->
stabilization) on each detector result and publishes the resulting hand
state. Also owns the enable/disable lifecycle driven by the camera toggle.
"""

from typing import Any, Callable, Optional, Sequence

from .config import GestureThresholds, SmoothingSettings, TensionCalibration
from .feature_extractor import extract_features
from .gesture_classifier import GestureType, classify
from .gesture_stabilizer import GestureStabilizer
from .hand_state import HandPosition, HandState, HandStateStore, ObservableFlag
from .landmarks import to_frame
from .logger import get_logger
from .temporal_smoother import HandSignalSmoother

logger = get_logger("TrackingSession")


class TrackingSession:
    """
    Sole writer of the published HandState.

    Frames are delivered one at a time by the detector callback
    (`on_results`). While disabled, or for results of a submission that
    started before the last disable, nothing is written.

    Attributes:
        store: Store the hand state is published to.
    """

    def __init__(
        self,
        store: HandStateStore,
        camera_flag: Optional[ObservableFlag] = None,
        calibration: Optional[TensionCalibration] = None,
        smoothing: Optional[SmoothingSettings] = None,
        thresholds: Optional[GestureThresholds] = None
    ):
        """
        Initialize the session.

        Args:
            store: Hand state store; the session claims its publisher.
            camera_flag: Optional camera toggle to follow. The session starts
                in the flag's state. Without a flag the session starts enabled.
            calibration: Tension distance bounds.
            smoothing: Smoothing settings.
            thresholds: Gesture thresholds and debounce length.
        """
        self.store = store
        self.calibration = calibration or TensionCalibration()
        self.thresholds = thresholds or GestureThresholds()

        self._publisher = store.claim_publisher("TrackingSession")
        self._smoother = HandSignalSmoother(smoothing)
        self._stabilizer = GestureStabilizer(self.thresholds.stable_frames)

        self._enabled = True
        self._generation = 0
        self._frames_processed = 0
        self._hand_present = False

        self._unsubscribe_flag: Optional[Callable[[], None]] = None
        if camera_flag is not None:
            self._unsubscribe_flag = camera_flag.subscribe(self._on_camera_toggled)
            if not camera_flag.value:
                self.disable()

        logger.debug(
            f"TrackingSession initialized (enabled={self._enabled}, "
            f"stable_frames={self.thresholds.stable_frames})"
        )

    @property
    def is_enabled(self) -> bool:
        """Whether frames are currently accepted."""
        return self._enabled

    @property
    def generation(self) -> int:
        """Incremented on every disable; tags in-flight frame submissions."""
        return self._generation

    @property
    def frames_processed(self) -> int:
        """Frames that produced a publish since creation."""
        return self._frames_processed

    def on_results(
        self,
        hands: Optional[Sequence[Any]],
        generation: Optional[int] = None
    ) -> Optional[HandState]:
        """
        Detector callback for one processed video frame.

        Args:
            hands: Detected hands (zero or more). Only the first is used.
            generation: Session generation captured when the frame was
                submitted. Results from an older generation are dropped.

        Returns:
            The published HandState, or None if the frame was ignored.
        """
        if not self._enabled:
            logger.debug("Frame ignored: session disabled")
            return None
        if generation is not None and generation != self._generation:
            logger.debug(
                f"Frame ignored: stale generation {generation} "
                f"(current {self._generation})"
            )
            return None

        frame = to_frame(hands[0]) if hands is not None and len(hands) > 0 else None
        self._frames_processed += 1

        if frame is None:
            return self._publish_no_hand()

        if not self._hand_present:
            logger.debug("Hand acquired")
            self._hand_present = True

        signals = self._smoother.update(extract_features(frame, self.calibration))
        raw_gesture = classify(frame, signals.tension, self.thresholds)
        gesture = self._stabilizer.update(raw_gesture)

        return self._publisher.publish(
            is_hand_detected=True,
            hand_tension=signals.tension,
            hand_position=HandPosition(signals.position_x, signals.position_y),
            hand_rotation=signals.rotation,
            current_gesture=gesture
        )

    def _publish_no_hand(self) -> HandState:
        """No hand in this frame: clear gesture immediately, keep smoothing history."""
        if self._hand_present:
            logger.debug("Hand lost")
            self._hand_present = False
        self._stabilizer.clear()
        return self._publisher.publish(
            is_hand_detected=False,
            hand_tension=0.0,
            current_gesture=GestureType.NONE
        )

    def enable(self) -> None:
        """Start accepting frames."""
        if self._enabled:
            return
        self._enabled = True
        logger.info("Tracking enabled")

    def disable(self) -> None:
        """
        Stop accepting frames and reset all filter state.

        Publishes a no-hand state once; no further writes happen until
        `enable()` is called.
        """
        if not self._enabled:
            return
        self._generation += 1
        self._smoother.reset()
        self._stabilizer.reset()
        self._hand_present = False
        self._publisher.publish(
            is_hand_detected=False,
            hand_tension=0.0,
            current_gesture=GestureType.NONE
        )
        self._enabled = False
        logger.info("Tracking disabled, session state reset")

    def _on_camera_toggled(self, active: bool) -> None:
        if active:
            self.enable()
        else:
            self.disable()

    def close(self) -> None:
        """Detach from the camera toggle and release the store."""
        if self._unsubscribe_flag:
            self._unsubscribe_flag()
            self._unsubscribe_flag = None
        self._publisher.release()
        logger.debug("TrackingSession closed")
