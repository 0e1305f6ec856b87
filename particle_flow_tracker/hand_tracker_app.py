#!/usr/bin/env python3
"""
Particle Flow Hand Tracker

Main entry point. Captures webcam frames, runs MediaPipe hand detection
and feeds the tracking session that publishes the hand state driving the
particle visualization.

Usage:
    python -m particle_flow_tracker [--profile <path>] [--camera <index>] [--debug]

Exit Codes:
    0 - Success
    1 - Profile error
    2 - Camera error
    3 - Runtime error
"""

import argparse
import math
import signal
import sys
import time
from typing import Optional

import cv2
import numpy as np

from .camera_manager import CameraError, CameraManager, select_camera
from .config import (
    CAMERA_HEIGHT,
    CAMERA_WIDTH,
    EXIT_CAMERA_ERROR,
    EXIT_PROFILE_ERROR,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)
from .hand_detector import HandDetector, draw_landmarks
from .hand_state import HandState, HandStateStore, ObservableFlag
from .landmarks import HandLandmarks
from .logger import get_logger, setup_logging
from .profile_loader import ProfileLoadError, TrackingProfile, load_profile_or_default
from .scene_controller import SceneFollower, SceneTransform
from .tracking_session import TrackingSession

# Delay between loop iterations while the camera is off and no window is shown
IDLE_SLEEP_SEC = 0.05

KEY_ESC = 27


class HandTrackerApp:
    """
    Main application for hand tracking.

    Single-threaded loop: camera -> detector -> tracking session. The
    camera toggle closes the capture device and disables the session;
    re-enabling reopens the device and starts from a clean session.
    """

    def __init__(
        self,
        profile: TrackingProfile,
        camera_index: int,
        debug: bool = False
    ):
        """
        Initialize hand tracker application.

        Args:
            profile: Loaded profile configuration.
            camera_index: Camera device index.
            debug: Show the preview window.
        """
        self.profile = profile
        self.camera_index = camera_index
        self.debug = debug

        self._logger = get_logger("App")
        self._running = False

        self.store = HandStateStore()
        self.camera_flag = ObservableFlag(True)
        self.session = TrackingSession(
            self.store,
            camera_flag=self.camera_flag,
            calibration=profile.tension,
            smoothing=profile.smoothing,
            thresholds=profile.gestures
        )
        self.scene = SceneFollower()

        self._camera = CameraManager(camera_index=camera_index)
        self._detector: Optional[HandDetector] = None
        self._unsubscribe_flag = self.camera_flag.subscribe(self._on_camera_toggled)
        self._unsubscribe_state = self.store.subscribe(self._on_state_published)
        self._last_gesture = self.store.snapshot().current_gesture

        # Stats
        self._frame_count = 0
        self._start_time = 0.0
        self._last_fps_time = 0.0
        self._fps = 0.0

    def initialize(self) -> None:
        """
        Initialize detector and camera.

        Raises:
            CameraError: If the camera cannot be opened.
        """
        self._logger.info("Initializing hand tracker...")
        self._detector = HandDetector()
        self._detector.initialize()

        if self.camera_flag.value:
            self._camera.open()

        self._logger.info("Hand tracker initialized")

    def _on_camera_toggled(self, active: bool) -> None:
        if not active:
            self._camera.close()
            return
        try:
            self._camera.open()
        except CameraError as e:
            self._logger.error(f"Camera error: {e}")
            self.camera_flag.set(False)

    def _on_state_published(self, state: HandState) -> None:
        if state.current_gesture != self._last_gesture:
            self._logger.debug(f"Gesture: {state.current_gesture.value}")
            self._last_gesture = state.current_gesture

    def run(self) -> None:
        """Run the tracking loop until stopped."""
        self._running = True
        self._start_time = time.perf_counter()
        self._last_fps_time = self._start_time

        self._logger.info("Starting tracking loop...")

        try:
            while self._running:
                frame, hands = self._process_frame()
                transform = self.scene.update(self.store.snapshot())

                if self.debug:
                    self._show_debug_frame(frame, hands, transform)
                    key = cv2.waitKey(1 if frame is not None else 30) & 0xFF
                    if key in (ord("q"), KEY_ESC):
                        self._logger.info("Quit key pressed")
                        break
                    if key == ord("c"):
                        active = self.camera_flag.toggle()
                        self._logger.info(f"Camera {'on' if active else 'off'}")
                elif frame is None:
                    time.sleep(IDLE_SLEEP_SEC)
        except KeyboardInterrupt:
            self._logger.info("Interrupted by user")
        finally:
            self.stop()

    def _process_frame(self) -> tuple[Optional[np.ndarray], list[HandLandmarks]]:
        """
        Capture and process a single frame.

        Returns:
            (RGB frame, detected hands); frame is None when nothing was captured.
        """
        detector = self._detector
        if not self.session.is_enabled or not self._camera.is_open or detector is None:
            return None, []

        # Results of this submission are dropped if the session is disabled meanwhile
        generation = self.session.generation

        frame = self._camera.read_frame_rgb()
        if frame is None:
            return None, []

        self._frame_count += 1
        hands = detector.detect_hands(frame)
        self.session.on_results(hands, generation)

        self._update_fps()
        return frame, hands

    def _show_debug_frame(
        self,
        frame: Optional[np.ndarray],
        hands: list[HandLandmarks],
        transform: SceneTransform
    ) -> None:
        """Show the preview window with the published hand state."""
        if frame is None:
            display = np.zeros((CAMERA_HEIGHT, CAMERA_WIDTH, 3), dtype=np.uint8)
        else:
            display = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
            if hands:
                display = draw_landmarks(display, hands[0])

        # Mirror the display (more intuitive for hand tracking)
        if self.profile.mirror_preview:
            display = cv2.flip(display, 1)

        render_overlay(
            display,
            self.store.snapshot(),
            transform,
            camera_active=self.camera_flag.value,
            fps=self._fps
        )
        cv2.imshow("Particle Flow Hand Tracker", display)

    def _update_fps(self) -> None:
        current_time = time.perf_counter()
        if current_time - self._last_fps_time >= 1.0:
            self._fps = self._frame_count / (current_time - self._start_time)
            self._last_fps_time = current_time

    def request_stop(self) -> None:
        """Ask the tracking loop to exit after the current frame."""
        self._running = False

    def stop(self) -> None:
        """Stop the tracking loop and cleanup."""
        if not self._running and not self._camera.is_open and self._detector is None:
            return
        self._running = False
        self._logger.info("Stopping hand tracker...")

        self._camera.close()
        if self._detector:
            self._detector.close()
            self._detector = None

        if self.debug:
            cv2.destroyAllWindows()

        if self._frame_count > 0:
            elapsed = time.perf_counter() - self._start_time
            avg_fps = self._frame_count / elapsed if elapsed > 0 else 0
            self._logger.info(
                f"Tracking stopped. Processed {self._frame_count} frames "
                f"in {elapsed:.1f}s ({avg_fps:.1f} FPS average)"
            )

    def close(self) -> None:
        """Stop and detach from the store."""
        self.stop()
        self._unsubscribe_flag()
        self._unsubscribe_state()
        self.session.close()


def render_overlay(
    display: np.ndarray,
    state: HandState,
    transform: SceneTransform,
    camera_active: bool = True,
    fps: float = 0.0
) -> np.ndarray:
    """
    Draw status, gesture, tension bar and scene gizmo on a BGR image.

    Args:
        display: BGR image, modified in place.
        state: Published hand state.
        transform: Current scene follower transform.
        camera_active: Camera toggle state.
        fps: Processing rate to show.

    Returns:
        The annotated image.
    """
    h, w = display.shape[:2]
    green = (0, 200, 0)
    red = (0, 0, 230)
    white = (255, 255, 255)

    camera_text = "CAMERA ON" if camera_active else "CAMERA OFF"
    cv2.putText(display, camera_text, (10, 25),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, white if camera_active else red, 2)

    detected_text = "HAND DETECTED" if state.is_hand_detected else "NO HAND DETECTED"
    cv2.putText(display, detected_text, (10, 50),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, green if state.is_hand_detected else red, 2)

    if state.is_hand_detected:
        cv2.putText(display, f"GESTURE: {state.current_gesture.value}", (10, 75),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, white, 2)

    # Tension bar
    bar_x, bar_y, bar_w, bar_h = 10, h - 30, 200, 14
    cv2.rectangle(display, (bar_x, bar_y), (bar_x + bar_w, bar_y + bar_h), white, 1)
    filled = int(bar_w * state.hand_tension)
    if filled > 0:
        cv2.rectangle(display, (bar_x, bar_y), (bar_x + filled, bar_y + bar_h), (255, 0, 255), -1)
    cv2.putText(display, f"TENSION {state.hand_tension * 100:.0f}%", (bar_x, bar_y - 6),
                cv2.FONT_HERSHEY_SIMPLEX, 0.45, white, 1)

    # Scene gizmo: roll as a line, expansion as radius, yaw/pitch as offset
    center = (w - 70, h - 70)
    radius = int(25 + 25 * transform.expansion)
    offset = (int(20 * math.sin(transform.rotation_y)), int(-20 * math.sin(transform.rotation_x)))
    gizmo_center = (center[0] + offset[0], center[1] + offset[1])
    cv2.circle(display, gizmo_center, radius, (255, 170, 0), 1)
    tip = (
        int(gizmo_center[0] + radius * math.sin(transform.rotation_z)),
        int(gizmo_center[1] - radius * math.cos(transform.rotation_z))
    )
    cv2.line(display, gizmo_center, tip, (255, 170, 0), 2)

    cv2.putText(display, f"FPS: {fps:.1f}", (w - 110, 25),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 255, 255), 1)

    return display


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Particle Flow Hand Tracker - hand gestures for the particle visualization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0  Success
  1  Profile error (file not found, invalid JSON or values)
  2  Camera error (camera not available)
  3  Runtime error (unexpected error)

Keys (debug window):
  c      Toggle camera on/off
  q/Esc  Quit

Examples:
  python -m particle_flow_tracker --debug
  python -m particle_flow_tracker --profile tuning.json --camera 1
"""
    )

    parser.add_argument(
        "--profile", "-p",
        default=None,
        help="Path to JSON tuning profile (default: built-in settings)"
    )

    parser.add_argument(
        "--camera", "-c",
        type=int,
        default=-1,
        help="Camera index (default: profile setting, then auto-detect)"
    )

    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging and the preview window"
    )

    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to the console only"
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    logger = setup_logging(debug=args.debug, log_to_file=not args.no_log_file)
    logger.info("Particle Flow Hand Tracker starting...")

    try:
        profile = load_profile_or_default(args.profile)
    except ProfileLoadError as e:
        logger.error(f"Failed to load profile: {e}")
        return EXIT_PROFILE_ERROR

    try:
        if args.camera >= 0:
            camera_index = args.camera
        elif profile.camera_index >= 0:
            camera_index = profile.camera_index
        else:
            camera_index = select_camera()
    except CameraError as e:
        logger.error(f"Camera selection failed: {e}")
        return EXIT_CAMERA_ERROR

    app: Optional[HandTrackerApp] = None

    try:
        app = HandTrackerApp(profile=profile, camera_index=camera_index, debug=args.debug)

        def signal_handler(sig, frame):
            logger.info("Received shutdown signal")
            if app:
                app.request_stop()

        signal.signal(signal.SIGINT, signal_handler)
        if sys.platform != "win32":
            signal.signal(signal.SIGTERM, signal_handler)

        app.initialize()
        app.run()

        return EXIT_SUCCESS

    except CameraError as e:
        logger.error(f"Camera error: {e}")
        return EXIT_CAMERA_ERROR
    except Exception as e:
        logger.exception(f"Runtime error: {e}")
        return EXIT_RUNTIME_ERROR
    finally:
        if app:
            app.close()


if __name__ == "__main__":
    sys.exit(main())
