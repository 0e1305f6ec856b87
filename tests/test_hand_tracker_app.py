"""
Tests for the application wiring with the camera and detector mocked out.
"""
import importlib.util
import unittest
from unittest import mock

import numpy as np

from particle_flow_tracker.config import EXIT_PROFILE_ERROR
from particle_flow_tracker.gesture_classifier import GestureType
from particle_flow_tracker.profile_loader import create_default_profile
from particle_flow_tracker.scene_controller import SceneTransform

from synthetic_hands import make_reach_hand

HAS_VIDEO_STACK = all(
    importlib.util.find_spec(name) is not None for name in ("cv2", "mediapipe")
)

if HAS_VIDEO_STACK:
    from particle_flow_tracker import hand_tracker_app
    from particle_flow_tracker.camera_manager import CameraError


@unittest.skipUnless(HAS_VIDEO_STACK, "OpenCV and MediaPipe required")
class TestHandTrackerApp(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.object(hand_tracker_app, "CameraManager")
        self.camera_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.camera = self.camera_cls.return_value

        self.app = hand_tracker_app.HandTrackerApp(
            profile=create_default_profile(), camera_index=0
        )
        self.addCleanup(self.app.close)

    def test_frame_flows_to_store(self):
        self.app._detector = mock.Mock()
        self.app._detector.detect_hands.return_value = [make_reach_hand(0.4)]
        self.camera.read_frame_rgb.return_value = np.zeros((4, 4, 3), dtype=np.uint8)

        for _ in range(5):
            frame, hands = self.app._process_frame()

        self.assertIsNotNone(frame)
        state = self.app.store.snapshot()
        self.assertTrue(state.is_hand_detected)
        self.assertEqual(state.current_gesture, GestureType.OPEN_HAND)

    def test_camera_toggle_closes_and_reopens(self):
        self.app.camera_flag.set(False)
        self.camera.close.assert_called()
        self.assertFalse(self.app.session.is_enabled)
        self.assertEqual(self.app._process_frame(), (None, []))

        self.app.camera_flag.set(True)
        self.camera.open.assert_called()
        self.assertTrue(self.app.session.is_enabled)

    def test_failed_reopen_turns_toggle_off(self):
        self.app.camera_flag.set(False)
        self.camera.open.side_effect = CameraError("busy")
        self.app.camera_flag.set(True)
        self.assertFalse(self.app.camera_flag.value)
        self.assertFalse(self.app.session.is_enabled)


@unittest.skipUnless(HAS_VIDEO_STACK, "OpenCV and MediaPipe required")
class TestCommandLine(unittest.TestCase):

    def test_parse_args(self):
        args = hand_tracker_app.parse_args(["--camera", "2", "--debug", "--no-log-file"])
        self.assertEqual(args.camera, 2)
        self.assertTrue(args.debug)
        self.assertTrue(args.no_log_file)
        self.assertIsNone(args.profile)

    def test_missing_profile_exit_code(self):
        code = hand_tracker_app.main(["--profile", "does-not-exist.json", "--no-log-file"])
        self.assertEqual(code, EXIT_PROFILE_ERROR)

    def test_render_overlay(self):
        display = np.zeros((480, 640, 3), dtype=np.uint8)
        state = hand_tracker_app.HandState(
            is_hand_detected=True,
            hand_tension=0.5,
            current_gesture=GestureType.VICTORY
        )
        result = hand_tracker_app.render_overlay(display, state, SceneTransform())
        self.assertIs(result, display)
        self.assertGreater(int(display.sum()), 0)


if __name__ == "__main__":
    unittest.main()
