"""
Tests for the landmark overlay drawn on the debug preview.
"""
import importlib.util
import unittest

import numpy as np

from particle_flow_tracker.landmarks import HandLandmarks, Landmark

from synthetic_hands import make_hand

HAS_VIDEO_STACK = all(
    importlib.util.find_spec(name) is not None for name in ("cv2", "mediapipe")
)

if HAS_VIDEO_STACK:
    from particle_flow_tracker.hand_detector import draw_landmarks


def hand_from_frame(frame):
    return HandLandmarks(landmarks=[Landmark(x=p[0], y=p[1], z=p[2]) for p in frame])


@unittest.skipUnless(HAS_VIDEO_STACK, "OpenCV and MediaPipe required")
class TestDrawLandmarks(unittest.TestCase):

    def setUp(self):
        self.hand = hand_from_frame(make_hand(index=True))

    def test_draws_in_place(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        result = draw_landmarks(image, self.hand)
        self.assertIs(result, image)
        # Wrist joint marker at (50, 80) in pixels
        self.assertEqual(image[80, 50].tolist(), [0, 255, 0])

    def test_connections_optional(self):
        with_lines = draw_landmarks(np.zeros((100, 100, 3), dtype=np.uint8), self.hand)
        points_only = draw_landmarks(
            np.zeros((100, 100, 3), dtype=np.uint8), self.hand, draw_connections=False
        )
        self.assertGreater(int(with_lines[..., 2].sum()), 0)
        self.assertEqual(int(points_only[..., 2].sum()), 0)


if __name__ == "__main__":
    unittest.main()
