"""
Tests for the scene follower.
"""
import unittest

from particle_flow_tracker.gesture_classifier import GestureType
from particle_flow_tracker.hand_state import HandPosition, HandState
from particle_flow_tracker.scene_controller import SceneFollower, lerp

HAND = HandState(
    is_hand_detected=True,
    hand_tension=1.0,
    hand_position=HandPosition(0.5, -0.25),
    hand_rotation=0.4,
    current_gesture=GestureType.CLOSED_FIST
)


class TestLerp(unittest.TestCase):

    def test_lerp(self):
        self.assertEqual(lerp(0.0, 10.0, 0.1), 1.0)
        self.assertEqual(lerp(5.0, 5.0, 0.3), 5.0)


class TestSceneFollower(unittest.TestCase):

    def setUp(self):
        self.follower = SceneFollower()

    def test_first_frame_with_hand(self):
        t = self.follower.update(HAND)
        self.assertAlmostEqual(t.rotation_y, -0.1)   # -x * 2 * 0.1
        self.assertAlmostEqual(t.rotation_x, -0.05)  # y * 2 * 0.1
        self.assertAlmostEqual(t.rotation_z, 0.04)
        self.assertAlmostEqual(t.expansion, 0.1)

    def test_converges_to_hand_target(self):
        for _ in range(200):
            t = self.follower.update(HAND)
        self.assertAlmostEqual(t.rotation_y, -1.0, places=6)
        self.assertAlmostEqual(t.rotation_x, -0.5, places=6)
        self.assertAlmostEqual(t.rotation_z, 0.4, places=6)
        self.assertAlmostEqual(t.expansion, 1.0, places=6)

    def test_idle_spin_without_hand(self):
        idle = HandState()
        for _ in range(10):
            t = self.follower.update(idle)
        self.assertAlmostEqual(t.rotation_y, 0.05)
        self.assertEqual(t.rotation_x, 0.0)
        self.assertEqual(t.expansion, 0.0)

    def test_returns_upright_after_hand_lost(self):
        for _ in range(50):
            self.follower.update(HAND)
        tilted = self.follower.transform.rotation_x
        t = self.follower.update(HandState())
        self.assertAlmostEqual(t.rotation_x, tilted * 0.95)

    def test_reset(self):
        self.follower.update(HAND)
        self.follower.reset()
        t = self.follower.transform
        self.assertEqual(
            (t.rotation_x, t.rotation_y, t.rotation_z, t.expansion),
            (0.0, 0.0, 0.0, 0.0)
        )


if __name__ == "__main__":
    unittest.main()
