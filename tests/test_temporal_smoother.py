"""
Tests for the exponential smoother and the four-channel hand smoother.
"""
import unittest

from particle_flow_tracker.config import SmoothingSettings
from particle_flow_tracker.feature_extractor import HandFeatures
from particle_flow_tracker.temporal_smoother import (
    ExponentialSmoother,
    HandSignalSmoother,
)


class TestExponentialSmoother(unittest.TestCase):

    def test_first_update_from_zero(self):
        smoother = ExponentialSmoother(0.2)
        self.assertAlmostEqual(smoother.update(1.0), 0.2)
        self.assertAlmostEqual(smoother.update(1.0), 0.36)

    def test_converges_monotonically_to_constant(self):
        smoother = ExponentialSmoother(0.2)
        target = 0.75
        previous_gap = abs(target - smoother.value)
        initial_gap = previous_gap
        for frame in range(1, 31):
            gap = abs(target - smoother.update(target))
            self.assertLess(gap, previous_gap)
            # Residual after n frames is exactly (1 - alpha)^n of the start gap
            self.assertAlmostEqual(gap, initial_gap * 0.8 ** frame, places=12)
            previous_gap = gap

    def test_residual_below_one_percent(self):
        smoother = ExponentialSmoother(0.2)
        for _ in range(21):
            smoother.update(1.0)
        self.assertLess(1.0 - smoother.value, 0.01)

    def test_alpha_one_passes_through(self):
        smoother = ExponentialSmoother(1.0)
        self.assertEqual(smoother.update(0.42), 0.42)

    def test_invalid_alpha(self):
        for alpha in (0.0, -0.1, 1.5):
            with self.assertRaises(ValueError):
                ExponentialSmoother(alpha)

    def test_reset_restores_initial(self):
        smoother = ExponentialSmoother(0.5, initial=0.3)
        smoother.update(1.0)
        smoother.reset()
        self.assertEqual(smoother.value, 0.3)


class TestHandSignalSmoother(unittest.TestCase):

    def setUp(self):
        self.smoother = HandSignalSmoother()

    def test_channels_are_independent(self):
        signals = self.smoother.update(HandFeatures(1.0, 0.5, -0.5, 0.0))
        self.assertAlmostEqual(signals.tension, 0.2)
        self.assertAlmostEqual(signals.position_x, 0.1)
        self.assertAlmostEqual(signals.position_y, -0.1)
        self.assertAlmostEqual(signals.rotation, 0.0)

    def test_rotation_is_negated(self):
        signals = self.smoother.update(HandFeatures(0.0, 0.0, 0.0, 0.5))
        self.assertAlmostEqual(signals.rotation, -0.1)

    def test_no_wraparound_on_angle_jump(self):
        self.smoother.update(HandFeatures(0.0, 0.0, 0.0, 3.1))
        before = self.smoother.current.rotation
        after = self.smoother.update(HandFeatures(0.0, 0.0, 0.0, -3.1)).rotation
        self.assertAlmostEqual(after, before + (3.1 - before) * 0.2)

    def test_reset_clears_all_channels(self):
        for _ in range(5):
            self.smoother.update(HandFeatures(1.0, 1.0, 1.0, 1.0))
        self.assertEqual(self.smoother.smoothed_count, 5)

        self.smoother.reset()
        current = self.smoother.current
        self.assertEqual(
            (current.tension, current.position_x, current.position_y, current.rotation),
            (0.0, 0.0, 0.0, 0.0)
        )
        self.assertEqual(self.smoother.smoothed_count, 0)

    def test_custom_alpha(self):
        smoother = HandSignalSmoother(SmoothingSettings(alpha=0.5))
        self.assertAlmostEqual(smoother.update(HandFeatures(1.0, 0, 0, 0)).tension, 0.5)


if __name__ == "__main__":
    unittest.main()
