"""
Tests for JSON profile loading and validation.
"""
import json
import os
import tempfile
import unittest

from particle_flow_tracker.profile_loader import (
    ProfileLoadError,
    create_default_profile,
    load_profile,
    load_profile_or_default,
    parse_profile,
)

FULL_PROFILE = {
    "id": "studio",
    "name": "Studio Lights",
    "cameraIndex": 1,
    "mirrorPreview": False,
    "tension": {"minDistance": 0.4, "maxDistance": 1.8},
    "gestures": {"fistTension": 0.85, "openTension": 0.15, "stableFrames": 3},
    "smoothing": {"alpha": 0.3},
}


class TestLoadProfile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write(self, content):
        path = os.path.join(self.tmpdir.name, "profile.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_load_full_profile(self):
        profile = load_profile(self.write(json.dumps(FULL_PROFILE)))
        self.assertEqual(profile.id, "studio")
        self.assertEqual(profile.name, "Studio Lights")
        self.assertEqual(profile.camera_index, 1)
        self.assertFalse(profile.mirror_preview)
        self.assertEqual(profile.tension.min_distance, 0.4)
        self.assertEqual(profile.tension.max_distance, 1.8)
        self.assertEqual(profile.gestures.fist_tension, 0.85)
        self.assertEqual(profile.gestures.open_tension, 0.15)
        self.assertEqual(profile.gestures.stable_frames, 3)
        self.assertEqual(profile.smoothing.alpha, 0.3)

    def test_missing_file(self):
        with self.assertRaises(ProfileLoadError):
            load_profile(os.path.join(self.tmpdir.name, "missing.json"))

    def test_directory_is_rejected(self):
        with self.assertRaises(ProfileLoadError):
            load_profile(self.tmpdir.name)

    def test_invalid_json(self):
        with self.assertRaises(ProfileLoadError):
            load_profile(self.write("{not json"))

    def test_load_or_default(self):
        self.assertEqual(load_profile_or_default(None), create_default_profile())
        profile = load_profile_or_default(self.write(json.dumps(FULL_PROFILE)))
        self.assertEqual(profile.id, "studio")


class TestParseProfile(unittest.TestCase):

    def with_changes(self, **changes):
        data = json.loads(json.dumps(FULL_PROFILE))
        data.update(changes)
        return data

    def test_minimal_profile_uses_defaults(self):
        profile = parse_profile({"id": "min", "name": "Minimal"})
        default = create_default_profile()
        self.assertEqual(profile.camera_index, -1)
        self.assertTrue(profile.mirror_preview)
        self.assertEqual(profile.tension, default.tension)
        self.assertEqual(profile.gestures, default.gestures)
        self.assertEqual(profile.smoothing, default.smoothing)

    def test_default_profile_values(self):
        profile = create_default_profile()
        self.assertEqual(profile.tension.min_distance, 0.5)
        self.assertEqual(profile.tension.max_distance, 2.0)
        self.assertEqual(profile.gestures.fist_tension, 0.9)
        self.assertEqual(profile.gestures.open_tension, 0.1)
        self.assertEqual(profile.gestures.stable_frames, 5)
        self.assertEqual(profile.smoothing.alpha, 0.2)

    def test_required_fields(self):
        with self.assertRaises(ProfileLoadError):
            parse_profile({"name": "No id"})
        with self.assertRaises(ProfileLoadError):
            parse_profile({"id": "no-name"})

    def test_root_must_be_object(self):
        with self.assertRaises(ProfileLoadError):
            parse_profile([FULL_PROFILE])

    def test_null_section_uses_defaults(self):
        profile = parse_profile(self.with_changes(smoothing=None))
        self.assertEqual(profile.smoothing.alpha, 0.2)

    def test_invalid_values(self):
        invalid = [
            {"cameraIndex": "0"},
            {"cameraIndex": True},
            {"mirrorPreview": "yes"},
            {"tension": []},
            {"tension": {"minDistance": 2.0, "maxDistance": 1.0}},
            {"tension": {"minDistance": "0.5"}},
            {"gestures": {"fistTension": 0.1, "openTension": 0.9}},
            {"gestures": {"fistTension": 1.5}},
            {"gestures": {"openTension": -0.1}},
            {"gestures": {"stableFrames": 0}},
            {"gestures": {"stableFrames": 2.5}},
            {"smoothing": {"alpha": 0}},
            {"smoothing": {"alpha": 1.2}},
            {"smoothing": {"alpha": True}},
        ]
        for changes in invalid:
            with self.subTest(changes=changes):
                with self.assertRaises(ProfileLoadError):
                    parse_profile(self.with_changes(**changes))

    def test_non_finite_number_rejected(self):
        data = self.with_changes(smoothing={"alpha": float("nan")})
        with self.assertRaises(ProfileLoadError):
            parse_profile(data)


if __name__ == "__main__":
    unittest.main()
