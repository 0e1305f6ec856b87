"""
Profile loader for the Particle Flow hand tracker.

Loads and validates JSON tuning profiles. Profile properties use camelCase:

    {
        "id": "default",
        "name": "Default",
        "cameraIndex": -1,
        "mirrorPreview": true,
        "tension": {"minDistance": 0.5, "maxDistance": 2.0},
        "gestures": {"fistTension": 0.9, "openTension": 0.1, "stableFrames": 5},
        "smoothing": {"alpha": 0.2}
    }

Every section except ``id`` and ``name`` is optional.
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .config import GestureThresholds, SmoothingSettings, TensionCalibration
from .logger import get_logger

logger = get_logger("ProfileLoader")


@dataclass
class TrackingProfile:
    """
    Profile configuration loaded from JSON.

    Attributes:
        id: Unique identifier.
        name: Profile display name.
        camera_index: Camera device index (-1 for auto).
        mirror_preview: Mirror the debug preview horizontally.
        tension: Tension calibration bounds.
        gestures: Gesture thresholds and debounce length.
        smoothing: Temporal smoothing settings.
    """

    id: str
    name: str
    camera_index: int = -1
    mirror_preview: bool = True
    tension: TensionCalibration = field(default_factory=TensionCalibration)
    gestures: GestureThresholds = field(default_factory=GestureThresholds)
    smoothing: SmoothingSettings = field(default_factory=SmoothingSettings)


class ProfileLoadError(Exception):
    """Raised when profile loading or validation fails."""
    pass


def load_profile(profile_path: Union[str, Path]) -> TrackingProfile:
    """
    Load and validate a profile from a JSON file.

    Args:
        profile_path: Path to the JSON profile file.

    Returns:
        Validated TrackingProfile instance.

    Raises:
        ProfileLoadError: If file cannot be read or validation fails.
    """
    path = Path(profile_path)
    logger.info(f"Loading profile from: {path}")

    if not path.exists():
        raise ProfileLoadError(f"Profile file not found: {path}")

    if not path.is_file():
        raise ProfileLoadError(f"Profile path is not a file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProfileLoadError(f"Invalid JSON in profile: {e}")
    except IOError as e:
        raise ProfileLoadError(f"Cannot read profile file: {e}")

    return parse_profile(data)


def _number(section: dict[str, Any], key: str, default: float, where: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ProfileLoadError(f"{where}.{key} must be a finite number, got {value!r}")
    return float(value)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ProfileLoadError(f"Profile field {key} must be an object")
    return section


def parse_profile(data: Any) -> TrackingProfile:
    """
    Parse and validate profile data from a dictionary.

    Args:
        data: Dictionary with camelCase profile properties.

    Returns:
        Validated TrackingProfile instance.

    Raises:
        ProfileLoadError: If required fields are missing or invalid.
    """
    if not isinstance(data, dict):
        raise ProfileLoadError("Profile root must be a JSON object")

    if "id" not in data:
        raise ProfileLoadError("Profile missing required field: id")

    if "name" not in data:
        raise ProfileLoadError("Profile missing required field: name")

    camera_index = data.get("cameraIndex", -1)
    if isinstance(camera_index, bool) or not isinstance(camera_index, int):
        raise ProfileLoadError(f"cameraIndex must be an integer, got {camera_index!r}")

    mirror_preview = data.get("mirrorPreview", True)
    if not isinstance(mirror_preview, bool):
        raise ProfileLoadError(f"mirrorPreview must be a boolean, got {mirror_preview!r}")

    # Tension calibration
    defaults = TensionCalibration()
    tension_data = _section(data, "tension")
    tension = TensionCalibration(
        min_distance=_number(tension_data, "minDistance", defaults.min_distance, "tension"),
        max_distance=_number(tension_data, "maxDistance", defaults.max_distance, "tension"),
    )
    if tension.min_distance >= tension.max_distance:
        raise ProfileLoadError(
            f"tension.minDistance ({tension.min_distance}) must be below "
            f"tension.maxDistance ({tension.max_distance})"
        )

    # Gesture thresholds
    gesture_defaults = GestureThresholds()
    gestures_data = _section(data, "gestures")
    fist = _number(gestures_data, "fistTension", gesture_defaults.fist_tension, "gestures")
    open_ = _number(gestures_data, "openTension", gesture_defaults.open_tension, "gestures")
    if not (0.0 <= open_ < fist <= 1.0):
        raise ProfileLoadError(
            f"gestures thresholds must satisfy 0 <= openTension < fistTension <= 1 "
            f"(got open={open_}, fist={fist})"
        )
    stable_frames = gestures_data.get("stableFrames", gesture_defaults.stable_frames)
    if isinstance(stable_frames, bool) or not isinstance(stable_frames, int) or stable_frames < 1:
        raise ProfileLoadError(f"gestures.stableFrames must be an integer >= 1, got {stable_frames!r}")
    gestures = GestureThresholds(fist_tension=fist, open_tension=open_, stable_frames=stable_frames)

    # Smoothing
    smoothing_data = _section(data, "smoothing")
    alpha = _number(smoothing_data, "alpha", SmoothingSettings().alpha, "smoothing")
    if not 0.0 < alpha <= 1.0:
        raise ProfileLoadError(f"smoothing.alpha must be in (0, 1], got {alpha}")
    smoothing = SmoothingSettings(alpha=alpha)

    profile = TrackingProfile(
        id=str(data["id"]),
        name=str(data["name"]),
        camera_index=camera_index,
        mirror_preview=mirror_preview,
        tension=tension,
        gestures=gestures,
        smoothing=smoothing
    )

    logger.info(f"Loaded profile: {profile.name} (id={profile.id})")
    logger.debug(f"  Camera index: {profile.camera_index}")
    logger.debug(f"  Tension bounds: {tension.min_distance}..{tension.max_distance}")
    logger.debug(
        f"  Gestures: fist>{gestures.fist_tension}, open<{gestures.open_tension}, "
        f"stable={gestures.stable_frames}"
    )
    logger.debug(f"  Smoothing alpha: {smoothing.alpha}")

    return profile


def create_default_profile() -> TrackingProfile:
    """
    Create a default profile with standard settings.

    Returns:
        TrackingProfile with default values.
    """
    return TrackingProfile(id="default", name="Default")


def load_profile_or_default(profile_path: Optional[Union[str, Path]]) -> TrackingProfile:
    """Load a profile when a path is given, otherwise return the default."""
    if profile_path is None:
        logger.info("No profile given, using defaults")
        return create_default_profile()
    return load_profile(profile_path)
