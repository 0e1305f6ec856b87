"""
Particle Flow hand tracker - hand gestures driving a 3D particle visualization.

Turns per-frame MediaPipe hand landmarks into a smoothed tension value,
palm position, roll angle and a debounced gesture label, published as a
single-writer hand state. The camera/detector adapters live in
`camera_manager`, `hand_detector` and `hand_tracker_app` and are imported
on demand so the core stays free of OpenCV and MediaPipe imports.
"""

__version__ = "1.0.0"
__author__ = "Particle Flow Team"

from .config import GestureThresholds, SmoothingSettings, TensionCalibration
from .feature_extractor import HandFeatures, extract_features
from .gesture_classifier import GestureType, classify
from .gesture_stabilizer import GestureStabilizer
from .hand_state import (
    HandPosition,
    HandState,
    HandStatePublisher,
    HandStateStore,
    ObservableFlag,
    StoreWriteError,
)
from .landmarks import HandLandmarks, Landmark, LandmarkIndex, to_frame
from .profile_loader import ProfileLoadError, TrackingProfile, load_profile
from .scene_controller import SceneFollower, SceneTransform
from .temporal_smoother import HandSignalSmoother, SmoothedSignals
from .tracking_session import TrackingSession

__all__ = [
    "GestureThresholds",
    "SmoothingSettings",
    "TensionCalibration",
    "HandFeatures",
    "extract_features",
    "GestureType",
    "classify",
    "GestureStabilizer",
    "HandPosition",
    "HandState",
    "HandStatePublisher",
    "HandStateStore",
    "ObservableFlag",
    "StoreWriteError",
    "HandLandmarks",
    "Landmark",
    "LandmarkIndex",
    "to_frame",
    "ProfileLoadError",
    "TrackingProfile",
    "load_profile",
    "SceneFollower",
    "SceneTransform",
    "HandSignalSmoother",
    "SmoothedSignals",
    "TrackingSession",
]
