"""
Webcam capture for the Particle Flow hand tracker.

The capture device follows the camera toggle: it is opened when tracking
is switched on and released as soon as it is switched off, so the webcam
is free (and its light off) while the particles idle.
"""

import sys
from typing import Optional

import cv2
import numpy as np

from .config import CAMERA_FPS, CAMERA_HEIGHT, CAMERA_WIDTH, DEFAULT_CAMERA_INDEX
from .logger import get_logger

logger = get_logger("CameraManager")

# Device indices probed when no camera is configured
MAX_PROBED_CAMERAS = 10


class CameraError(Exception):
    """Raised when the webcam cannot be opened or is read while closed."""
    pass


def _backends() -> tuple[int, ...]:
    # DirectShow opens much faster than MSMF on Windows
    if sys.platform == "win32":
        return (cv2.CAP_DSHOW, cv2.CAP_ANY)
    return (cv2.CAP_ANY,)


def _open_capture(index: int) -> Optional[cv2.VideoCapture]:
    """Open a device on the first backend that accepts it."""
    for backend in _backends():
        capture = cv2.VideoCapture(index, backend)
        if capture.isOpened():
            return capture
        capture.release()
        logger.debug(f"Camera {index} not available on backend {backend}")
    return None


class CameraManager:
    """
    Webcam that can be switched on and off any number of times.

    Attributes:
        camera_index: Index of the camera device.
        resolution: Requested (width, height).
        fps: Requested frame rate.
    """

    def __init__(
        self,
        camera_index: int = DEFAULT_CAMERA_INDEX,
        resolution: tuple[int, int] = (CAMERA_WIDTH, CAMERA_HEIGHT),
        fps: int = CAMERA_FPS
    ):
        self.camera_index = camera_index
        self.resolution = resolution
        self.fps = fps
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        """
        Switch the camera on. Does nothing if it is already on.

        Raises:
            CameraError: If no backend can open the device.
        """
        if self._capture is not None:
            return

        capture = _open_capture(self.camera_index)
        if capture is None:
            raise CameraError(f"Failed to open camera {self.camera_index}")

        width, height = self.resolution
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        capture.set(cv2.CAP_PROP_FPS, self.fps)
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)  # Always process the newest frame

        actual = (
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        if actual != self.resolution:
            logger.warning(f"Requested {width}x{height}, camera gives {actual[0]}x{actual[1]}")

        self._capture = capture
        logger.info(f"Camera {self.camera_index} on ({actual[0]}x{actual[1]})")

    def close(self) -> None:
        """Switch the camera off and release the device."""
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        logger.info(f"Camera {self.camera_index} off")

    def read_frame_rgb(self) -> Optional[np.ndarray]:
        """
        Grab the newest frame as RGB for the detector.

        Returns:
            RGB image, or None if the device returned no frame.

        Raises:
            CameraError: If the camera is off.
        """
        if self._capture is None:
            raise CameraError("Camera is off")

        ok, frame = self._capture.read()
        if not ok or frame is None:
            logger.debug("Camera returned no frame")
            return None
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


def _is_available(index: int) -> bool:
    capture = _open_capture(index)
    if capture is None:
        return False
    capture.release()
    return True


def select_camera(preferred_index: int = -1) -> int:
    """
    Pick the camera to track with.

    Args:
        preferred_index: Configured camera index, or -1 to auto-detect.

    Returns:
        The preferred index if it opens, otherwise the first device that does.

    Raises:
        CameraError: If no camera opens.
    """
    if preferred_index >= 0:
        if _is_available(preferred_index):
            return preferred_index
        logger.warning(f"Camera {preferred_index} not available, auto-detecting")

    for index in range(MAX_PROBED_CAMERAS):
        if index != preferred_index and _is_available(index):
            logger.info(f"Auto-selected camera {index}")
            return index

    raise CameraError("No cameras available")
