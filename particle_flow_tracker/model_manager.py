"""
Hand landmarker model cache.

MediaPipe builds without the legacy Solutions API need the Tasks API
``hand_landmarker.task`` bundle. It is fetched once into a per-user cache
and reused on every later start.
"""

import os
import shutil
import sys
import time
import urllib.request
from pathlib import Path
from typing import Optional

from .logger import get_logger

logger = get_logger("ModelManager")

HAND_LANDMARKER_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
HAND_LANDMARKER_FILENAME = "hand_landmarker.task"

DOWNLOAD_TIMEOUT_SEC = 120
MAX_RETRIES = 3
RETRY_DELAY_SEC = 2  # Multiplied by the attempt number


def get_model_cache_dir() -> Path:
    """Per-user model cache directory, created on first use."""
    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home()))
    else:
        base = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))

    cache_dir = base / "ParticleFlow" / "mediapipe_models"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def _is_usable(path: Path) -> bool:
    # An interrupted copy can leave an empty file behind
    return path.is_file() and path.stat().st_size > 0


def ensure_hand_landmarker_model(cache_dir: Optional[Path] = None) -> str:
    """
    Path to the hand landmarker bundle, downloading it when not cached.

    Args:
        cache_dir: Cache directory. Uses the per-user cache if None.

    Returns:
        Path to the model file.

    Raises:
        RuntimeError: If every download attempt fails.
    """
    model_path = (cache_dir or get_model_cache_dir()) / HAND_LANDMARKER_FILENAME
    if _is_usable(model_path):
        logger.debug(f"Using cached model: {model_path}")
        return str(model_path)

    logger.info(f"Hand landmarker model not cached, downloading to {model_path}")
    last_error: Optional[OSError] = None

    for attempt in range(1, MAX_RETRIES + 1):
        try:
            _download_model(HAND_LANDMARKER_URL, model_path)
        except OSError as e:
            last_error = e
            logger.warning(f"Model download attempt {attempt}/{MAX_RETRIES} failed: {e}")
            if attempt < MAX_RETRIES:
                time.sleep(RETRY_DELAY_SEC * attempt)
            continue
        logger.info("Hand landmarker model downloaded")
        return str(model_path)

    raise RuntimeError(
        f"Could not download the hand landmarker model after {MAX_RETRIES} attempts"
    ) from last_error


def _download_model(url: str, dest_path: Path) -> None:
    """
    Stream a model file into place through a temporary file.

    Raises:
        OSError: On network or file errors, or when the response is empty.
    """
    temp_path = dest_path.with_suffix(".part")
    request = urllib.request.Request(url, headers={"User-Agent": "ParticleFlow/1.0"})

    try:
        with urllib.request.urlopen(request, timeout=DOWNLOAD_TIMEOUT_SEC) as response:
            with open(temp_path, "wb") as f:
                shutil.copyfileobj(response, f)
        if temp_path.stat().st_size == 0:
            raise OSError(f"Empty response from {url}")
        temp_path.replace(dest_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
