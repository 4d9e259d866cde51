"""
Webcam capture: open a device by index, set the frame size, read BGR frames, release.
"""

from __future__ import annotations

import logging
import sys

import cv2
import numpy as np

from core.errors import DeviceError
from core.models import CaptureParams

logger = logging.getLogger(__name__)


class WebcamSource:
    """Thin wrapper over cv2.VideoCapture that raises DeviceError instead of returning flags."""

    def __init__(self) -> None:
        self._cap: cv2.VideoCapture | None = None
        self._device: int | None = None

    def open(self, device: int = 0) -> None:
        """Open the webcam at `device`."""
        self.release()
        # On Windows, use DirectShow so index order matches the enumerated camera list
        if sys.platform == "win32":
            self._cap = cv2.VideoCapture(device, cv2.CAP_DSHOW)
        else:
            self._cap = cv2.VideoCapture(device)
        self._device = device
        if not self._cap.isOpened():
            self.release()
            raise DeviceError(f"failed to open camera {device}")

    def configure(self, width: int, height: int) -> None:
        """Request a frame size. Drivers may pick the nearest size they support."""
        if self._cap is None:
            raise DeviceError("configure called before open")
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    def read(self) -> np.ndarray:
        """Read one frame in the device's native BGR order."""
        if self._cap is None:
            raise DeviceError("read called before open")
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise DeviceError(f"failed to read a frame from camera {self._device}")
        return frame

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


def grab_frame(params: CaptureParams) -> np.ndarray:
    """Open, configure, read and release in one call. The device is released on every path."""
    source = WebcamSource()
    try:
        source.open(params.device)
        source.configure(params.width, params.height)
        frame = source.read()
        logger.debug(
            "Captured %dx%d frame from camera %d (requested %dx%d)",
            frame.shape[1], frame.shape[0], params.device, params.width, params.height,
        )
        return frame
    finally:
        source.release()
