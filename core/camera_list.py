"""
Enumerate cameras by probing OpenCV device indices, for the device picker.
"""

from __future__ import annotations

import sys
from typing import List, Tuple

import cv2


def _open(index: int) -> cv2.VideoCapture:
    if sys.platform == "win32":
        return cv2.VideoCapture(index, cv2.CAP_DSHOW)
    return cv2.VideoCapture(index)


def get_camera_list(max_cameras: int = 8) -> List[Tuple[int, str]]:
    """Probe indices 0..max_cameras-1; return (index, 'Camera N') for each that opens."""
    result: List[Tuple[int, str]] = []
    for i in range(max_cameras):
        cap = _open(i)
        try:
            if cap.isOpened():
                result.append((i, f"Camera {i}"))
        finally:
            cap.release()
    return result
