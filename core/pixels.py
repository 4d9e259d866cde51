"""
Pixel buffer extraction: copy a device frame into a flat, row-major, channel-interleaved byte buffer.
"""

from __future__ import annotations

import numpy as np

from core.errors import GeometryMismatch


def frame_geometry(frame: np.ndarray) -> tuple[int, int, int]:
    """(width, height, channels) advertised by a frame's shape. 2-D frames have one channel."""
    height, width = frame.shape[:2]
    channels = frame.shape[2] if frame.ndim == 3 else 1
    return width, height, channels


def extract_pixel_buffer(
    frame: np.ndarray,
    width: int | None = None,
    height: int | None = None,
    channels: int | None = None,
) -> np.ndarray:
    """
    Copy the frame's native storage into a new read-only uint8 buffer of length W*H*C.
    Geometry defaults to the frame's own shape; pass it explicitly to check against what
    the device was asked for. Raises GeometryMismatch instead of truncating.
    """
    frame_w, frame_h, frame_c = frame_geometry(frame)
    width = frame_w if width is None else width
    height = frame_h if height is None else height
    channels = frame_c if channels is None else channels
    expected = width * height * channels

    source = frame if frame.flags.c_contiguous else np.ascontiguousarray(frame)
    buffer = source.reshape(-1).view(np.uint8).copy()
    if buffer.size != expected:
        raise GeometryMismatch(expected, buffer.size)
    buffer.setflags(write=False)
    return buffer
