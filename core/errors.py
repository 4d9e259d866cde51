"""
Error taxonomy for capture, analysis, the entry reducer and rendering.
"""

from __future__ import annotations


class CaptureError(RuntimeError):
    """Base class for every failure the app catches and logs instead of crashing."""


class DeviceError(CaptureError):
    """Camera could not be opened, configured, or read."""


class GeometryMismatch(CaptureError):
    """Extracted byte count disagrees with the frame's advertised width x height x channels."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"expected {expected} bytes from frame geometry, got {actual}")
        self.expected = expected
        self.actual = actual


class AnalysisError(CaptureError):
    """OpenCV rejected the captured frame during colour conversion or edge detection."""


class UnknownEvent(CaptureError):
    """Reducer received an event kind it has no transition for."""


class IndexOutOfRange(CaptureError):
    """Toggle/delete addressed a position (or id) not in the current collection."""


class RenderError(CaptureError):
    """Renderer failed while drawing a snapshot."""
