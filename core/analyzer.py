"""
Frame analyzer: one capture -> original image, SVG histogram, and edge rendering.
"""

from __future__ import annotations

import logging
from typing import Callable

import cv2
import numpy as np

from core.capture import grab_frame
from core.config import EdgeConfig
from core.errors import AnalysisError
from core.histogram import DEFAULT_BIN_COUNT, histogram_artifact
from core.models import Analysis, CaptureParams
from core.pixels import extract_pixel_buffer, frame_geometry

logger = logging.getLogger(__name__)

# Grabs one BGR frame for the given params
FrameGrabber = Callable[[CaptureParams], np.ndarray]


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def render_edges(rgb: np.ndarray, edges: EdgeConfig) -> np.ndarray:
    """Dark-on-light Canny edges of an RGB frame, returned as a 3-channel RGB image."""
    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)
    edge_map = cv2.Canny(
        gray,
        edges.low_threshold,
        edges.high_threshold,
        apertureSize=edges.aperture,
        L2gradient=edges.l2_gradient,
    )
    cv2.bitwise_not(edge_map, dst=edge_map)
    return cv2.cvtColor(edge_map, cv2.COLOR_GRAY2RGB)


class FrameAnalyzer:
    """Runs capture, pixel extraction, histogram and edge detection as one unit."""

    def __init__(
        self,
        grab: FrameGrabber = grab_frame,
        edges: EdgeConfig | None = None,
        bin_count: int = DEFAULT_BIN_COUNT,
    ) -> None:
        self._grab = grab
        self._edges = edges or EdgeConfig()
        self._bin_count = bin_count

    def analyze(self, params: CaptureParams) -> Analysis:
        """
        Capture one frame and derive all three artifacts. Raises on any failure;
        never returns a partial Analysis.
        """
        frame_bgr = self._grab(params)
        try:
            if frame_bgr.ndim == 2:
                rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_GRAY2RGB)
            else:
                rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

            # Display/histogram path and edge path each own their buffer
            image = rgb
            edge_source = rgb.copy()

            width, height, channels = frame_geometry(image)
            buffer = extract_pixel_buffer(image, width, height, channels)
            histogram_svg = histogram_artifact(buffer, width, height, self._bin_count)
            edge_image = render_edges(edge_source, self._edges)
        except cv2.error as e:
            raise AnalysisError(str(e)) from e

        logger.info("Analyzed %dx%d frame from camera %d", width, height, params.device)
        return Analysis(
            image=_frozen(image),
            histogram_svg=histogram_svg,
            edge_image=_frozen(edge_image),
        )
