"""Tests for FrameAnalyzer with a stubbed frame grabber (no camera needed)."""

import numpy as np
import pytest

from core.analyzer import FrameAnalyzer, render_edges
from core.config import EdgeConfig
from core.errors import DeviceError, GeometryMismatch
from core.models import CaptureParams

PARAMS = CaptureParams(device=0, width=16, height=12)


def _bgr_frame(b=10, g=20, r=30, width=16, height=12):
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :, 0] = b
    frame[:, :, 1] = g
    frame[:, :, 2] = r
    return frame


def _grabber(frame):
    def grab(params):
        return frame

    return grab


def test_analyze_returns_all_three_artifacts():
    analysis = FrameAnalyzer(grab=_grabber(_bgr_frame())).analyze(PARAMS)
    assert analysis.image.shape == (12, 16, 3)
    assert analysis.edge_image.shape == (12, 16, 3)
    assert b"<svg" in analysis.histogram_svg


def test_image_is_converted_to_rgb():
    analysis = FrameAnalyzer(grab=_grabber(_bgr_frame(b=10, g=20, r=30))).analyze(PARAMS)
    np.testing.assert_array_equal(analysis.image[0, 0], [30, 20, 10])


def test_uniform_frame_has_no_edges_and_renders_white():
    """Polarity is inverted: no edges means an all-light image."""
    analysis = FrameAnalyzer(grab=_grabber(_bgr_frame())).analyze(PARAMS)
    assert analysis.edge_image.dtype == np.uint8
    assert (analysis.edge_image == 255).all()


def test_edges_render_dark_on_light():
    rgb = np.zeros((20, 20, 3), dtype=np.uint8)
    rgb[:, 10:] = 255
    edges = render_edges(rgb, EdgeConfig())
    assert (edges == 0).any()
    assert (edges == 255).any()
    # the flat left and right borders stay light
    assert (edges[:, 0] == 255).all()
    assert (edges[:, -1] == 255).all()


def test_edge_path_does_not_touch_display_image():
    rgb_source = _bgr_frame()
    rgb_source[:, 8:] = 255
    before = rgb_source.copy()
    analysis = FrameAnalyzer(grab=_grabber(rgb_source)).analyze(PARAMS)
    np.testing.assert_array_equal(rgb_source, before)
    np.testing.assert_array_equal(analysis.image, before[:, :, ::-1])
    assert not np.shares_memory(analysis.image, analysis.edge_image)


def test_artifacts_are_read_only():
    analysis = FrameAnalyzer(grab=_grabber(_bgr_frame())).analyze(PARAMS)
    assert not analysis.image.flags.writeable
    assert not analysis.edge_image.flags.writeable


def test_grayscale_device_frame_is_expanded_to_rgb():
    gray = np.full((12, 16), 90, dtype=np.uint8)
    analysis = FrameAnalyzer(grab=_grabber(gray)).analyze(PARAMS)
    assert analysis.image.shape == (12, 16, 3)
    assert (analysis.image == 90).all()


def test_device_error_propagates():
    def grab(params):
        raise DeviceError("no camera")

    with pytest.raises(DeviceError):
        FrameAnalyzer(grab=grab).analyze(PARAMS)


def test_sixteen_bit_frame_fails_as_geometry_mismatch():
    frame = np.zeros((12, 16, 3), dtype=np.uint16)
    with pytest.raises(GeometryMismatch):
        FrameAnalyzer(grab=_grabber(frame)).analyze(PARAMS)


def test_grabber_receives_capture_params():
    seen = []

    def grab(params):
        seen.append(params)
        return _bgr_frame()

    FrameAnalyzer(grab=grab).analyze(PARAMS)
    assert seen == [PARAMS]
