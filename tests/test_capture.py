"""Tests for scoped webcam acquisition against a fake cv2.VideoCapture."""

import cv2
import numpy as np
import pytest

from core.camera_list import get_camera_list
from core.capture import WebcamSource, grab_frame
from core.errors import DeviceError
from core.models import CaptureParams


def test_grab_frame_configures_reads_and_releases(fake_camera):
    fake_camera.frame = np.full((240, 320, 3), 7, dtype=np.uint8)
    frame = grab_frame(CaptureParams(device=1, width=320, height=240))
    assert frame.shape == (240, 320, 3)
    (cap,) = fake_camera.instances
    assert cap.index == 1
    assert cap.props[cv2.CAP_PROP_FRAME_WIDTH] == 320
    assert cap.props[cv2.CAP_PROP_FRAME_HEIGHT] == 240
    assert cap.released


def test_open_failure_raises_and_releases(fake_camera):
    fake_camera.opens = False
    with pytest.raises(DeviceError, match="open camera 0"):
        grab_frame(CaptureParams())
    assert all(cap.released for cap in fake_camera.instances)


def test_read_failure_raises_and_releases(fake_camera):
    fake_camera.frame = None
    with pytest.raises(DeviceError, match="read"):
        grab_frame(CaptureParams())
    (cap,) = fake_camera.instances
    assert cap.released


def test_source_requires_open_before_use(fake_camera):
    source = WebcamSource()
    with pytest.raises(DeviceError):
        source.read()
    with pytest.raises(DeviceError):
        source.configure(320, 240)


def test_reopen_releases_previous_handle(fake_camera):
    source = WebcamSource()
    source.open(0)
    source.open(1)
    first, second = fake_camera.instances
    assert first.released
    source.release()
    assert second.released


def test_camera_list_probes_and_releases(monkeypatch, fake_camera):
    import core.camera_list

    monkeypatch.setattr(core.camera_list.cv2, "VideoCapture", fake_camera)
    cameras = get_camera_list(max_cameras=3)
    assert cameras == [(0, "Camera 0"), (1, "Camera 1"), (2, "Camera 2")]
    assert all(cap.released for cap in fake_camera.instances)


def test_camera_list_empty_when_nothing_opens(monkeypatch, fake_camera):
    import core.camera_list

    fake_camera.opens = False
    monkeypatch.setattr(core.camera_list.cv2, "VideoCapture", fake_camera)
    assert get_camera_list(max_cameras=2) == []
