import numpy as np
import pytest

from core.models import Analysis, CaptureParams, Entry


def _analysis() -> Analysis:
    image = np.zeros((2, 3, 3), dtype=np.uint8)
    return Analysis(image=image, histogram_svg=b"<svg/>", edge_image=image.copy())


class StubAnalyzer:
    """Stands in for FrameAnalyzer: fixed artifacts, or raises `error` if set."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[CaptureParams] = []

    def analyze(self, params: CaptureParams) -> Analysis:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return _analysis()


class FakeVideoCapture:
    """cv2.VideoCapture double. Records calls; `opens`/`frame` control the outcome."""

    instances: list["FakeVideoCapture"] = []
    opens = True
    frame: np.ndarray | None = None

    def __init__(self, index, *args):
        self.index = index
        self.props: dict[int, float] = {}
        self.released = False
        FakeVideoCapture.instances.append(self)

    def isOpened(self):
        return self.opens and not self.released

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def get(self, prop):
        return self.props.get(prop, 0.0)

    def read(self):
        if self.frame is None:
            return False, None
        return True, self.frame.copy()

    def release(self):
        self.released = True


@pytest.fixture
def params():
    return CaptureParams(device=0, width=3, height=2)


@pytest.fixture
def make_entries(params):
    """Build n entries labelled e0..e{n-1} with ids 0..n-1."""

    def _make(n: int) -> tuple[Entry, ...]:
        return tuple(
            Entry(entry_id=i, label=f"e{i}", params=params, analysis=_analysis())
            for i in range(n)
        )

    return _make


@pytest.fixture
def fake_camera(monkeypatch):
    """Patch cv2.VideoCapture inside core.capture with FakeVideoCapture."""
    import core.capture

    FakeVideoCapture.instances = []
    FakeVideoCapture.opens = True
    FakeVideoCapture.frame = None
    monkeypatch.setattr(core.capture.cv2, "VideoCapture", FakeVideoCapture)
    return FakeVideoCapture
