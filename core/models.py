"""
Shared data models: capture parameters, analysis artifacts, entries and events.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np

# OpenCV-style datatype tags we know how to extract into an 8-bit buffer
SUPPORTED_DATATYPES = ("CV_8UC1", "CV_8UC3")


@dataclass(frozen=True)
class CaptureParams:
    """Device configuration used to acquire a frame. Passed through unchanged into each Entry."""

    device: int = 0
    width: int = 320
    height: int = 240
    datatype: str = "CV_8UC3"


@dataclass(frozen=True)
class Analysis:
    """The three artifacts derived once from a capture."""

    image: np.ndarray = field(repr=False, compare=False)
    histogram_svg: bytes = field(repr=False, compare=False)
    edge_image: np.ndarray = field(repr=False, compare=False)


@dataclass(frozen=True)
class Entry:
    """One capture plus its analysis and user metadata. Only `done` changes after creation."""

    entry_id: int
    label: str
    params: CaptureParams
    analysis: Analysis = field(repr=False, compare=False)
    done: bool = False

    def toggled(self) -> Entry:
        return replace(self, done=not self.done)


EntryCollection = tuple[Entry, ...]


# --- Events ---


@dataclass(frozen=True)
class ToggleStatus:
    """Flip `done` on one entry. Address by position (`idx`) or stable `entry_id`."""

    idx: int | None = None
    entry_id: int | None = None


@dataclass(frozen=True)
class DeleteItem:
    """Remove one entry. Positions after it shift down by one."""

    idx: int | None = None
    entry_id: int | None = None


@dataclass(frozen=True)
class AddItem:
    """Capture a frame with `params` and append a new entry labelled `label`."""

    label: str
    params: CaptureParams = field(default_factory=CaptureParams)

