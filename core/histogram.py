"""
Intensity histogram: binning, indexed pairs for plotting, and the SVG bar-chart artifact.
"""

from __future__ import annotations

import io
import logging
from typing import Sequence

import numpy as np
from matplotlib.figure import Figure

logger = logging.getLogger(__name__)

# Full 8-bit intensity domain
DEFAULT_BIN_COUNT = 256
_PLOT_DPI = 100

Histogram = np.ndarray
IndexedHistogram = list[tuple[int, int]]


def to_unsigned(samples: Sequence[int] | np.ndarray) -> np.ndarray:
    """Read samples as 0..255 intensities. Signed bytes (-128..127) wrap: v < 0 becomes v + 256."""
    values = np.asarray(samples).astype(np.int64).reshape(-1)
    return np.where(values < 0, values + 256, values)


def build_histogram(
    samples: Sequence[int] | np.ndarray, bin_count: int = DEFAULT_BIN_COUNT
) -> Histogram:
    """
    Count occurrences of each intensity. Returns a dense, zero-filled, read-only int64
    array of exactly `bin_count` entries whose sum equals the number of samples.
    No channel de-interleaving is done; pre-slice a channel to get a per-channel histogram.
    """
    if bin_count < 1:
        raise ValueError(f"bin_count must be positive, got {bin_count}")
    values = to_unsigned(samples)
    if values.size and (values.min() < 0 or values.max() >= bin_count):
        raise ValueError(
            f"sample values span {values.min()}..{values.max()}, outside 0..{bin_count - 1}"
        )
    counts = np.bincount(values, minlength=bin_count).astype(np.int64)
    counts.setflags(write=False)
    return counts


def index_histogram(histogram: Histogram) -> IndexedHistogram:
    """(intensity, count) pairs for plotting. The last bin is left out."""
    return [(i, int(histogram[i])) for i in range(len(histogram) - 1)]


def render_histogram_svg(
    indexed: IndexedHistogram,
    width: int,
    height: int,
    color: str = "#000",
    y_max: int | None = None,
) -> bytes:
    """
    Draw the indexed histogram as a bar chart over x in [0, 255] and return an SVG document.
    `y_max` fixes the top of the y axis; by default it is the tallest plotted bar.
    """
    xs = [i for i, _ in indexed]
    ys = [count for _, count in indexed]
    if y_max is None:
        y_max = max(ys) if ys else 0

    fig = Figure(figsize=(width / _PLOT_DPI, height / _PLOT_DPI), dpi=_PLOT_DPI)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.bar(xs, ys, width=1.0, color=color, linewidth=0, align="edge")
    ax.set_xlim(0, 255)
    ax.set_ylim(0, y_max if y_max > 0 else 1)
    ax.set_axis_off()

    out = io.BytesIO()
    # No creation timestamp in the document
    fig.savefig(out, format="svg", metadata={"Date": None})
    return out.getvalue()


def histogram_artifact(
    buffer: Sequence[int] | np.ndarray,
    width: int,
    height: int,
    bin_count: int = DEFAULT_BIN_COUNT,
) -> bytes:
    """Bin a pixel buffer and render it as a `width` x `height` SVG histogram."""
    histogram = build_histogram(buffer, bin_count)
    logger.debug("Histogram built: %d samples, peak %d", int(histogram.sum()), int(histogram.max()))
    # Scale to the full histogram so a saturated last bin still sets the axis
    return render_histogram_svg(
        index_histogram(histogram), width, height, y_max=int(histogram.max())
    )
