"""
One row of the entry list: done checkbox with the label, delete button, and the
image / histogram / edges strip underneath.
"""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QByteArray, Signal
from PySide6.QtGui import QFont, QImage, QPixmap
from PySide6.QtSvgWidgets import QSvgWidget
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.models import Entry


def main_font() -> QFont:
    return QFont("Helvetica", 20)


def rgb_to_pixmap(image: np.ndarray) -> QPixmap:
    """RGB888 ndarray -> QPixmap. QImage gets its own copy of the bytes."""
    h, w = image.shape[:2]
    qimg = QImage(image.tobytes(), w, h, 3 * w, QImage.Format.Format_RGB888)
    return QPixmap.fromImage(qimg.copy())


class EntryWidget(QWidget):
    """Renders one Entry. Emits the entry's stable id, never its position."""

    toggle_requested = Signal(int)
    delete_requested = Signal(int)

    def __init__(self, entry: Entry, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._entry_id = entry.entry_id
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 10, 0, 10)

        header = QHBoxLayout()
        self._check = QCheckBox(entry.label)
        self._check.setFont(main_font())
        self._check.setChecked(entry.done)
        self._check.clicked.connect(self._on_clicked)
        header.addWidget(self._check, stretch=1)
        delete_btn = QPushButton("X")
        delete_btn.setToolTip("Remove this capture.")
        delete_btn.clicked.connect(lambda: self.delete_requested.emit(self._entry_id))
        header.addWidget(delete_btn)
        layout.addLayout(header)

        strip = QHBoxLayout()
        analysis = entry.analysis
        image_label = QLabel()
        image_label.setPixmap(rgb_to_pixmap(analysis.image))
        strip.addWidget(image_label)
        h, w = analysis.image.shape[:2]
        histogram = QSvgWidget()
        histogram.load(QByteArray(analysis.histogram_svg))
        histogram.setFixedSize(w, h)
        histogram.setToolTip("Intensity histogram (all channels, 0-255)")
        strip.addWidget(histogram)
        edges_label = QLabel()
        edges_label.setPixmap(rgb_to_pixmap(analysis.edge_image))
        strip.addWidget(edges_label)
        strip.addStretch()
        layout.addLayout(strip)

        self.setToolTip(
            f"Camera {entry.params.device}, {entry.params.width}x{entry.params.height} "
            f"requested, {w}x{h} captured"
        )

    def _on_clicked(self, checked: bool) -> None:
        # The store owns `done`: undo Qt's local flip and wait for the next render
        self._check.setChecked(not checked)
        self.toggle_requested.emit(self._entry_id)

    @property
    def entry_id(self) -> int:
        return self._entry_id

    def set_done(self, done: bool) -> None:
        if self._check.isChecked() != done:
            self._check.setChecked(done)
