"""
Logs panel and the logging handler that feeds it from any thread.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QPlainTextEdit, QVBoxLayout, QWidget

from core.log import DATE_FORMAT


class LogsPanel(QWidget):
    """Shows application log messages and errors."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._text = QPlainTextEdit(self)
        self._text.setReadOnly(True)
        self._text.setMaximumBlockCount(2000)
        layout.addWidget(self._text)

    def append(self, message: str) -> None:
        self._text.appendPlainText(message)
        # Auto-scroll to bottom
        scrollbar = self._text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())


class _LogBridge(QObject):
    message = Signal(str)


class QtLogHandler(logging.Handler):
    """Forwards formatted records through a queued signal so widgets are only touched on the GUI thread."""

    def __init__(self, panel: LogsPanel, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._bridge = _LogBridge()
        self._bridge.message.connect(panel.append)
        self.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s", DATE_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._bridge.message.emit(self.format(record))
        except RuntimeError:
            # Panel already destroyed during shutdown
            pass
