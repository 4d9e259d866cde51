"""
Main window: label input and camera picker on top, scrollable entry list, logs at the bottom.
Owns the event runner and the render notifier for the store it is given.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QScrollArea,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from core.camera_list import get_camera_list
from core.errors import RenderError
from core.models import AddItem, CaptureParams, DeleteItem, EntryCollection, ToggleStatus
from core.notifier import SyncNotifier
from core.runner import EventRunner
from core.store import EntryStore
from ui.entry_widget import EntryWidget, main_font
from ui.panels import LogsPanel, QtLogHandler

logger = logging.getLogger(__name__)

# How long the notifier thread waits for the GUI thread to finish one render
_RENDER_TIMEOUT_S = 10.0


class _RenderTicket:
    """Carries one snapshot to the GUI thread and the outcome back."""

    def __init__(self, snapshot: EntryCollection) -> None:
        self.snapshot = snapshot
        self.done = threading.Event()
        self.error: Exception | None = None


class MainWindow(QWidget):
    """Capture journal window. User input becomes events; the store's snapshots become widgets."""

    _render_requested = Signal(object)

    def __init__(self, store: EntryStore, capture_params: CaptureParams) -> None:
        super().__init__()
        self.setWindowTitle("Capture Journal")
        self.setStyleSheet("QWidget { background-color: rgb(255, 255, 255); }")
        self._store = store
        self._capture_params = capture_params
        self._widgets: dict[int, EntryWidget] = {}
        self._runner = EventRunner(store)
        self._notifier = SyncNotifier(self._render_from_notifier)
        self._render_requested.connect(self._on_render_requested, Qt.ConnectionType.QueuedConnection)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(25, 25, 25, 25)

        # --- Top: label input and camera picker ---
        top = QHBoxLayout()
        self._label_edit = QLineEdit()
        self._label_edit.setPlaceholderText("What needs to be done?")
        self._label_edit.setFont(main_font())
        self._label_edit.returnPressed.connect(self._on_add_item)
        top.addWidget(self._label_edit, stretch=1)
        self._camera_combo = QComboBox()
        self._camera_combo.setToolTip("Camera used for new captures.")
        self._camera_combo.currentIndexChanged.connect(self._on_camera_changed)
        top.addWidget(self._camera_combo)
        refresh_cam_btn = QPushButton("Refresh cameras")
        refresh_cam_btn.setToolTip("Re-detect connected cameras.")
        refresh_cam_btn.clicked.connect(self._refresh_cameras)
        top.addWidget(refresh_cam_btn)
        self._busy_label = QLabel("")
        self._busy_label.setStyleSheet("color: #666;")
        top.addWidget(self._busy_label)
        layout.addLayout(top)

        # --- Center: entries, bottom: logs ---
        self._entries_box = QWidget()
        self._entries_layout = QVBoxLayout(self._entries_box)
        self._entries_layout.addStretch()
        scroll = QScrollArea()
        scroll.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOn)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._entries_box)
        self._logs_panel = LogsPanel()
        splitter = QSplitter(Qt.Orientation.Vertical)
        splitter.addWidget(scroll)
        splitter.addWidget(self._logs_panel)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)
        layout.addWidget(splitter, stretch=1)

        self._log_handler = QtLogHandler(self._logs_panel)
        logging.getLogger().addHandler(self._log_handler)

        self._refresh_cameras()
        self.setMinimumHeight(600)
        self.resize(1100, 750)

    # --- Lifecycle ---

    def start(self) -> None:
        """Wire store -> notifier, start background threads, and draw the current state."""
        self._runner.busy_changed.connect(self._on_busy_changed)
        self._store.subscribe(self._notifier.publish)
        self._notifier.start()
        self._runner.start()
        self._notifier.publish(self._store.entries)
        logger.info("Application started. Type a label and press Enter to capture.")

    def post(self, event: object) -> None:
        self._runner.post(event)

    def closeEvent(self, event) -> None:
        self._store.unsubscribe(self._notifier.publish)
        self._runner.stop()
        self._runner.finish_thread()
        self._notifier.stop(timeout=1.0)
        logging.getLogger().removeHandler(self._log_handler)
        event.accept()

    # --- User input -> events ---

    def _refresh_cameras(self) -> None:
        """Populate camera combo with (index, name) from get_camera_list()."""
        cameras = get_camera_list()
        self._camera_combo.blockSignals(True)
        self._camera_combo.clear()
        for index, name in cameras:
            self._camera_combo.addItem(name, index)
        if not cameras:
            self._camera_combo.addItem(f"Camera {self._capture_params.device}", self._capture_params.device)
            logger.warning("No cameras detected. Connect a camera and click Refresh cameras.")
        pos = self._camera_combo.findData(self._capture_params.device)
        self._camera_combo.setCurrentIndex(max(pos, 0))
        self._camera_combo.blockSignals(False)
        self._on_camera_changed(self._camera_combo.currentIndex())

    def _on_camera_changed(self, index: int) -> None:
        device = self._camera_combo.itemData(index)
        if device is None or device == self._capture_params.device:
            return
        self._capture_params = replace(self._capture_params, device=int(device))
        logger.info("New captures will use camera %d", device)

    def _on_add_item(self) -> None:
        label = self._label_edit.text()
        self._label_edit.clear()
        self.post(AddItem(label=label, params=self._capture_params))

    @Slot(int)
    def _on_toggle(self, entry_id: int) -> None:
        self.post(ToggleStatus(entry_id=entry_id))

    @Slot(int)
    def _on_delete(self, entry_id: int) -> None:
        self.post(DeleteItem(entry_id=entry_id))

    @Slot(bool)
    def _on_busy_changed(self, busy: bool) -> None:
        self._busy_label.setText("Capturing..." if busy else "")

    # --- Snapshots -> widgets ---

    def _render_from_notifier(self, snapshot: EntryCollection) -> None:
        """Called on the notifier thread; blocks until the GUI thread has drawn the snapshot."""
        ticket = _RenderTicket(snapshot)
        self._render_requested.emit(ticket)
        if not ticket.done.wait(_RENDER_TIMEOUT_S):
            raise RenderError(f"GUI did not render within {_RENDER_TIMEOUT_S:.0f}s")
        if ticket.error is not None:
            raise RenderError(f"{type(ticket.error).__name__}: {ticket.error}") from ticket.error

    @Slot(object)
    def _on_render_requested(self, ticket: _RenderTicket) -> None:
        try:
            self.render_entries(ticket.snapshot)
        except Exception as e:  # noqa: BLE001
            ticket.error = e
        finally:
            ticket.done.set()

    def render_entries(self, snapshot: EntryCollection) -> None:
        """Bring the widget list in line with `snapshot`, reusing widgets by entry id."""
        wanted = {entry.entry_id for entry in snapshot}
        for entry_id in list(self._widgets):
            if entry_id not in wanted:
                widget = self._widgets.pop(entry_id)
                self._entries_layout.removeWidget(widget)
                widget.deleteLater()
        for position, entry in enumerate(snapshot):
            widget = self._widgets.get(entry.entry_id)
            if widget is None:
                widget = EntryWidget(entry)
                widget.toggle_requested.connect(self._on_toggle)
                widget.delete_requested.connect(self._on_delete)
                self._widgets[entry.entry_id] = widget
            else:
                self._entries_layout.removeWidget(widget)
            self._entries_layout.insertWidget(position, widget)
            widget.set_done(entry.done)
        logger.debug("Rendered %d entries", len(snapshot))
