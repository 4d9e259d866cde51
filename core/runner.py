"""
Event runner: applies posted events to the EntryStore on a worker thread.
Uses QThread + signals so captures never block the UI.
"""

from __future__ import annotations

import logging
import queue

from PySide6.QtCore import QObject, QThread, Signal

from core.models import AddItem
from core.store import EntryStore

logger = logging.getLogger(__name__)

_STOP = object()


class EventRunner(QObject):
    """Worker that takes events in arrival order and hands each to the store."""

    # Emit True while a capture is running, False when it finishes
    busy_changed = Signal(bool)
    # Emit when the loop exits
    stopped = Signal()

    def __init__(self, store: EntryStore, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._store = store
        self._queue: queue.Queue[object] = queue.Queue()
        self._running = False
        self._thread: QThread | None = None

    def start(self) -> None:
        """Start processing in a background thread."""
        if self._running:
            return
        self._running = True
        self._thread = QThread()
        self.moveToThread(self._thread)
        self._thread.started.connect(self._run_loop)
        self._thread.start()

    def post(self, event: object) -> None:
        """Queue an event. Safe to call from any thread."""
        self._queue.put(event)

    def stop(self) -> None:
        """Request stop; events already queued ahead of the request are still applied."""
        self._running = False
        self._queue.put(_STOP)

    def _run_loop(self) -> None:
        """Runs in worker thread: take event -> dispatch -> repeat."""
        while True:
            event = self._queue.get()
            if event is _STOP:
                break
            is_capture = isinstance(event, AddItem)
            if is_capture:
                self.busy_changed.emit(True)
            try:
                self._store.dispatch(event)
            except Exception:  # noqa: BLE001
                # Listener failures must not kill the writer thread
                logger.exception("Error while applying %s", type(event).__name__)
            finally:
                if is_capture:
                    self.busy_changed.emit(False)
        self.stopped.emit()

    def finish_thread(self) -> None:
        """Call after stop(): quit and wait for thread."""
        if self._thread is not None and self._thread.isRunning():
            self._thread.quit()
            self._thread.wait(5000)
        self._thread = None
