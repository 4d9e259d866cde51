"""
Sync notifier: hands entry snapshots to a renderer on a background thread.

Renders run one at a time. At most one snapshot waits behind the render in flight;
a newer publish replaces it, so bursts of changes collapse into one render of the
latest state.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from core.errors import RenderError
from core.models import EntryCollection

logger = logging.getLogger(__name__)

Renderer = Callable[[EntryCollection], None]


class SyncNotifier:
    """Single-consumer render channel with coalescing-to-latest."""

    def __init__(self, render: Renderer) -> None:
        self._render = render
        self._cond = threading.Condition()
        self._pending: EntryCollection | None = None
        self._has_pending = False
        self._rendering = False
        self._running = False
        self._thread: threading.Thread | None = None
        self.render_count = 0

    def start(self) -> None:
        """Start the render thread."""
        with self._cond:
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._run_loop, name="sync-notifier", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 2.0) -> None:
        """Stop after the render in flight; pending snapshots are dropped."""
        with self._cond:
            self._running = False
            self._has_pending = False
            self._pending = None
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def publish(self, snapshot: EntryCollection) -> None:
        """Schedule a render of `snapshot`, replacing any snapshot not yet rendered."""
        with self._cond:
            if not self._running:
                logger.debug("Notifier stopped; dropping snapshot of %d entries", len(snapshot))
                return
            if self._has_pending:
                logger.debug("Coalescing render: superseding pending snapshot")
            self._pending = snapshot
            self._has_pending = True
            self._cond.notify_all()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until nothing is pending or rendering. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(
                lambda: not self._has_pending and not self._rendering, timeout
            )

    def _run_loop(self) -> None:
        """Runs in the render thread: wait for a snapshot -> render -> repeat."""
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._has_pending or not self._running)
                if not self._running:
                    self._cond.notify_all()
                    return
                snapshot = self._pending
                self._pending = None
                self._has_pending = False
                self._rendering = True
            try:
                self._render(snapshot)
                self.render_count += 1
            except RenderError as e:
                logger.error("Render failed: %s", e)
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected error while rendering %d entries", len(snapshot))
            finally:
                with self._cond:
                    self._rendering = False
                    self._cond.notify_all()
