"""
Entry store: a pure reducer over the entry collection plus the single-writer cell that holds it.

The reducer maps (entries, event) to a new tuple and never mutates its input. EntryStore
serializes every write behind one lock, catches capture/reducer failures at that boundary,
and hands each new snapshot to its listeners in write order.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable

from core.analyzer import FrameAnalyzer
from core.errors import CaptureError, IndexOutOfRange, UnknownEvent
from core.models import (
    AddItem,
    CaptureParams,
    DeleteItem,
    Entry,
    EntryCollection,
    ToggleStatus,
)

logger = logging.getLogger(__name__)

# Builds a fully analyzed entry or raises; never returns a partial one
EntryFactory = Callable[[str, CaptureParams], Entry]
Listener = Callable[[EntryCollection], None]


def resolve_position(entries: EntryCollection, event: ToggleStatus | DeleteItem) -> int:
    """
    Current position addressed by an event. A stable entry_id wins over idx.
    Positional idx is not stable across deletes: after deleting k, idx k names the old k+1.
    """
    if event.entry_id is not None:
        for pos, entry in enumerate(entries):
            if entry.entry_id == event.entry_id:
                return pos
        raise IndexOutOfRange(f"no entry with id {event.entry_id}")
    idx = event.idx
    if idx is None or not 0 <= idx < len(entries):
        raise IndexOutOfRange(f"index {idx} outside 0..{len(entries) - 1}")
    return idx


def reduce(entries: EntryCollection, event: object, make_entry: EntryFactory) -> EntryCollection:
    """Apply one event and return the next collection."""
    if isinstance(event, ToggleStatus):
        pos = resolve_position(entries, event)
        return entries[:pos] + (entries[pos].toggled(),) + entries[pos + 1:]
    if isinstance(event, DeleteItem):
        pos = resolve_position(entries, event)
        return entries[:pos] + entries[pos + 1:]
    if isinstance(event, AddItem):
        return entries + (make_entry(event.label, event.params),)
    raise UnknownEvent(f"no handler for event {event!r}")


class EntryStore:
    """Holds the entry collection; the only place it is ever replaced."""

    def __init__(
        self,
        analyzer: FrameAnalyzer,
        entries: EntryCollection = (),
    ) -> None:
        self._analyzer = analyzer
        self._entries: EntryCollection = tuple(entries)
        self._lock = threading.Lock()
        self._ids = itertools.count(max((e.entry_id for e in self._entries), default=-1) + 1)
        self._listeners: list[Listener] = []

    @property
    def entries(self) -> EntryCollection:
        return self._entries

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _make_entry(self, label: str, params: CaptureParams) -> Entry:
        analysis = self._analyzer.analyze(params)
        return Entry(entry_id=next(self._ids), label=label, params=params, analysis=analysis)

    def dispatch(self, event: object) -> EntryCollection:
        """
        Apply `event`. Failures are logged and leave the collection untouched
        (the same tuple object). Returns the collection after the event.
        """
        with self._lock:
            before = self._entries
            try:
                after = reduce(before, event, self._make_entry)
            except UnknownEvent as e:
                logger.warning("Unhandled event: %s", e)
                return before
            except IndexOutOfRange as e:
                logger.warning("Ignoring %s: %s", type(event).__name__, e)
                return before
            except CaptureError as e:
                logger.error("Capture failed, no entry added: %s: %s", type(e).__name__, e)
                return before
            self._entries = after
            logger.debug("%s applied: %d -> %d entries", type(event).__name__, len(before), len(after))
            # Still under the lock so listeners see snapshots in write order; they must not block
            for listener in list(self._listeners):
                listener(after)
        return after
