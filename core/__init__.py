# Core: capture, analysis, entry store, render notifier

from core.analyzer import FrameAnalyzer
from core.notifier import SyncNotifier
from core.store import EntryStore

__all__ = ["FrameAnalyzer", "EntryStore", "SyncNotifier"]
