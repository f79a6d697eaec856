"""Polling-based file watching for pollwatch.

Snapshots of path -> modification time are taken every interval and diffed
against the last accepted snapshot. Each change is reported through a
callback, one per poll.
"""

from pollwatch.watching.controller import (
    FileWatcher,
    IllegalStateError,
    OnChange,
    WatchState,
)
from pollwatch.watching.events import ABSENT, ChangeEvent, EventKind, Snapshot
from pollwatch.watching.indicator import NullIndicator, ProgressIndicator, TerminalSpinner
from pollwatch.watching.patterns import resolve_patterns, stat_mtime
from pollwatch.watching.snapshot import SnapshotEngine

__all__ = [
    "ABSENT",
    "ChangeEvent",
    "EventKind",
    "FileWatcher",
    "IllegalStateError",
    "NullIndicator",
    "OnChange",
    "ProgressIndicator",
    "Snapshot",
    "SnapshotEngine",
    "TerminalSpinner",
    "WatchState",
    "resolve_patterns",
    "stat_mtime",
]
