"""Snapshot diffing.

A snapshot maps every watched path to its modification time. The engine
keeps the last accepted snapshot and compares candidates against it, one
change at a time.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from pollwatch.logging import TRACE, get_logger
from pollwatch.watching.events import ABSENT, ChangeEvent, EventKind, Snapshot
from pollwatch.watching.patterns import PatternSet, resolve_patterns, stat_mtime

log = get_logger("watching.snapshot")


class SnapshotEngine:
    """Owns the watch set and the last accepted snapshot.

    Patterns are resolved again on every snapshot, so files that start
    matching after construction are picked up. On very large trees this
    means a full glob per poll.

    The baseline is only changed by detect_change() and reset(), both under
    the same lock, so control calls from other threads are safe.
    """

    def __init__(
        self,
        patterns: PatternSet,
        exclude: PatternSet = None,
        *,
        resolver: Callable[..., list[str]] = resolve_patterns,
        stat: Callable[[str], float | None] = stat_mtime,
    ) -> None:
        """Initialize the engine and take the initial baseline.

        Args:
            patterns: Pattern or patterns to watch
            exclude: Pattern or patterns subtracted from the watch set
            resolver: Expands patterns to concrete paths
            stat: Returns a path's mtime, or ABSENT
        """
        self._patterns = patterns
        self._exclude = exclude
        self._resolve = resolver
        self._stat = stat
        self._lock = threading.RLock()
        self.filenames: list[str] = []
        self._last: Snapshot = self.take_snapshot()

    def take_snapshot(self) -> Snapshot:
        """Resolve patterns, drop excluded paths and stat what remains."""
        filenames = self._resolve(self._patterns)
        if self._exclude:
            excluded = set(self._resolve(self._exclude))
            filenames = [name for name in filenames if name not in excluded]
        self.filenames = filenames
        snapshot = {name: self._stat(name) for name in filenames}
        log.log(TRACE, "Snapshot of %d paths", len(snapshot))
        return snapshot

    def detect_change(self, candidate: Snapshot | None = None) -> ChangeEvent | None:
        """Compare ``candidate`` with the baseline and report one change.

        Forward changes (new or re-stamped paths) win over deletions. The
        reported path is written into the baseline immediately; any other
        differences stay pending for the next call.

        Args:
            candidate: Snapshot to compare; a fresh one is taken if None

        Returns:
            The first change found, or None if the snapshots agree
        """
        with self._lock:
            snapshot = candidate if candidate is not None else self.take_snapshot()
            last = self._last

            forward = [
                (path, mtime)
                for path, mtime in snapshot.items()
                if path not in last or last[path] != mtime
            ]

            for path, mtime in forward:
                previous = last.get(path, ABSENT)
                if mtime is ABSENT:
                    if previous is ABSENT:
                        # vanished between glob and stat, never seen
                        continue
                    kind = EventKind.DELETED
                elif previous is ABSENT:
                    kind = EventKind.NEW
                else:
                    kind = EventKind.CHANGED
                last[path] = mtime
                return ChangeEvent(path, kind)

            forward_names = {path for path, _ in forward}
            for path, mtime in last.items():
                if path in snapshot and snapshot[path] == mtime:
                    continue
                if path in forward_names or mtime is ABSENT:
                    continue
                del last[path]
                return ChangeEvent(path, EventKind.DELETED)

            return None

    def reset(self, snapshot: Snapshot | None = None) -> None:
        """Replace the baseline, discarding every pending difference."""
        with self._lock:
            self._last = dict(snapshot) if snapshot is not None else self.take_snapshot()

    def last_found_filenames(self) -> list[str]:
        """Paths in the baseline that existed when last seen."""
        with self._lock:
            return [path for path, mtime in self._last.items() if mtime is not ABSENT]

    @property
    def baseline(self) -> Snapshot:
        """Copy of the last accepted snapshot."""
        with self._lock:
            return dict(self._last)
