"""Shared test helpers for the watching tests."""

from __future__ import annotations

import fnmatch
import os
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pollwatch.watching import ABSENT, FileWatcher


class FakeFS:
    """In-memory resolver/stat pair for SnapshotEngine."""

    def __init__(self, **files: float) -> None:
        self.files: dict[str, float] = dict(files)

    def resolve(self, patterns: Any) -> list[str]:
        if patterns is None:
            return []
        if isinstance(patterns, str):
            patterns = [patterns]
        found: list[str] = []
        for pattern in patterns:
            for name in self.files:
                if fnmatch.fnmatch(name, pattern) and name not in found:
                    found.append(name)
        return found

    def stat(self, path: str) -> float | None:
        return self.files.get(path, ABSENT)


def touch(path: Path, mtime: float | None = None) -> Path:
    """Create ``path`` if needed and move its mtime forward.

    Without ``mtime`` the new time is ten seconds past both now and the
    current mtime, so the change is visible regardless of timestamp
    resolution.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.write_text("", encoding="utf-8")
    if mtime is None:
        mtime = max(time.time(), path.stat().st_mtime) + 10
    os.utime(path, (mtime, mtime))
    return path


class Recorder:
    """Thread-safe on_change callback that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self._cond = threading.Condition()

    def __call__(self, path: str, kind: Any) -> None:
        with self._cond:
            self.calls.append((path, kind))
            self._cond.notify_all()

    def wait_for(self, count: int, timeout: float = 5.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self.calls) >= count, timeout)


class WatchThread:
    """Runs FileWatcher.watch() on a background thread."""

    def __init__(self, watcher: FileWatcher, on_change: Callable[..., None], interval: float) -> None:
        self.watcher = watcher
        self.error: BaseException | None = None
        self.thread = threading.Thread(
            target=self._run, args=(on_change, interval), name="watch-test", daemon=True
        )

    def _run(self, on_change: Callable[..., None], interval: float) -> None:
        try:
            self.watcher.watch(on_change, interval=interval)
        except BaseException as e:  # re-raised by join()
            self.error = e

    def start(self) -> WatchThread:
        self.thread.start()
        deadline = time.monotonic() + 5.0
        while not self.watcher.is_watching() and self.thread.is_alive():
            if time.monotonic() > deadline:
                break
            time.sleep(0.005)
        return self

    def join(self, timeout: float = 5.0) -> None:
        self.thread.join(timeout)
        assert not self.thread.is_alive(), "watch() did not return"
        if self.error is not None:
            raise self.error

    def stop(self) -> None:
        self.watcher.stop()
        self.join()
