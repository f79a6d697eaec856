"""pollwatch - detect file changes by polling modification times."""

from pollwatch.watching import (
    ChangeEvent,
    EventKind,
    FileWatcher,
    IllegalStateError,
    SnapshotEngine,
    WatchState,
)

__version__ = "0.5.3"

__all__ = [
    "ChangeEvent",
    "EventKind",
    "FileWatcher",
    "IllegalStateError",
    "SnapshotEngine",
    "WatchState",
    "__version__",
]
