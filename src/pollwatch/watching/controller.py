"""Watch loop and lifecycle control.

FileWatcher drives a SnapshotEngine in a polling loop on the caller's
thread. pause(), resume() and stop() may be called from any other thread;
the lifecycle state lives behind a lock and sleeps wait on a stop event so
stop() wakes the loop straight away.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum

from pollwatch.config.schema import DEFAULT_INTERVAL, WatchConfig
from pollwatch.logging import TRACE, VERBOSE, get_logger
from pollwatch.watching.events import EventKind, Snapshot
from pollwatch.watching.indicator import NullIndicator, ProgressIndicator, TerminalSpinner
from pollwatch.watching.patterns import PatternSet
from pollwatch.watching.snapshot import SnapshotEngine

log = get_logger("watching")

# Receives (path, kind); kind is None for the synthetic dontwait event
OnChange = Callable[[str, EventKind | None], None]


class WatchState(Enum):
    """Lifecycle state of a FileWatcher."""

    IDLE = "idle"  # Created, baseline taken, not yet watching
    WATCHING = "watching"  # Polling
    PAUSING = "pausing"  # Loop alive but not polling
    STOPPED = "stopped"  # Stop requested or loop finished


class IllegalStateError(RuntimeError):
    """A lifecycle call was made in a state that does not allow it."""


class FileWatcher:
    """Polls a set of files and reports each change through a callback.

    Example:
        watcher = FileWatcher(["src/**/*.py", "README.md"], exclude="src/gen")

        def on_change(path: str, kind: EventKind | None) -> None:
            print(kind, path)

        watcher.watch(on_change, interval=0.5)  # blocks until stop()
    """

    def __init__(
        self,
        patterns: PatternSet,
        exclude: PatternSet = None,
        *,
        dontwait: bool | None = None,
        spinner: bool | None = None,
        interval: float | None = None,
        indicator: ProgressIndicator | None = None,
        config: WatchConfig | None = None,
    ) -> None:
        """Initialize the watcher and take the initial snapshot.

        Args:
            patterns: Files, directories or globs to watch
            exclude: Patterns removed from the watch set
            dontwait: Call on_change("", None) once before the first poll
            spinner: Show a terminal spinner while watching
            interval: Poll interval; when > 0 it overrides watch()'s argument
            indicator: Custom progress observer (takes precedence over spinner)
            config: Defaults for any option not passed explicitly
        """
        if config is not None:
            if exclude is None:
                exclude = config.exclude or None
            if dontwait is None:
                dontwait = config.dontwait
            if spinner is None:
                spinner = config.spinner
            if interval is None:
                interval = config.interval

        self._engine = SnapshotEngine(patterns, exclude)
        self._dontwait = bool(dontwait)
        self._interval = interval
        if indicator is not None:
            self._indicator: ProgressIndicator = indicator
        elif spinner:
            self._indicator = TerminalSpinner()
        else:
            self._indicator = NullIndicator()

        self._state = WatchState.IDLE
        self._state_lock = threading.Lock()
        self._looping = False
        self._stop_event = threading.Event()
        self._sleep = interval if interval and interval > 0 else DEFAULT_INTERVAL
        self._on_change: OnChange | None = None
        self._end_snapshot: Snapshot | None = None

    @classmethod
    def from_config(
        cls,
        patterns: PatternSet,
        config: WatchConfig,
        **overrides: object,
    ) -> FileWatcher:
        """Build a watcher from a WatchConfig; keyword overrides win."""
        return cls(patterns, config=config, **overrides)  # type: ignore[arg-type]

    @property
    def state(self) -> WatchState:
        with self._state_lock:
            return self._state

    @property
    def interval(self) -> float:
        """Seconds slept between polls."""
        return self._sleep

    @property
    def filenames(self) -> list[str]:
        """Watch set resolved by the most recent snapshot."""
        return list(self._engine.filenames)

    @property
    def engine(self) -> SnapshotEngine:
        return self._engine

    def is_watching(self) -> bool:
        return self.state in (WatchState.WATCHING, WatchState.PAUSING)

    def is_paused(self) -> bool:
        return self.state is WatchState.PAUSING

    def last_found_filenames(self) -> list[str]:
        """Paths present in the last accepted snapshot."""
        return self._engine.last_found_filenames()

    def watch(self, on_change: OnChange, interval: float = DEFAULT_INTERVAL) -> None:
        """Poll until stop() is called, then drain remaining changes.

        Blocks the calling thread. A KeyboardInterrupt ends the loop early
        and returns without finalizing; call stop() and finalize() to clean
        up in that case.

        Args:
            on_change: Called with (path, kind) for every detected change
            interval: Seconds between polls, unless set at construction

        Raises:
            IllegalStateError: If this watcher is already watching
        """
        with self._state_lock:
            if self._state in (WatchState.WATCHING, WatchState.PAUSING):
                raise IllegalStateError("watch() called while already watching")
            if self._interval and self._interval > 0:
                self._sleep = self._interval
            else:
                self._sleep = interval
            self._state = WatchState.WATCHING
            self._looping = True
            self._stop_event.clear()

        self._on_change = on_change
        self._end_snapshot = None
        log.info("Watching %d files (interval: %.2fs)", len(self._engine.filenames), self._sleep)

        try:
            try:
                if self._dontwait:
                    on_change("", None)
                self._run(on_change)
            except KeyboardInterrupt:
                log.info("Watch interrupted")
                return
            except BaseException:
                self._mark_stopped()
                raise
            self._end_snapshot = self._engine.take_snapshot()
            self.finalize(on_change)
        finally:
            with self._state_lock:
                self._looping = False
            self._indicator.stop()
        log.info("Watch stopped")

    def _run(self, on_change: OnChange) -> None:
        boundary_taken = False
        while not self._stop_event.is_set():
            with self._state_lock:
                paused = self._state is WatchState.PAUSING
                # resume() clears the boundary under the same lock
                if paused and not boundary_taken:
                    self._end_snapshot = self._engine.take_snapshot()
                    boundary_taken = True
            if paused:
                self._indicator.update("Pausing")
                self._stop_event.wait(self._sleep)
                continue
            boundary_taken = False

            event = self._engine.detect_change()
            if event is None:
                log.log(TRACE, "No changes")
                self._indicator.update("Watching")
                self._stop_event.wait(self._sleep)
                continue

            log.log(VERBOSE, "%s: %s", event.kind, event.path)
            on_change(event.path, event.kind)

    def pause(self) -> None:
        """Stop polling until resume().

        Blocks for one interval so the loop is in its pause branch on return.

        Raises:
            IllegalStateError: If the watcher is not watching
        """
        with self._state_lock:
            if self._state is WatchState.PAUSING:
                return
            if self._state is not WatchState.WATCHING:
                raise IllegalStateError("Can't pause unless watch() was first called")
            self._state = WatchState.PAUSING
        log.debug("Pausing")
        self._show("Initiating pause")
        self._stop_event.wait(self._sleep)

    def resume(self) -> None:
        """Resume polling from a fresh baseline.

        Changes made while paused are not reported, and the boundary taken
        when the pause began is discarded. Blocks for one interval so the
        loop is polling again on return.

        Raises:
            IllegalStateError: Unless the watcher is watching and paused
        """
        with self._state_lock:
            if self._state is not WatchState.PAUSING:
                raise IllegalStateError("Can't resume unless watch() and pause() were first called")
            self._engine.reset()
            self._end_snapshot = None
            self._state = WatchState.WATCHING
        log.debug("Resuming")
        self._show("Resuming")
        self._stop_event.wait(self._sleep)

    def stop(self) -> None:
        """End the watch; watch() finalizes and returns. Does not block."""
        log.debug("Stopping")
        # Label first: once the event is set the loop may stop the indicator
        self._show("Stopping")
        self._mark_stopped()

    def _mark_stopped(self) -> None:
        with self._state_lock:
            self._state = WatchState.STOPPED
            self._stop_event.set()

    def _show(self, label: str) -> None:
        # Outside watch() nothing would stop the indicator again
        with self._state_lock:
            looping = self._looping
        if looping:
            self._indicator.update(label)

    def finalize(self, on_change: OnChange | None = None) -> None:
        """Deliver every change pending in the boundary snapshot.

        Diffs against the snapshot captured when the loop paused or exited,
        so changes made during the drain do not extend it.

        Args:
            on_change: Callback to use; defaults to the one given to watch()

        Raises:
            IllegalStateError: If no callback is available
        """
        callback = on_change or self._on_change
        if callback is None:
            raise IllegalStateError("finalize() needs a callback when watch() was never called")

        snapshot = self._end_snapshot
        if snapshot is None:
            snapshot = self._engine.take_snapshot()

        drained = 0
        while True:
            event = self._engine.detect_change(snapshot)
            if event is None:
                break
            self._show("Finalizing")
            log.log(VERBOSE, "%s: %s (finalize)", event.kind, event.path)
            callback(event.path, event.kind)
            drained += 1

        self._end_snapshot = None
        if drained:
            log.debug("Finalize delivered %d change(s)", drained)
