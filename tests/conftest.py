"""Root pytest configuration for all tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from pollwatch.config import reset_config
from pollwatch.logging import reset_logging
from pollwatch.watching import FileWatcher
from tests.utils import FakeFS, Recorder, WatchThread


@pytest.fixture(autouse=True)
def _clean_global_state(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Iterator[None]:
    """Isolate tests from the real environment and from each other."""
    for var in ("POLLWATCH_INTERVAL", "POLLWATCH_LOG", "POLLWATCH_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    # Keep a real user config out of the tests
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def fake_fs() -> FakeFS:
    return FakeFS()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def start_watch() -> Iterator[Callable[..., WatchThread]]:
    """Start watch() on a thread; anything still running is stopped at teardown."""
    started: list[WatchThread] = []

    def _start(
        watcher: FileWatcher,
        on_change: Callable[..., None],
        interval: float = 0.02,
    ) -> WatchThread:
        thread = WatchThread(watcher, on_change, interval).start()
        started.append(thread)
        return thread

    yield _start

    for thread in started:
        thread.watcher.stop()
        thread.thread.join(5.0)
