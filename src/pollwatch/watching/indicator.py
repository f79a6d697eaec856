"""Progress indicators for the watch loop.

The controller calls ``update(label)`` once per loop iteration and ``stop()``
when watching ends. Indicators are purely cosmetic.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.status import Status


class ProgressIndicator(Protocol):
    """Observer notified on every loop iteration."""

    def update(self, label: str) -> None: ...

    def stop(self) -> None: ...


class NullIndicator:
    """Indicator that shows nothing."""

    def update(self, label: str) -> None:
        pass

    def stop(self) -> None:
        pass


class TerminalSpinner:
    """Spinner on stderr, rendered by rich."""

    def __init__(self, console: Console | None = None, spinner: str = "line") -> None:
        self._console = console or Console(stderr=True)
        self._spinner = spinner
        self._status: Status | None = None
        self.label: str | None = None

    def update(self, label: str) -> None:
        if label == self.label and self._status is not None:
            return
        self.label = label
        if self._status is None:
            self._status = Status(label, console=self._console, spinner=self._spinner)
            self._status.start()
        else:
            self._status.update(label)

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None
        self.label = None
