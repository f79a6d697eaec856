"""Tests for progress indicators."""

from __future__ import annotations

import io

from rich.console import Console

from pollwatch.watching import NullIndicator, TerminalSpinner


def test_null_indicator_accepts_calls() -> None:
    indicator = NullIndicator()
    indicator.update("Watching")
    indicator.stop()


def test_terminal_spinner_tracks_label() -> None:
    console = Console(file=io.StringIO(), force_terminal=False)
    spinner = TerminalSpinner(console)

    spinner.update("Watching")
    assert spinner.label == "Watching"
    spinner.update("Watching")
    spinner.update("Pausing")
    assert spinner.label == "Pausing"

    spinner.stop()
    assert spinner.label is None
    spinner.stop()
