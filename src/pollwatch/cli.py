"""Command-line interface for pollwatch."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from pollwatch import __version__
from pollwatch.config import Config, load_config
from pollwatch.logging import get_logger, setup_logging
from pollwatch.watching import EventKind, FileWatcher, OnChange

log = get_logger("cli")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pollwatch",
        description="Watch files and directories for changes by polling modification times",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "patterns",
        nargs="+",
        help="Files, directories or glob patterns to watch",
    )
    parser.add_argument(
        "-x", "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Pattern to exclude from the watch set (can be repeated)",
    )
    parser.add_argument(
        "-i", "--interval",
        type=float,
        help="Seconds between polls (default: 0.5)",
    )
    parser.add_argument(
        "-d", "--dontwait",
        action="store_true",
        help="Fire once immediately before the first poll",
    )
    parser.add_argument(
        "-s", "--spinner",
        action="store_true",
        help="Show a progress spinner on stderr",
    )
    parser.add_argument(
        "-l", "--list",
        action="store_true",
        help="Print the files that would be watched and exit",
    )
    parser.add_argument(
        "-e", "--exec",
        dest="command",
        metavar="COMMAND",
        help="Shell command to run per change (POLLWATCH_PATH and POLLWATCH_EVENT are set)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra config file merged over system, user and project config",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    return parser


def apply_arguments(config: Config, parsed: argparse.Namespace) -> Config:
    """Layer command-line flags over the loaded config."""
    watch = config.watch
    if parsed.interval is not None:
        watch.interval = parsed.interval
    if parsed.exclude:
        watch.exclude = [*watch.exclude, *parsed.exclude]
    if parsed.dontwait:
        watch.dontwait = True
    if parsed.spinner:
        watch.spinner = True
    if parsed.verbose:
        config.logging.verbose = min(2 + parsed.verbose, 4)
    return config


def make_handler(console: Console, command: str | None = None) -> OnChange:
    """Build the on_change callback: print each event, or run ``command``."""

    def on_change(path: str, kind: EventKind | None) -> None:
        if command is None:
            if kind is not None:
                console.print(f"[bold]{kind}[/bold] {escape(path)}")
            return
        run_command(command, path, kind)

    return on_change


def run_command(command: str, path: str, kind: EventKind | None) -> int:
    """Run ``command`` through the shell with the event in its environment."""
    env = dict(os.environ)
    env["POLLWATCH_PATH"] = path
    env["POLLWATCH_EVENT"] = kind.value if kind is not None else ""
    result = subprocess.run(command, shell=True, env=env, check=False)
    if result.returncode != 0:
        log.warning("Command exited with status %d: %s", result.returncode, command)
    return result.returncode


def run_cli(args: Sequence[str], console: Console | None = None) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)
    console = console or Console()

    extra_files = [parsed.config] if parsed.config else []
    config = apply_arguments(load_config(root=Path.cwd(), extra_files=extra_files), parsed)
    setup_logging(config.logging)

    watcher = FileWatcher.from_config(parsed.patterns, config.watch)

    if parsed.list:
        for filename in watcher.filenames:
            console.print(escape(filename), highlight=False)
        return 0

    watcher.watch(make_handler(console, parsed.command), interval=config.watch.interval)
    return 0


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))
