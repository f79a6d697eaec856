"""Pattern expansion and timestamp lookup.

Patterns are plain paths or glob expressions. A pattern naming an existing
directory expands to every file beneath it. Literal paths that do not exist
yet are kept so they can be watched until they appear.
"""

from __future__ import annotations

import glob
import os
from collections.abc import Iterable
from typing import Union

from pollwatch.watching.events import ABSENT

PathPattern = Union[str, os.PathLike]
PatternSet = Union[PathPattern, Iterable[PathPattern], None]


def expand_path(pattern: str) -> str:
    """Expand a leading ``~``; everything else is left to glob."""
    if pattern.startswith("~"):
        return os.path.expanduser(pattern)
    return pattern


def full_depth(pattern: str) -> str:
    """Turn an existing directory into a recursive glob over its contents."""
    if os.path.isdir(pattern):
        return os.path.join(pattern, "**", "*")
    return pattern


def resolve_patterns(patterns: PatternSet) -> list[str]:
    """Resolve patterns to a de-duplicated list of file paths.

    Order is first-seen across patterns, sorted within each pattern.
    Directories are never returned.
    """
    if patterns is None:
        return []
    if isinstance(patterns, (str, os.PathLike)):
        patterns = [patterns]

    found: dict[str, None] = {}
    for pattern in patterns:
        expanded = full_depth(expand_path(os.fspath(pattern)))
        matches = sorted(glob.glob(expanded, recursive=True))
        if not matches and not glob.has_magic(expanded):
            matches = [expanded]
        for match in matches:
            if os.path.isdir(match):
                continue
            found.setdefault(os.path.normpath(match), None)
    return list(found)


def stat_mtime(path: str) -> float | None:
    """Modification time of ``path``, or ABSENT if it cannot be stat'ed."""
    try:
        return os.stat(path).st_mtime
    except OSError:
        return ABSENT
