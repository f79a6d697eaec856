"""Event and snapshot types shared by the watching package."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Snapshot value for a watched path that does not currently exist
ABSENT = None

# path -> st_mtime, or ABSENT
Snapshot = dict[str, float | None]


class EventKind(Enum):
    """Kinds of change reported to callbacks."""

    NEW = "new"
    CHANGED = "changed"
    DELETED = "deleted"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChangeEvent:
    """A single detected change."""

    path: str
    kind: EventKind
