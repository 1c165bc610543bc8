"""
Computes file changes between two snapshots.
"""
from dataclasses import dataclass, field
from typing import List

from .snapshot import FileMap


@dataclass
class ChangeSet:
    """Files added, modified and deleted between two snapshots"""
    added: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)

    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.deleted)

    def __bool__(self) -> bool:
        return self.has_changes()

    def __len__(self) -> int:
        return len(self.added) + len(self.modified) + len(self.deleted)

    def summary(self) -> str:
        return (
            f"added={len(self.added)}, modified={len(self.modified)}, "
            f"deleted={len(self.deleted)}"
        )


def diff(previous: FileMap, current: FileMap) -> ChangeSet:
    """
    Diff two snapshots. Neither snapshot is modified.

    Order follows the iteration order of the snapshots, it is not sorted.
    """
    changes = ChangeSet()

    for path, mtime in current.items():
        prev_mtime = previous.get(path)
        if prev_mtime is None:
            changes.added.append(path)
        elif prev_mtime != mtime:
            changes.modified.append(path)

    for path in previous:
        if path not in current:
            changes.deleted.append(path)

    return changes
