"""
Change detection for watched dependency files.
"""

from .snapshot import FileMap, DependencyProvider, stat
from .changes import ChangeSet, diff
from .triggers import Trigger, PollTrigger, FileSystemEventTrigger, new_trigger
from .watcher import Watcher, WatchState

__all__ = [
    'FileMap',
    'DependencyProvider',
    'stat',
    'ChangeSet',
    'diff',
    'Trigger',
    'PollTrigger',
    'FileSystemEventTrigger',
    'new_trigger',
    'Watcher',
    'WatchState',
]
