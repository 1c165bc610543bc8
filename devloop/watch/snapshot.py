"""
Point-in-time snapshots of the files an artifact depends on.
"""
import logging
import os
from typing import Callable, Dict, List

# Absolute path -> last modification time
FileMap = Dict[str, float]

DependencyProvider = Callable[[], List[str]]

logger = logging.getLogger(__name__)


def stat(deps: DependencyProvider) -> FileMap:
    """
    Record the modification time of every current dependency.

    The provider is queried on every call since the dependency set can change
    between polls. Errors raised by the provider propagate. A path that
    disappears between listing and stat is skipped.

    Args:
        deps: Callable returning the current list of dependency paths

    Returns:
        FileMap of path to mtime
    """
    paths = deps()

    state: FileMap = {}
    for path in paths:
        try:
            info = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug(f"Skipping vanished dependency: {path}")
            continue
        state[path] = info.st_mtime

    return state
