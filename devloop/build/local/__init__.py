"""
Builds artifacts with the local docker daemon.
"""

from .builder import LocalBuilder, is_local_cluster
from .cache import resolve_cache_from
from .tagging import BuildCounter, tag_locally, push_and_resolve

__all__ = [
    'LocalBuilder',
    'is_local_cluster',
    'resolve_cache_from',
    'BuildCounter',
    'tag_locally',
    'push_and_resolve',
]
