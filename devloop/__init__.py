"""
devloop - incremental build-and-watch loop for container images

Main modules:
- core: Artifact models, enums and errors
- watch: File snapshots, change detection and the watch loop
- images: Local docker daemon access
- build: Local builder with cache-from resolution, tagging and pushing
- config: Configuration loading
- utils: Path, expansion and config reading helpers
"""

from .core.models import ArtifactSpec, ArtifactType, DockerArtifact, BuildResult, ImageTags
from .core.errors import BuildError, UnknownArtifactTypeError
from .watch.changes import ChangeSet, diff
from .watch.snapshot import FileMap, stat
from .watch.watcher import Watcher
from .build.local.builder import LocalBuilder
from .dev import DevLoop

__version__ = "0.1.0"
__all__ = [
    'ArtifactSpec',
    'ArtifactType',
    'DockerArtifact',
    'BuildResult',
    'ImageTags',
    'BuildError',
    'UnknownArtifactTypeError',
    'ChangeSet',
    'diff',
    'FileMap',
    'stat',
    'Watcher',
    'LocalBuilder',
    'DevLoop',
]
