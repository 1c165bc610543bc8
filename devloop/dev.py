"""
Dev loop: build everything once, then rebuild the artifacts whose files change.
"""
import logging
from typing import Dict, IO, List, Optional, Set

from .build.local.builder import LocalBuilder
from .config.artifacts import dependencies_for
from .core.models import ArtifactSpec, BuildResult, ImageTags
from .watch.changes import ChangeSet
from .watch.triggers import Trigger
from .watch.watcher import Watcher


class DevLoop:
    """Connects the watcher to the local builder"""

    def __init__(
        self,
        builder: LocalBuilder,
        artifacts: List[ArtifactSpec],
        tags: ImageTags,
        out: IO[str],
        trigger: Optional[Trigger] = None
    ):
        self.builder = builder
        self.artifacts = artifacts
        self.tags = tags
        self.out = out
        self.trigger = trigger
        self.providers = dependencies_for(artifacts)
        self.artifact_deps: Dict[str, Set[str]] = {}
        self.previous_deps: Dict[str, Set[str]] = {}
        self.results: Dict[str, BuildResult] = {}
        self.watcher: Optional[Watcher] = None
        self.logger = logging.getLogger(__name__)

    def dependencies(self) -> List[str]:
        """Union of every artifact's dependencies, remembered per artifact"""
        current = {name: set(provider()) for name, provider in self.providers.items()}
        self.previous_deps = self.artifact_deps
        self.artifact_deps = current
        return sorted(set().union(*current.values()))

    def affected_artifacts(self, changes: ChangeSet) -> List[ArtifactSpec]:
        """Artifacts depending on a changed file, now or before the change"""
        paths = set(changes.added) | set(changes.modified) | set(changes.deleted)
        affected = []
        for artifact in self.artifacts:
            name = artifact.image_name
            deps = self.artifact_deps.get(name, set()) | self.previous_deps.get(name, set())
            if paths & deps:
                affected.append(artifact)
        return affected

    async def build(self, artifacts: List[ArtifactSpec]) -> List[BuildResult]:
        results = await self.builder.build(self.out, self.tags, artifacts)
        for result in results:
            self.results[result.image_name] = result
            self.out.write(f"{result.image_name} -> {result.tag}\n")
        return results

    async def on_change(self, changes: ChangeSet):
        affected = self.affected_artifacts(changes)
        if not affected:
            self.logger.debug("Changed files belong to no artifact")
            return

        names = ', '.join(a.image_name for a in affected)
        self.logger.info(f"Rebuilding {names}")
        await self.build(affected)

    async def run(self):
        """
        Build all artifacts, then watch until stop() is called.

        Raises:
            BuildError: If the initial build fails
        """
        await self.build(self.artifacts)

        self.watcher = Watcher(self.dependencies, self.on_change, self.trigger)
        await self.watcher.run()

    def stop(self):
        if self.watcher is not None:
            self.watcher.stop()
