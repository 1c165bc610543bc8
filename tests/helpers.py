"""Shared test doubles for devloop tests."""

import os
from pathlib import Path
from typing import Dict, List, Optional

from devloop.core.models import ArtifactSpec, ArtifactType, DockerArtifact
from devloop.images.daemon import LocalDaemon
from devloop.watch.triggers import Trigger

TEST_DIGEST = "sha256:7368613235363a31e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class FakeDaemon(LocalDaemon):
    """In-memory LocalDaemon recording every call"""

    def __init__(
        self,
        tag_to_image_id: Optional[Dict[str, str]] = None,
        err_image_inspect: bool = False,
        err_image_pull: bool = False,
        err_image_build: bool = False,
        err_image_push: bool = False,
        err_image_tag: bool = False,
        digest: str = TEST_DIGEST
    ):
        self.tag_to_image_id = tag_to_image_id or {}
        self.err_image_inspect = err_image_inspect
        self.err_image_pull = err_image_pull
        self.err_image_build = err_image_build
        self.err_image_push = err_image_push
        self.err_image_tag = err_image_tag
        self.digest = digest
        self.inspected: List[str] = []
        self.pulled: List[str] = []
        self.built: List[str] = []
        self.pruned: List[bool] = []
        self.pushed: List[str] = []
        self.tagged: List[str] = []

    async def image_id(self, ref: str) -> str:
        self.inspected.append(ref)
        if self.err_image_inspect:
            raise RuntimeError("inspect failed")
        return self.tag_to_image_id.get(ref, "")

    async def pull(self, ref: str):
        self.pulled.append(ref)
        if self.err_image_pull:
            raise RuntimeError("pull failed")
        self.tag_to_image_id[ref] = f"pulled-{ref}"

    async def build(self, out, workspace, artifact, tag, prune=True):
        self.built.append(tag)
        self.pruned.append(prune)
        if self.err_image_build:
            raise RuntimeError("build failed")
        return f"image-{len(self.built)}"

    async def push(self, out, image, tag):
        if self.err_image_push:
            raise RuntimeError("push failed")
        self.pushed.append(self.digest)
        return self.digest

    async def tag(self, image, new_tag):
        if self.err_image_tag:
            raise RuntimeError("tag failed")
        self.tagged.append(new_tag)


def docker_artifact(image_name: str = "gcr.io/test/image", cache_from=None, workspace: str = ".") -> ArtifactSpec:
    """Create a docker ArtifactSpec"""
    return ArtifactSpec(
        image_name=image_name,
        workspace=workspace,
        artifact_type=ArtifactType(
            docker_artifact=DockerArtifact(cache_from=list(cache_from or []))
        )
    )


def touch(path: Path, mtime: float, content: str = "content") -> str:
    """Write a file with a fixed modification time"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return str(path)




class CountingTrigger(Trigger):
    """Ticks a fixed number of times, then closes"""

    def __init__(self, ticks: int, before_tick=None):
        self.ticks = ticks
        self.before_tick = before_tick
        self.count = 0
        self.closed = False

    async def wait(self) -> bool:
        if self.closed or self.count >= self.ticks:
            return False
        if self.before_tick:
            self.before_tick(self.count)
        self.count += 1
        return True

    def close(self):
        self.closed = True
