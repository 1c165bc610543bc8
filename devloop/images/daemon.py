"""
Local docker daemon used by the local builder.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import IO, Optional

import docker
from docker.errors import APIError, BuildError as DockerBuildError, ImageNotFound

from ..core.models import DockerArtifact


class LocalDaemon(ABC):
    """
    Capabilities the builder needs from the local image engine.
    Errors are only signalled by raising.
    """

    @abstractmethod
    async def image_id(self, ref: str) -> str:
        """Return the local image ID for ref, or "" if it is not present"""
        pass

    @abstractmethod
    async def pull(self, ref: str):
        """Pull ref into the local image store"""
        pass

    @abstractmethod
    async def build(
        self,
        out: IO[str],
        workspace: str,
        artifact: DockerArtifact,
        tag: str,
        prune: bool = True
    ) -> str:
        """Build an image and return its local image ID.
        Intermediate containers are removed unless prune is false."""
        pass

    @abstractmethod
    async def push(self, out: IO[str], image: str, tag: str) -> str:
        """Push image as tag and return the registry digest"""
        pass

    @abstractmethod
    async def tag(self, image: str, new_tag: str):
        """Add new_tag to a local image"""
        pass


def split_tag(ref: str):
    """Split a reference into (repository, tag), ignoring registry ports.
    Digest references are returned whole with no tag."""
    if '@' in ref:
        return ref, None
    name, sep, tag = ref.rpartition(':')
    if not sep or '/' in tag:
        return ref, None
    return name, tag


class DockerDaemon(LocalDaemon):
    """LocalDaemon backed by the docker SDK. Blocking calls run in a worker thread."""

    def __init__(self, client: Optional[docker.DockerClient] = None):
        self.client = client or docker.from_env()
        self.logger = logging.getLogger(__name__)

    async def image_id(self, ref: str) -> str:
        def _inspect():
            try:
                return self.client.images.get(ref).id
            except ImageNotFound:
                return ""

        return await asyncio.to_thread(_inspect)

    async def pull(self, ref: str):
        self.logger.info(f"Pulling {ref}")
        # the SDK splits tags and @digest suffixes itself
        await asyncio.to_thread(self.client.images.pull, ref)

    async def build(
        self,
        out: IO[str],
        workspace: str,
        artifact: DockerArtifact,
        tag: str,
        prune: bool = True
    ) -> str:
        def _build():
            image, logs = self.client.images.build(
                path=workspace,
                dockerfile=artifact.dockerfile,
                tag=tag or None,
                buildargs={k: v for k, v in artifact.build_args.items() if v is not None},
                cache_from=artifact.cache_from or None,
                target=artifact.target,
                rm=prune,
                forcerm=prune,
            )
            for chunk in logs:
                line = chunk.get('stream')
                if line:
                    out.write(line)
            return image.id

        try:
            return await asyncio.to_thread(_build)
        except DockerBuildError as e:
            raise RuntimeError(f"docker build: {e.msg}") from e

    async def push(self, out: IO[str], image: str, tag: str) -> str:
        repository, image_tag = split_tag(tag)
        if image_tag is None:
            image_tag = "latest"

        def _push():
            self.client.images.get(image).tag(repository, tag=image_tag)
            digest = None
            for chunk in self.client.images.push(
                repository, tag=image_tag, stream=True, decode=True
            ):
                if 'error' in chunk:
                    raise APIError(chunk['error'])
                status = chunk.get('status')
                if status:
                    out.write(f"{status}\n")
                aux = chunk.get('aux') or {}
                if aux.get('Digest'):
                    digest = aux['Digest']
            if not digest:
                raise RuntimeError(f"no digest returned when pushing {tag}")
            return digest

        return await asyncio.to_thread(_push)

    async def tag(self, image: str, new_tag: str):
        repository, image_tag = split_tag(new_tag)

        def _tag():
            if not self.client.images.get(image).tag(repository, tag=image_tag):
                raise RuntimeError(f"unable to tag {image} as {new_tag}")

        await asyncio.to_thread(_tag)


def new_local_daemon() -> LocalDaemon:
    """Connect to the daemon configured by the DOCKER_* environment variables"""
    return DockerDaemon(docker.from_env())
