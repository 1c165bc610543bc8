"""
Final tags for locally built images.
"""
import logging
from typing import IO

from ...core.errors import BuildError
from ...images.daemon import LocalDaemon

logger = logging.getLogger(__name__)


class BuildCounter:
    """Per-builder sequence used to disambiguate local tags"""

    def __init__(self, start: int = 0):
        self.value = start

    def next(self) -> int:
        self.value += 1
        return self.value


async def tag_locally(
    daemon: LocalDaemon,
    image_name: str,
    image_id: str,
    counter: BuildCounter
) -> str:
    """Tag a built image as <image_name>:<n> so successive builds never collide"""
    tag = f"{image_name}:{counter.next()}"
    try:
        await daemon.tag(image_id, tag)
    except Exception as e:
        raise BuildError(image_name, "tag", str(e)) from e
    logger.debug(f"Tagged {image_id} as {tag}")
    return tag


async def push_and_resolve(
    daemon: LocalDaemon,
    out: IO[str],
    image_name: str,
    image_id: str,
    tag: str
) -> str:
    """
    Push the image and return <tag>@<digest>, the reference that pins the
    exact bits that were just built.
    """
    try:
        digest = await daemon.push(out, image_id, tag)
    except Exception as e:
        raise BuildError(image_name, "push", str(e)) from e

    reference = f"{tag}@{digest}"
    out.write(f"Pushed {reference}\n")
    return reference
