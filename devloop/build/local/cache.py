"""
Makes cache-from images available to the local daemon.
"""
import logging
from typing import List

from ...images.daemon import LocalDaemon
from ...warnings import Warner

logger = logging.getLogger(__name__)


async def resolve_cache_from(daemon: LocalDaemon, cache_from: List[str], warner: Warner):
    """
    Pull every cache-from image missing from the local store.

    The cache only speeds builds up, so failures here never fail the build:
    they are reported through the warner and the next image is tried.
    """
    for image in cache_from:
        try:
            image_id = await daemon.image_id(image)
        except Exception as e:
            logger.debug(f"Inspecting cache-from image {image} failed: {e}")
            warner("Cache-From image couldn't be inspected: %s", image)
            continue

        if image_id:
            logger.debug(f"Cache-from image already present: {image}")
            continue

        try:
            await daemon.pull(image)
        except Exception as e:
            logger.debug(f"Pulling cache-from image {image} failed: {e}")
            warner("Cache-From image couldn't be pulled: %s", image)
