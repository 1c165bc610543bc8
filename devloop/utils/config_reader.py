"""
Reads configuration files from disk or over HTTP.
"""
import logging
from pathlib import Path

import aiohttp

logger = logging.getLogger(__name__)


def is_url(filename: str) -> bool:
    return filename.startswith("http://") or filename.startswith("https://")


async def download(url: str, timeout: float = 10.0) -> bytes:
    """Fetch a remote configuration file"""
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.read()


async def read_configuration(filename: str) -> bytes:
    """
    Read a configuration file.

    URLs are downloaded. A missing local "*.yaml" file falls back to the
    same name with a ".yml" extension.

    Raises:
        FileNotFoundError: If neither file exists
    """
    if is_url(filename):
        logger.debug(f"Downloading configuration from {filename}")
        return await download(filename)

    path = Path(filename)
    try:
        return path.read_bytes()
    except FileNotFoundError:
        if path.suffix != ".yaml":
            raise
        fallback = path.with_suffix(".yml")
        if not fallback.exists():
            raise
        logger.debug(f"{filename} not found, reading {fallback}")
        return fallback.read_bytes()
