#!/usr/bin/env python3
"""
Example usage of the watcher and the local builder without the CLI.
"""

import asyncio
import logging
import sys
from pathlib import Path

from devloop.build.local.builder import LocalBuilder
from devloop.config.artifacts import docker_dependencies, generate_tags
from devloop.config.global_config_loader import BuildConfig
from devloop.core.models import ArtifactSpec, ArtifactType, DockerArtifact
from devloop.watch.triggers import PollTrigger
from devloop.watch.watcher import Watcher
from devloop.warnings import Collect


async def watch_example(workspace: Path):
    """Print every change under a workspace for ten seconds"""
    print("\n=== Watch Example ===")

    artifact = ArtifactSpec(
        image_name="gcr.io/example/web",
        workspace=str(workspace),
        artifact_type=ArtifactType(docker_artifact=DockerArtifact()),
    )

    def on_change(changes):
        print(f"Changed: {changes.summary()}")
        for path in changes.added + changes.modified + changes.deleted:
            print(f"   - {path}")

    watcher = Watcher(docker_dependencies(artifact), on_change, PollTrigger(interval=1.0))
    asyncio.get_running_loop().call_later(10, watcher.stop)
    await watcher.run()


async def build_example(workspace: Path):
    """Build one image without pushing it"""
    print("\n=== Build Example ===")

    artifact = ArtifactSpec(
        image_name="gcr.io/example/web",
        workspace=str(workspace),
        artifact_type=ArtifactType(
            docker_artifact=DockerArtifact(cache_from=["gcr.io/example/web:latest"])
        ),
    )
    warnings = Collect()
    builder = LocalBuilder.from_config(BuildConfig(push=False), warner=warnings)

    results = await builder.build(sys.stdout, generate_tags([artifact]), [artifact])

    for result in results:
        print(f"Built {result.image_name} as {result.tag}")
    for warning in warnings.warnings:
        print(f"Warning: {warning}")


async def main():
    logging.basicConfig(level=logging.INFO)
    workspace = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("./web")

    await build_example(workspace)
    await watch_example(workspace)


if __name__ == "__main__":
    asyncio.run(main())
