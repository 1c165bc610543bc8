"""
Turns the artifacts section of the configuration into build inputs.
"""
import fnmatch
import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from ..core.models import ArtifactSpec, ImageTags
from ..utils.expand import expand
from ..utils.paths import abs_file, expand_paths_glob, is_hidden_dir, is_hidden_file, non_empty_lines
from ..watch.snapshot import DependencyProvider
from .global_config_loader import GlobalConfig

logger = logging.getLogger(__name__)

DEFAULT_TAG_TEMPLATE = "${IMAGE_NAME}:latest"


def load_artifacts(config: GlobalConfig, base_dir: Union[str, Path] = ".") -> List[ArtifactSpec]:
    """
    Build ArtifactSpecs from the configuration.
    Build contexts are resolved against base_dir.

    Raises:
        ValueError: If an image is missing or declared twice
    """
    artifacts = []
    seen = set()

    for data in config.artifacts:
        artifact = ArtifactSpec.from_dict(data)
        if not artifact.image_name:
            raise ValueError(f"Artifact without image name: {data}")
        if artifact.image_name in seen:
            raise ValueError(f"Duplicate artifact: {artifact.image_name}")
        seen.add(artifact.image_name)

        artifact.workspace = str(Path(base_dir) / artifact.workspace)
        artifacts.append(artifact)

    logger.info(f"Loaded {len(artifacts)} artifacts")
    return artifacts


def generate_tags(artifacts: List[ArtifactSpec], template: str = DEFAULT_TAG_TEMPLATE) -> ImageTags:
    """Base tag of every artifact, from a $IMAGE_NAME template"""
    return {
        artifact.image_name: expand(template, "IMAGE_NAME", artifact.image_name)
        for artifact in artifacts
    }


def _is_hidden(relative: str) -> bool:
    parts = Path(relative).parts
    return any(is_hidden_dir(part) for part in parts[:-1]) or is_hidden_file(parts[-1])


def _is_ignored(relative: str, patterns: List[str]) -> bool:
    ignored = False
    for pattern in patterns:
        negate = pattern.startswith('!')
        if negate:
            pattern = pattern[1:]
        pattern = pattern.strip('/')

        candidate = relative
        while candidate:
            if fnmatch.fnmatch(candidate, pattern):
                ignored = not negate
                break
            candidate = os.path.dirname(candidate)

    return ignored


def read_dockerignore(workspace: Union[str, Path]) -> List[str]:
    """Patterns from the workspace's .dockerignore, comments dropped"""
    path = Path(workspace) / ".dockerignore"
    if not path.exists():
        return []
    return [
        line.strip() for line in non_empty_lines(path.read_bytes())
        if line.strip() and not line.strip().startswith('#')
    ]


def docker_dependencies(artifact: ArtifactSpec) -> DependencyProvider:
    """
    Dependency provider for a docker artifact: the Dockerfile plus every
    watched file in the build context that is neither hidden nor excluded
    by .dockerignore. Everything is recomputed on each call.
    """
    def deps() -> List[str]:
        workspace = artifact.workspace
        dockerfile = abs_file(workspace, artifact.artifact_type.docker_artifact.dockerfile)
        ignore = read_dockerignore(workspace)

        files = {dockerfile}
        for path in expand_paths_glob(workspace, artifact.watch_paths):
            relative = os.path.relpath(path, workspace)
            if _is_hidden(relative) or _is_ignored(relative, ignore):
                continue
            files.add(os.path.abspath(path))

        return sorted(files)

    return deps


def dependencies_for(artifacts: List[ArtifactSpec]) -> Dict[str, DependencyProvider]:
    """
    Dependency provider of every artifact, keyed by image name.
    Artifacts without a build method watch nothing.
    """
    providers = {}
    for artifact in artifacts:
        if artifact.artifact_type.docker_artifact is not None:
            providers[artifact.image_name] = docker_dependencies(artifact)
        else:
            providers[artifact.image_name] = lambda: []
    return providers
