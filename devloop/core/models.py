from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from .enums import BuildMethod


# Artifact name -> base tag, computed by the tag policy before a build
ImageTags = Dict[str, str]


@dataclass
class DockerArtifact:
    """Build an image from a Dockerfile with the local docker daemon"""
    dockerfile: str = "Dockerfile"
    build_args: Dict[str, Optional[str]] = field(default_factory=dict)
    cache_from: List[str] = field(default_factory=list)
    target: Optional[str] = None


@dataclass
class ArtifactType:
    """
    Build method of an artifact. Exactly one field is expected to be set;
    an instance with none set resolves to BuildMethod.UNKNOWN.
    """
    docker_artifact: Optional[DockerArtifact] = None

    def method(self) -> BuildMethod:
        if self.docker_artifact is not None:
            return BuildMethod.DOCKER
        return BuildMethod.UNKNOWN

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ArtifactType':
        data = data or {}
        docker = data.get('docker')
        if docker is None:
            return cls()
        return cls(docker_artifact=DockerArtifact(**docker))


@dataclass
class ArtifactSpec:
    """One image the user wants built"""
    image_name: str = ""
    workspace: str = "."
    artifact_type: ArtifactType = field(default_factory=ArtifactType)
    watch_paths: List[str] = field(default_factory=lambda: ["."])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArtifactSpec':
        """Create from dictionary"""
        return cls(
            image_name=data.get('image', ''),
            workspace=data.get('context', '.'),
            artifact_type=ArtifactType.from_dict(data),
            watch_paths=list(data.get('watch') or ["."]),
        )


@dataclass(frozen=True)
class BuildResult:
    """A successfully built artifact and the tag deployers must use"""
    image_name: str
    tag: str
