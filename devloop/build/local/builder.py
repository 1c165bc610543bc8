"""
Builds artifacts with the local docker daemon.
"""
import logging
from typing import Callable, Dict, IO, List, Optional

from ...config.global_config_loader import BuildConfig
from ...core.enums import BuildMethod
from ...core.errors import BuildError, UnknownArtifactTypeError
from ...core.models import ArtifactSpec, BuildResult, ImageTags
from ...images.daemon import LocalDaemon, new_local_daemon
from ... import warnings
from ...warnings import Warner
from .cache import resolve_cache_from
from .tagging import BuildCounter, push_and_resolve, tag_locally

# Contexts of clusters that share the local docker daemon
LOCAL_CLUSTER_CONTEXTS = {"minikube", "docker-desktop", "docker-for-desktop"}


def is_local_cluster(kube_context: str) -> bool:
    """Whether images built locally are visible to the cluster without a push"""
    return kube_context in LOCAL_CLUSTER_CONTEXTS or kube_context.startswith("kind-")


class LocalBuilder:
    """
    Builds a batch of artifacts one after the other, then either tags
    the images locally or pushes them.
    """

    def __init__(
        self,
        local_docker: LocalDaemon,
        push_images: bool = False,
        warner: Optional[Warner] = None,
        kube_context: str = "",
        local_cluster: bool = False,
        skip_tests: bool = False,
        prune: bool = True,
        insecure_registries: Optional[Dict[str, bool]] = None
    ):
        """
        Initialize local builder.

        Args:
            local_docker: Daemon that builds, tags and pushes images
            push_images: Push built images and report them by digest
            warner: Sink for non-fatal warnings
            kube_context: Kubernetes context images are deployed to
            local_cluster: Whether that cluster reads the local image store
            skip_tests: Configured skip_tests setting, recorded only
            prune: Remove intermediate containers after each build
            insecure_registries: Configured plain HTTP registries, recorded only
        """
        self.local_docker = local_docker
        self.push_images = push_images
        self.warner = warner or warnings.printf
        self.kube_context = kube_context
        self.local_cluster = local_cluster
        self.skip_tests = skip_tests
        self.prune = prune
        self.insecure_registries = insecure_registries
        self.counter = BuildCounter()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(
        cls,
        build_config: BuildConfig,
        warner: Optional[Warner] = None,
        get_local_docker: Callable[[BuildConfig], LocalDaemon] = None,
        get_local_cluster: Callable[[BuildConfig], bool] = None
    ) -> 'LocalBuilder':
        """
        Create a builder from configuration.

        When push is not configured, images are pushed unless the cluster
        shares the local docker daemon.

        Raises:
            RuntimeError: If the docker daemon cannot be reached
        """
        get_local_docker = get_local_docker or _default_local_docker
        get_local_cluster = get_local_cluster or _default_local_cluster

        try:
            local_docker = get_local_docker(build_config)
        except Exception as e:
            raise RuntimeError(f"getting docker client: {e}") from e

        local_cluster = get_local_cluster(build_config)
        push_images = build_config.push
        if push_images is None:
            push_images = not local_cluster

        return cls(
            local_docker=local_docker,
            push_images=push_images,
            warner=warner,
            kube_context=build_config.kube_context,
            local_cluster=local_cluster,
            skip_tests=build_config.skip_tests,
            prune=build_config.prune,
            insecure_registries=build_config.insecure_registry_map(),
        )

    async def build(
        self,
        out: IO[str],
        tags: ImageTags,
        artifacts: List[ArtifactSpec]
    ) -> List[BuildResult]:
        """
        Build all artifacts in order.

        The batch is atomic: the first failure raises and no results are
        returned for the artifacts that did build.

        Args:
            out: Stream receiving build output
            tags: Base tag for every artifact name
            artifacts: Artifacts to build

        Returns:
            One BuildResult per artifact, in input order

        Raises:
            BuildError: If any artifact fails to build, tag or push
        """
        results = []

        for artifact in artifacts:
            out.write(f"Building [{artifact.image_name}]...\n")
            tag = tags.get(artifact.image_name, "")
            final_tag = await self._build_artifact(out, artifact, tag)
            results.append(BuildResult(image_name=artifact.image_name, tag=final_tag))
            self.logger.info(f"Built {artifact.image_name} as {final_tag}")

        return results

    async def _build_artifact(self, out: IO[str], artifact: ArtifactSpec, tag: str) -> str:
        image_id = await self.run_build(out, artifact, tag)

        if self.push_images:
            return await push_and_resolve(
                self.local_docker, out, artifact.image_name, image_id, tag
            )

        return await tag_locally(
            self.local_docker, artifact.image_name, image_id, self.counter
        )

    async def run_build(self, out: IO[str], artifact: ArtifactSpec, tag: str) -> str:
        """
        Build one artifact and return the local image ID.

        Raises:
            UnknownArtifactTypeError: If no build method is set
            BuildError: If the daemon fails to build the image
        """
        method = artifact.artifact_type.method()

        if method == BuildMethod.DOCKER:
            docker_artifact = artifact.artifact_type.docker_artifact
            await resolve_cache_from(self.local_docker, docker_artifact.cache_from, self.warner)
            try:
                return await self.local_docker.build(
                    out, artifact.workspace, docker_artifact, tag, prune=self.prune
                )
            except Exception as e:
                raise BuildError(artifact.image_name, "build", str(e)) from e

        raise UnknownArtifactTypeError(artifact.image_name)


def _default_local_docker(build_config: BuildConfig) -> LocalDaemon:
    return new_local_daemon()


def _default_local_cluster(build_config: BuildConfig) -> bool:
    if build_config.local_cluster is not None:
        return build_config.local_cluster
    return is_local_cluster(build_config.kube_context)
