"""
Pipeline functions for a container's build/deploy/verify/push/cleanup lifecycle.

Usage:
    import deploykit

    deploykit.build_image("myapp")
    deploykit.deploy_container("myapp", "myapp-container", "8080")
    deploykit.verify_container("myapp-container", "1.2.3", "8080", "/api/version")
    deploykit.push_to_registry("myapp", "registry.example.com", "1.2.3")
    deploykit.cleanup("myapp", "myapp-container", "registry.example.com")

Every function except cleanup raises on failure so that the calling pipeline
stops. Unset optional arguments fall back to DeployKitConfig.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .config import DEFAULT_HOST, get_config
from .docker.cleanup import CleanupManager, CleanupReport
from .docker.deployer import ContainerDeployer, DeployConfig, DeployResult, host_port
from .docker.image_builder import BuildResult, ImageBuildConfig, ImageBuilder
from .docker.registry_manager import PushResult, RegistryCredentials, RegistryManager
from .docker.runtime import DockerRuntime
from .exceptions import DockerError, RegistryPushError
from .verification.models import VerificationRequest, VerificationResult
from .verification.verifier import DeploymentVerifier

log = logging.getLogger(__name__)


def _runtime(runtime: Optional[DockerRuntime]) -> DockerRuntime:
    return runtime or DockerRuntime(get_config().docker_bin)


def build_image(
    image_name: str,
    tag: Optional[str] = None,
    context_dir: Union[str, Path] = ".",
    dockerfile: Optional[str] = None,
    platform: Optional[str] = None,
    build_args: Optional[Dict[str, str]] = None,
    runtime: Optional[DockerRuntime] = None,
) -> BuildResult:
    """Build ``image_name:tag`` from the Dockerfile in ``context_dir``.

    Raises:
        DockerError: If the build fails
    """
    config = ImageBuildConfig(
        image_name=image_name,
        tag=tag or get_config().source_tag,
        context_dir=context_dir,
        dockerfile=dockerfile,
        platform=platform,
        build_args=build_args or {},
    )
    result = ImageBuilder(_runtime(runtime)).build(config)
    if not result.success:
        raise DockerError(f"Failed to build image {result.image}: {result.stderr}")
    return result


def deploy_container(
    image_name: str,
    container_name: str,
    port: str,
    tag: Optional[str] = None,
    user: Optional[str] = None,
    restart_policy: Optional[str] = None,
    runtime: Optional[DockerRuntime] = None,
) -> DeployResult:
    """Replace ``container_name`` with a new container running ``image_name:tag``.

    Raises:
        DockerError: If the new container cannot be started
    """
    settings = get_config()
    config = DeployConfig(
        image_name=image_name,
        container_name=container_name,
        port=port,
        tag=tag or settings.source_tag,
        user=user or settings.container_user,
        restart_policy=restart_policy or settings.restart_policy,
    )
    result = ContainerDeployer(_runtime(runtime)).deploy(config)
    if not result.success:
        raise DockerError(
            f"Failed to deploy container {container_name}: {result.message}"
        )
    return result


def verify_container(
    container_name: str,
    expected_version: str,
    port: str,
    health_endpoint: str,
    max_attempts: Optional[int] = None,
    delay_seconds: Optional[int] = None,
    host: str = DEFAULT_HOST,
    fail_fast_on_mismatch: bool = False,
    runtime: Optional[DockerRuntime] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> VerificationResult:
    """Poll the container's health endpoint until it reports ``expected_version``.

    ``port`` may be a ``host:container`` mapping; the host side is polled.

    Raises:
        InvalidRequestError: If the parameters are invalid
        VerificationFailedError: If the attempt budget is spent without a match
    """
    settings = get_config()
    request = VerificationRequest(
        container_name=container_name,
        expected_version=expected_version,
        port=host_port(port),
        health_endpoint=health_endpoint,
        host=host,
        max_attempts=settings.max_attempts if max_attempts is None else max_attempts,
        delay_seconds=settings.delay_seconds
        if delay_seconds is None
        else delay_seconds,
        fail_fast_on_mismatch=fail_fast_on_mismatch,
    )
    verifier = DeploymentVerifier(
        probe=_runtime(runtime), sleep=sleep, http_timeout=settings.http_timeout
    )
    result = verifier.verify(request).raise_for_failure()
    log.info("Container verification successful")
    return result


def push_to_registry(
    image_name: str,
    registry: str,
    version: str,
    source_tag: Optional[str] = None,
    credentials: Optional[RegistryCredentials] = None,
    runtime: Optional[DockerRuntime] = None,
) -> PushResult:
    """Publish ``image_name:source_tag`` as ``registry/image_name:{latest,version}``.

    Credentials default to DOCKER_USER / DOCKER_PASS from the environment.

    Raises:
        RegistryPushError: If login, tagging or pushing fails
    """
    if credentials is None:
        credentials = RegistryCredentials.from_environment()
        if credentials is None:
            log.warning("No registry credentials configured, pushing without login")

    result = RegistryManager(_runtime(runtime)).push(
        image_name,
        registry,
        version,
        source_tag=source_tag or get_config().source_tag,
        credentials=credentials,
    )
    if not result.success:
        raise RegistryPushError(
            f"Failed to push {image_name} to {registry}: {result.message}"
        )
    return result


def cleanup(
    image_name: str,
    container_name: str,
    registry: Optional[str] = None,
    keep_version: Optional[str] = None,
    source_tag: Optional[str] = None,
    runtime: Optional[DockerRuntime] = None,
) -> CleanupReport:
    """Remove stale containers and images for a project. Never raises for removal errors."""
    settings = get_config()
    return CleanupManager(_runtime(runtime)).cleanup(
        image_name,
        container_name,
        registry=registry,
        keep_version=keep_version or settings.keep_version,
        source_tag=source_tag or settings.source_tag,
    )
