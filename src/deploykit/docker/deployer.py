"""
Container deployment.

Replaces any existing container of the same name with a fresh one.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONTAINER_USER, DEFAULT_RESTART_POLICY, DEFAULT_SOURCE_TAG
from ..exceptions import DockerCommandError, InvalidRequestError
from .runtime import DockerRuntime

log = logging.getLogger(__name__)


def normalize_port_mapping(port: str) -> str:
    """
    Turn a port argument into a docker ``-p`` mapping.

    ``"8080"`` publishes the same port on host and container; ``"8080:3000"``
    is used as given.
    """
    port = str(port).strip()
    parts = port.split(":")
    if len(parts) == 1:
        parts = [parts[0], parts[0]]
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise InvalidRequestError(f"Invalid port mapping: {port!r}")
    return ":".join(parts)


def host_port(port: str) -> str:
    """Host side of a port argument."""
    return normalize_port_mapping(port).split(":")[0]


@dataclass
class DeployConfig:
    """Configuration for deploying a container."""

    image_name: str
    container_name: str
    port: str
    tag: str = DEFAULT_SOURCE_TAG
    user: str = DEFAULT_CONTAINER_USER
    restart_policy: str = DEFAULT_RESTART_POLICY

    def __post_init__(self):
        if not self.image_name:
            raise InvalidRequestError("image_name must not be empty")
        if not self.container_name:
            raise InvalidRequestError("container_name must not be empty")
        self.port_mapping = normalize_port_mapping(self.port)

    @property
    def image(self) -> str:
        return f"{self.image_name}:{self.tag}"


@dataclass
class DeployResult:
    """Result of a container deployment."""

    success: bool
    container_name: str
    image: str
    container_id: Optional[str] = None
    message: Optional[str] = None


class ContainerDeployer:
    """Deploy containers with the Docker CLI."""

    def __init__(self, runtime: Optional[DockerRuntime] = None):
        self.runtime = runtime or DockerRuntime()

    def remove_existing(self, container_name: str) -> None:
        """Stop and remove a container if it exists. Failures are ignored."""
        for result in (
            self.runtime.stop_container(container_name, check=False),
            self.runtime.remove_container(container_name, check=False),
        ):
            if not result.ok:
                log.debug(
                    f"Ignoring failed '{' '.join(result.command)}': {result.stderr.strip()}"
                )

    def deploy(self, config: DeployConfig) -> DeployResult:
        """
        Replace the named container with one running the configured image.

        Args:
            config: Deployment configuration

        Returns:
            DeployResult with the new container id on success
        """
        log.info(f"Deploying container: {config.container_name}")
        self.remove_existing(config.container_name)

        log.info(f"Starting new container on port {config.port_mapping}")
        try:
            result = self.runtime.run(
                [
                    "run",
                    "-d",
                    "--name",
                    config.container_name,
                    "--user",
                    config.user,
                    "-p",
                    config.port_mapping,
                    "--restart",
                    config.restart_policy,
                    config.image,
                ]
            )
        except DockerCommandError as e:
            log.error(f"Failed to start container {config.container_name}: {e.stderr}")
            return DeployResult(
                success=False,
                container_name=config.container_name,
                image=config.image,
                message=e.stderr or str(e),
            )

        lines = result.lines()
        container_id = lines[-1] if lines else None
        log.info(f"Container deployed successfully: {config.container_name}")
        return DeployResult(
            success=True,
            container_name=config.container_name,
            image=config.image,
            container_id=container_id,
            message="Container started",
        )
