"""
Docker image building operations.

Handles building Docker images from a Dockerfile and build context.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from ..config import DEFAULT_SOURCE_TAG
from ..exceptions import DockerCommandError, InvalidRequestError
from .runtime import DockerRuntime

log = logging.getLogger(__name__)


@dataclass
class ImageBuildConfig:
    """Configuration for Docker image build."""

    image_name: str
    tag: str = DEFAULT_SOURCE_TAG
    context_dir: Union[str, Path] = "."
    dockerfile: Optional[str] = None
    platform: Optional[str] = None
    build_args: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.image_name:
            raise InvalidRequestError("image_name must not be empty")
        if not self.tag:
            raise InvalidRequestError("tag must not be empty")

    @property
    def image(self) -> str:
        return f"{self.image_name}:{self.tag}"


@dataclass
class BuildResult:
    """Result of Docker image build."""

    success: bool
    image: str
    stdout: Optional[str] = None
    stderr: Optional[str] = None


class ImageBuilder:
    """Build Docker images."""

    def __init__(self, runtime: Optional[DockerRuntime] = None):
        self.runtime = runtime or DockerRuntime()

    def build(self, config: ImageBuildConfig) -> BuildResult:
        """
        Build Docker image.

        Args:
            config: Build configuration

        Returns:
            BuildResult with success status and output
        """
        log.info(f"Building Docker image: {config.image}")
        log.debug(f"   Context: {config.context_dir}")

        args = ["build", "-t", config.image]
        if config.platform:
            args.extend(["--platform", config.platform])
        if config.dockerfile:
            args.extend(["-f", config.dockerfile])
        for key, value in config.build_args.items():
            args.extend(["--build-arg", f"{key}={value}"])
        args.append(str(config.context_dir))

        try:
            result = self.runtime.run(args)
        except DockerCommandError as e:
            log.error("Docker build failed:")
            log.error(e.stderr)
            return BuildResult(success=False, image=config.image, stderr=e.stderr)

        log.info(f"Image built successfully: {config.image}")
        return BuildResult(
            success=True,
            image=config.image,
            stdout=result.stdout,
            stderr=result.stderr,
        )
