"""
Docker registry management.

Handles registry credentials, tagging and pushing images.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from ..config import DEFAULT_SOURCE_TAG, LATEST_TAG
from ..exceptions import DockerError, InvalidRequestError
from .runtime import DockerRuntime

log = logging.getLogger(__name__)


@dataclass
class RegistryCredentials:
    """Username and password for a Docker registry."""

    username: str
    password: str = field(repr=False)

    @classmethod
    def from_environment(cls) -> Optional["RegistryCredentials"]:
        """
        Create credentials from environment variables.

        Environment variables:
            DOCKER_USER: Registry username
            DOCKER_PASS: Registry password or token

        Returns:
            RegistryCredentials, or None if either variable is unset
        """
        username = os.getenv("DOCKER_USER")
        password = os.getenv("DOCKER_PASS")
        if not username or not password:
            return None
        return cls(username=username, password=password)


@dataclass
class PushResult:
    """Result of pushing an image to a registry."""

    success: bool
    images: List[str] = field(default_factory=list)
    message: Optional[str] = None


def registry_image(registry: str, image_name: str, tag: str) -> str:
    """Full registry reference for an image tag."""
    return f"{registry.rstrip('/')}/{image_name}:{tag}"


class RegistryManager:
    """Manage Docker registry operations."""

    def __init__(self, runtime: Optional[DockerRuntime] = None):
        self.runtime = runtime or DockerRuntime()

    def push(
        self,
        image_name: str,
        registry: str,
        version: str,
        source_tag: str = DEFAULT_SOURCE_TAG,
        credentials: Optional[RegistryCredentials] = None,
    ) -> PushResult:
        """
        Tag a local image as ``latest`` and ``version`` and push both tags.

        Args:
            image_name: Name of the local image
            registry: Registry host, e.g. registry.example.com
            version: Version tag to publish
            source_tag: Local tag to publish from
            credentials: Optional login credentials

        Returns:
            PushResult listing the pushed references
        """
        for label, value in (
            ("image_name", image_name),
            ("registry", registry),
            ("version", version),
            ("source_tag", source_tag),
        ):
            if not value:
                raise InvalidRequestError(f"{label} must not be empty")

        source = f"{image_name}:{source_tag}"
        targets = [
            registry_image(registry, image_name, LATEST_TAG),
            registry_image(registry, image_name, version),
        ]

        log.info(f"Pushing to registry: {registry}")
        logged_in = False
        try:
            if credentials is not None:
                self.runtime.login(registry, credentials.username, credentials.password)
                logged_in = True

            for target in targets:
                self.runtime.tag(source, target)

            for target in targets:
                log.info(f"Pushing {target}")
                self.runtime.push(target)

        except DockerError as e:
            log.error(f"Docker push failed: {e}")
            return PushResult(success=False, images=[], message=str(e))

        finally:
            if logged_in:
                self._logout(registry)

        log.info("Images pushed successfully")
        for target in targets:
            log.info(f"   - {target}")
        return PushResult(success=True, images=targets, message="Push successful")

    def _logout(self, registry: str) -> None:
        result = self.runtime.logout(registry, check=False)
        if not result.ok:
            log.warning(f"Registry logout failed: {result.stderr.strip()}")
