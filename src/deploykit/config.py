"""Configuration defaults and environment loading for deploykit."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)

# Image and container defaults
DEFAULT_SOURCE_TAG = "source"
DEFAULT_CONTAINER_USER = "1000:1000"
DEFAULT_RESTART_POLICY = "always"
DEFAULT_DOCKER_BIN = "docker"

# Verification defaults
DEFAULT_HOST = "localhost"
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_DELAY_SECONDS = 5
DEFAULT_HTTP_TIMEOUT = 5.0  # seconds

# Registry tag that is always kept and pushed alongside the version tag
LATEST_TAG = "latest"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning(f"Ignoring invalid integer {name}={raw!r}, using {default}")
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning(f"Ignoring invalid number {name}={raw!r}, using {default}")
        return default


@dataclass
class DeployKitConfig:
    """Runtime configuration shared by the CLI and the pipeline functions."""

    docker_bin: str = DEFAULT_DOCKER_BIN
    source_tag: str = DEFAULT_SOURCE_TAG
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_seconds: int = DEFAULT_DELAY_SECONDS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    container_user: str = DEFAULT_CONTAINER_USER
    restart_policy: str = DEFAULT_RESTART_POLICY
    keep_version: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DeployKitConfig":
        """Load configuration from environment variables.

        Environment variables:
        - DEPLOYKIT_DOCKER_BIN: Docker executable (default: docker)
        - DEPLOYKIT_SOURCE_TAG: Local image tag (default: source)
        - DEPLOYKIT_VERIFY_MAX_ATTEMPTS: Verification attempt budget (default: 10)
        - DEPLOYKIT_VERIFY_DELAY_SECONDS: Delay between attempts (default: 5)
        - DEPLOYKIT_HTTP_TIMEOUT: Health check request timeout (default: 5.0)
        - DEPLOYKIT_CONTAINER_USER: User for deployed containers (default: 1000:1000)
        - DEPLOYKIT_RESTART_POLICY: Restart policy (default: always)
        - DEPLOYKIT_KEEP_VERSION: Registry tag kept by cleanup (default: unset)

        Returns:
            DeployKitConfig initialized from environment variables.
        """
        return cls(
            docker_bin=os.getenv("DEPLOYKIT_DOCKER_BIN") or DEFAULT_DOCKER_BIN,
            source_tag=os.getenv("DEPLOYKIT_SOURCE_TAG") or DEFAULT_SOURCE_TAG,
            max_attempts=_int_from_env(
                "DEPLOYKIT_VERIFY_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS
            ),
            delay_seconds=_int_from_env(
                "DEPLOYKIT_VERIFY_DELAY_SECONDS", DEFAULT_DELAY_SECONDS
            ),
            http_timeout=_float_from_env("DEPLOYKIT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            container_user=os.getenv("DEPLOYKIT_CONTAINER_USER")
            or DEFAULT_CONTAINER_USER,
            restart_policy=os.getenv("DEPLOYKIT_RESTART_POLICY")
            or DEFAULT_RESTART_POLICY,
            keep_version=os.getenv("DEPLOYKIT_KEEP_VERSION") or None,
        )


# Global default configuration
_config: Optional[DeployKitConfig] = None


def get_config() -> DeployKitConfig:
    """Get global configuration (lazy-loaded).

    Returns:
        DeployKitConfig instance initialized from environment.
    """
    global _config
    if _config is None:
        _config = DeployKitConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next access re-reads the environment."""
    global _config
    _config = None
