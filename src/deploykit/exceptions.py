"""Custom exceptions for deploykit."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .verification.models import VerificationResult


class DeployKitError(Exception):
    """Base exception for all deploykit errors."""

    pass


class InvalidRequestError(DeployKitError, ValueError):
    """Raised when operation parameters are invalid, before any side effect."""

    pass


class DockerError(DeployKitError):
    """Base exception for Docker CLI failures."""

    pass


class DockerNotFoundError(DockerError):
    """Raised when the docker binary cannot be executed."""

    def __init__(self, docker_bin: str):
        self.docker_bin = docker_bin
        super().__init__(f"Docker executable not found: {docker_bin}")


class DockerCommandError(DockerError):
    """Raised when a docker command exits with a non-zero status."""

    def __init__(self, command: List[str], returncode: int, stderr: Optional[str]):
        self.command = command
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"Command {' '.join(command)!r} failed with exit code {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class RegistryPushError(DeployKitError):
    """Raised when tagging or pushing images to a registry fails."""

    pass


class VerificationFailedError(DeployKitError):
    """Raised when a deployed container could not be verified."""

    def __init__(self, result: "VerificationResult"):
        self.result = result
        super().__init__(result.message)
