"""
Docker CLI runtime.

Every docker invocation goes through DockerRuntime.run as an explicit
argument vector, never through a shell.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import DEFAULT_DOCKER_BIN
from ..exceptions import DockerCommandError, DockerError, DockerNotFoundError

log = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a docker command."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def lines(self) -> List[str]:
        """Non-empty stdout lines, stripped."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


class DockerRuntime:
    """Thin typed wrapper over the docker command line."""

    def __init__(self, docker_bin: str = DEFAULT_DOCKER_BIN):
        self.docker_bin = docker_bin

    def run(
        self, args: List[str], check: bool = True, input: Optional[str] = None
    ) -> CommandResult:
        """
        Run a docker command.

        Args:
            args: Arguments passed after the docker executable
            check: Raise DockerCommandError on a non-zero exit status
            input: Text written to the command's stdin

        Returns:
            CommandResult with captured output

        Raises:
            DockerNotFoundError: If the docker executable is missing
            DockerCommandError: If check is set and the command fails
        """
        command = [self.docker_bin, *args]
        log.debug(f"Running: {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                input=input,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise DockerNotFoundError(self.docker_bin) from e

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if check and not result.ok:
            raise DockerCommandError(command, result.returncode, result.stderr)

        return result

    def is_running(self, name: str) -> bool:
        """Check whether a container with exactly this name is running."""
        try:
            result = self.run(["ps", "-q", "--filter", f"name=^{name}$"])
        except DockerError as e:
            log.debug(f"Could not query container {name}: {e}")
            return False
        return bool(result.lines())

    def list_containers(self, name_filter: str, all: bool = True) -> List[str]:
        """Return ids of containers whose name matches the filter."""
        args = ["ps", "-q", "--filter", f"name={name_filter}"]
        if all:
            args.insert(1, "-a")
        return self.run(args).lines()

    def list_images(
        self,
        reference: Optional[str] = None,
        filters: Optional[Dict[str, str]] = None,
    ) -> List[str]:
        """Return image ids, optionally restricted to a reference and filters."""
        args = ["images", "-q"]
        for key, value in (filters or {}).items():
            args.extend(["--filter", f"{key}={value}"])
        if reference:
            args.append(reference)
        return self.run(args).lines()

    def list_image_tags(self, repository: str) -> List[str]:
        """Return the tags present locally for a repository."""
        return self.run(["images", repository, "--format", "{{.Tag}}"]).lines()

    def stop_container(self, name: str, check: bool = True) -> CommandResult:
        return self.run(["stop", name], check=check)

    def remove_container(
        self, container: str, force: bool = False, check: bool = True
    ) -> CommandResult:
        args = ["rm", container]
        if force:
            args.insert(1, "-f")
        return self.run(args, check=check)

    def remove_image(self, image: str, force: bool = False) -> CommandResult:
        args = ["rmi", image]
        if force:
            args.insert(1, "-f")
        return self.run(args)

    def tag(self, source: str, target: str) -> CommandResult:
        log.debug(f"Tagging image: {source} -> {target}")
        return self.run(["tag", source, target])

    def push(self, image: str) -> CommandResult:
        return self.run(["push", image])

    def login(self, registry: str, username: str, password: str) -> CommandResult:
        """Log in to a registry, passing the password on stdin."""
        return self.run(
            ["login", registry, "-u", username, "--password-stdin"],
            input=password,
        )

    def logout(self, registry: str, check: bool = True) -> CommandResult:
        return self.run(["logout", registry], check=check)
