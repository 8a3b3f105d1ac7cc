"""Main CLI entry point for deploykit."""

from importlib import metadata
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import DEFAULT_HOST


def get_version() -> str:
    """Get the package version from metadata."""
    try:
        return metadata.version("deploykit")
    except metadata.PackageNotFoundError:
        return "unknown"


console = Console()

# command: deploykit
app = typer.Typer(
    name="deploykit",
    help="Build, deploy, verify, push and clean up Docker containers",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# command: deploykit <command>


@app.command("build")
def build_cmd(
    image_name: str = typer.Argument(..., help="Name of the image to build"),
    tag: Optional[str] = typer.Option(
        None, "--tag", "-t", help="Image tag (defaults to the source tag)"
    ),
    context_dir: str = typer.Option(".", "--context", "-c", help="Build context"),
    dockerfile: Optional[str] = typer.Option(
        None, "--file", "-f", help="Path to the Dockerfile"
    ),
    platform: Optional[str] = typer.Option(
        None, "--platform", help="Target platform, e.g. linux/amd64"
    ),
    build_arg: Optional[List[str]] = typer.Option(
        None, "--build-arg", help="Build argument as KEY=VALUE (repeatable)"
    ),
):
    """Build a Docker image from a Dockerfile."""
    from .commands.build import build_command

    return build_command(image_name, tag, context_dir, dockerfile, platform, build_arg)


@app.command("deploy")
def deploy_cmd(
    image_name: str = typer.Argument(..., help="Name of the image to run"),
    container_name: str = typer.Argument(..., help="Name for the container"),
    port: str = typer.Argument(..., help="Port as 'port' or 'hostPort:containerPort'"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Image tag"),
    user: Optional[str] = typer.Option(None, "--user", help="Container user"),
    restart_policy: Optional[str] = typer.Option(
        None, "--restart", help="Restart policy"
    ),
):
    """Replace a running container with a fresh one."""
    from .commands.deploy import deploy_command

    return deploy_command(image_name, container_name, port, tag, user, restart_policy)


@app.command("verify")
def verify_cmd(
    container_name: str = typer.Argument(..., help="Container to verify"),
    expected_version: str = typer.Argument(..., help="Expected version string"),
    port: str = typer.Argument(..., help="Port the container listens on"),
    health_endpoint: str = typer.Argument(..., help="Health path, e.g. /api/version"),
    host: str = typer.Option(DEFAULT_HOST, "--host", help="Host to poll"),
    max_attempts: Optional[int] = typer.Option(
        None, "--max-attempts", help="Maximum verification attempts"
    ),
    delay_seconds: Optional[int] = typer.Option(
        None, "--delay", help="Seconds to wait between attempts"
    ),
    fail_fast_on_mismatch: bool = typer.Option(
        False,
        "--fail-fast-on-mismatch",
        help="Stop at the first wrong version instead of retrying",
    ),
):
    """Verify a container is running the expected version."""
    from .commands.verify import verify_command

    return verify_command(
        container_name,
        expected_version,
        port,
        health_endpoint,
        host,
        max_attempts,
        delay_seconds,
        fail_fast_on_mismatch,
    )


@app.command("push")
def push_cmd(
    image_name: str = typer.Argument(..., help="Name of the local image"),
    registry: str = typer.Argument(..., help="Registry host"),
    version: str = typer.Argument(..., help="Version tag to publish"),
    source_tag: Optional[str] = typer.Option(
        None, "--source-tag", help="Local tag to publish from"
    ),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="Registry username"
    ),
    password_stdin: bool = typer.Option(
        False, "--password-stdin", help="Read the registry password from stdin"
    ),
):
    """Push an image to a registry as latest and as VERSION."""
    from .commands.push import push_command

    return push_command(
        image_name, registry, version, source_tag, username, password_stdin
    )


@app.command("cleanup")
def cleanup_cmd(
    image_name: str = typer.Argument(..., help="Image to clean up"),
    container_name: str = typer.Argument(..., help="Deployed container name"),
    registry: Optional[str] = typer.Option(
        None, "--registry", help="Also clean this registry's local tags"
    ),
    keep_version: Optional[str] = typer.Option(
        None, "--keep-version", help="Registry version tag to keep"
    ),
):
    """Remove old containers and images for a project."""
    from .commands.cleanup import cleanup_command

    return cleanup_command(image_name, container_name, registry, keep_version)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
):
    """deploykit - container lifecycle for CI pipelines."""
    if version:
        console.print(f"deploykit v{get_version()}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            Panel(
                "[bold blue]deploykit[/bold blue]\n\n"
                "Build, deploy, verify, push and clean up Docker containers.\n\n"
                "Use [bold]deploykit --help[/bold] to see available commands.",
                title="Welcome",
                expand=False,
            )
        )


if __name__ == "__main__":
    app()
