"""Image build command."""

from typing import List, Optional

import typer
from rich.console import Console

from ...exceptions import DeployKitError

console = Console()


def _parse_build_args(values: Optional[List[str]]) -> dict:
    build_args = {}
    for value in values or []:
        key, sep, arg = value.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {value!r}")
        build_args[key] = arg
    return build_args


def build_command(
    image_name: str,
    tag: Optional[str],
    context_dir: str,
    dockerfile: Optional[str],
    platform: Optional[str],
    build_arg: Optional[List[str]],
):
    """Build a Docker image from a Dockerfile."""
    from ...pipeline import build_image

    build_args = _parse_build_args(build_arg)
    console.print(f"🐳 Building Docker image: [bold]{image_name}[/bold]")

    try:
        result = build_image(
            image_name,
            tag=tag,
            context_dir=context_dir,
            dockerfile=dockerfile,
            platform=platform,
            build_args=build_args,
        )
    except DeployKitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"✅ Docker image built successfully: {result.image}")
