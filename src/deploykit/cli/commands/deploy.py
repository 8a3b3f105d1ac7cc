"""Container deployment command."""

from typing import Optional

import typer
from rich.console import Console

from ...exceptions import DeployKitError

console = Console()


def deploy_command(
    image_name: str,
    container_name: str,
    port: str,
    tag: Optional[str],
    user: Optional[str],
    restart_policy: Optional[str],
):
    """Replace a container with a fresh one from the given image."""
    from ...pipeline import deploy_container

    console.print(f"🚀 Deploying container: [bold]{container_name}[/bold]")

    try:
        result = deploy_container(
            image_name,
            container_name,
            port,
            tag=tag,
            user=user,
            restart_policy=restart_policy,
        )
    except DeployKitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"✅ Container deployed successfully: {result.container_name}")
    if result.container_id:
        console.print(f"   ID: {result.container_id}")
