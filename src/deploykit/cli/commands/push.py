"""Registry push command."""

import sys
from typing import Optional

import typer
from rich.console import Console

from ...exceptions import DeployKitError

console = Console()


def push_command(
    image_name: str,
    registry: str,
    version: str,
    source_tag: Optional[str],
    username: Optional[str],
    password_stdin: bool,
):
    """Tag and push an image as latest and as the given version."""
    from ...docker.registry_manager import RegistryCredentials
    from ...pipeline import push_to_registry

    credentials = None
    if password_stdin:
        if not username:
            console.print("[red]Error:[/red] --password-stdin requires --username")
            raise typer.Exit(1)
        password = sys.stdin.read().strip()
        credentials = RegistryCredentials(username=username, password=password)

    console.print(f"📤 Pushing to registry: [bold]{registry}[/bold]")

    try:
        result = push_to_registry(
            image_name,
            registry,
            version,
            source_tag=source_tag,
            credentials=credentials,
        )
    except DeployKitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("✅ Images pushed successfully")
    for image in result.images:
        console.print(f"   - {image}")
