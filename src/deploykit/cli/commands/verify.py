"""Deployment verification command."""

from typing import Optional

import typer
from rich.console import Console

from ...exceptions import DeployKitError, VerificationFailedError

console = Console()


def verify_command(
    container_name: str,
    expected_version: str,
    port: str,
    health_endpoint: str,
    host: str,
    max_attempts: Optional[int],
    delay_seconds: Optional[int],
    fail_fast_on_mismatch: bool,
):
    """Poll a container's health endpoint until it reports the expected version."""
    from ...pipeline import verify_container

    console.print(f"🔍 Verifying container: [bold]{container_name}[/bold]")
    console.print(f"Expected version: {expected_version}")

    try:
        result = verify_container(
            container_name,
            expected_version,
            port,
            health_endpoint,
            max_attempts=max_attempts,
            delay_seconds=delay_seconds,
            host=host,
            fail_fast_on_mismatch=fail_fast_on_mismatch,
        )
    except VerificationFailedError as e:
        console.print(f"[red]❌ {e.result.message}[/red]")
        raise typer.Exit(1)
    except DeployKitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"✅ {result.message}")
