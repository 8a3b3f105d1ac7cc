"""Cleanup command."""

from typing import Optional

from rich.console import Console
from rich.table import Table

console = Console()


def cleanup_command(
    image_name: str,
    container_name: str,
    registry: Optional[str],
    keep_version: Optional[str],
):
    """Remove old containers and images for a project, ignoring failures."""
    from ...pipeline import cleanup

    console.print(f"🧹 Cleaning up Docker artifacts for [bold]{image_name}[/bold]")

    report = cleanup(
        image_name,
        container_name,
        registry=registry,
        keep_version=keep_version,
    )

    if report.removed:
        console.print(f"Removed {len(report.removed)} item(s)")
        for item in report.removed:
            console.print(f"   - {item}")

    if report.failures:
        table = Table(title="Skipped")
        table.add_column("Target", style="yellow")
        table.add_column("Error")
        for target, error in report.failures:
            table.add_row(target, error)
        console.print(table)

    console.print("✅ Cleanup completed")
