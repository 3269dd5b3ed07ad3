"""Uninstall command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from calvin.core.errors import CalvinError
from calvin.core.installer import uninstall_package

console = Console()


@click.command()
@click.argument("package_name")
@click.argument("target_dir", type=click.Path(path_type=Path))
@click.option("--dry-run", "-n", "dry", is_flag=True, help="Show operations without applying them")
def uninstall(package_name: str, target_dir: Path, dry: bool):
    """Uninstall a package from TARGET_DIR.

    Runs the uninstall script written by the install, which removes the
    installed items and restores anything they replaced.
    """
    try:
        trace = uninstall_package(package_name, target_dir, dry=dry)
    except CalvinError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if trace is None:
        console.print(f"[red]Error:[/red] Package '{package_name}' is not installed in {escape(str(target_dir))}")
        raise SystemExit(1)

    console.print(f"[blue]Uninstalling[/blue] {package_name}...")
    for line in trace:
        console.print(f"  {escape(line)}")

    if dry:
        console.print("\n[dim]Dry run, nothing was changed[/dim]")
        return

    console.print(f"\n[green]✓[/green] Successfully uninstalled [bold]{package_name}[/bold]")
