"""List command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from calvin.core.errors import CalvinError
from calvin.core.installer import list_installed

console = Console()


@click.command("list")
@click.argument("target_dir", type=click.Path(path_type=Path))
def list_packages(target_dir: Path):
    """List packages installed in TARGET_DIR."""
    try:
        packages = list_installed(target_dir)
    except CalvinError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if not packages:
        console.print(f"No packages installed in {escape(str(target_dir))}")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Package")
    table.add_column("Version")
    table.add_column("Installed")
    table.add_column("Operations")
    table.add_column("Backups")

    for pkg in sorted(packages, key=lambda p: p.name):
        installed = pkg.generated_at.strftime("%Y-%m-%d %H:%M") if pkg.generated_at else ""
        table.add_row(
            pkg.name,
            escape(pkg.version),
            installed,
            str(pkg.operations),
            escape(", ".join(pkg.backups)),
        )

    console.print(table)
