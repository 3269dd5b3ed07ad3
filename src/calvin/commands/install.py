"""Install command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from calvin.core.errors import CalvinError
from calvin.core.installer import install_package

console = Console()


@click.command()
@click.argument("package_name")
@click.argument("source_dir", type=click.Path(path_type=Path))
@click.argument("target_dir", type=click.Path(path_type=Path))
@click.option(
    "--mode",
    "-m",
    type=click.Choice(["copy", "link"]),
    default=None,
    help="Copy items, or symlink them to the source (default: copy, or $CALVIN_MODE)",
)
@click.option("--extra", "-e", "extras", multiple=True, help="Also install MANIFEST.<EXTRA>")
@click.option("--dry-run", "-n", "dry", is_flag=True, help="Show operations without applying them")
def install(package_name: str, source_dir: Path, target_dir: Path, mode: str | None, extras: tuple[str, ...], dry: bool):
    """Install a package from SOURCE_DIR into TARGET_DIR.

    SOURCE_DIR must contain a VERSION file and a MANIFEST file listing the
    files and directories to install, one relative path per line. Each
    --extra TAG adds the entries of MANIFEST.TAG.

    An uninstall script named uninstall_<PACKAGE_NAME>.py is written to
    TARGET_DIR. Items already present in TARGET_DIR are backed up and the
    uninstall script restores them.
    """
    console.print(f"[blue]Installing[/blue] {package_name} into {escape(str(target_dir))}...")

    try:
        result = install_package(
            package_name,
            source_dir,
            target_dir,
            mode=mode,
            extras=list(extras),
            dry=dry,
        )
    except CalvinError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if result.previous_trace is not None:
        console.print("  Previous installation removed")

    for backup in result.plan.backups:
        console.print(
            f"  [yellow]Backed up[/yellow] {escape(backup.original)} → {escape(backup.backup)}"
        )

    if dry:
        if result.previous_trace:
            console.print("\n[bold]Previous installation would be removed:[/bold]")
            for line in result.previous_trace:
                console.print(f"  {escape(line)}")
        console.print("\n[bold]Operations (dry run):[/bold]")
        for line in result.trace:
            console.print(f"  {escape(line)}")
        console.print(f"\n[bold]Uninstall script, would be written to {escape(str(result.script_path))}:[/bold]")
        console.print(result.script, markup=False, highlight=False, soft_wrap=True)
        raise SystemExit(0)

    console.print(f"  Applied {len(result.trace)} operation(s)")
    console.print(
        f"\n[green]✓[/green] Successfully installed [bold]{package_name}[/bold] {escape(result.version)}"
    )
    console.print(f"\n[dim]Uninstall with: calvin uninstall {package_name} {escape(str(target_dir))}[/dim]")
