"""Info command implementation."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from calvin.core.errors import CalvinError
from calvin.core.manifest import resolve_manifests
from calvin.core.version import resolve_version

console = Console()


@click.command()
@click.argument("source_dir", type=click.Path(path_type=Path))
@click.option("--extra", "-e", "extras", multiple=True, help="Include MANIFEST.<EXTRA>")
def info(source_dir: Path, extras: tuple[str, ...]):
    """Show the version and manifest entries of a package source.

    Every manifest entry is checked against SOURCE_DIR.
    """
    try:
        version = resolve_version(source_dir)
        entries = resolve_manifests(source_dir, extras)
    except CalvinError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    manifests = ", ".join(["MANIFEST"] + [f"MANIFEST.{tag}" for tag in extras])
    lines = [
        f"[bold]Source:[/bold] {escape(str(source_dir))}",
        f"[bold]Version:[/bold] {escape(version)}",
        f"[bold]Manifests:[/bold] {escape(manifests)}",
        f"[bold]Entries:[/bold] {len(entries)}",
    ]
    console.print(Panel("\n".join(lines), title=f"[green]{escape(source_dir.name)}[/green]"))

    for entry in entries:
        kind = "dir" if (source_dir / entry).is_dir() else "file"
        console.print(f"  • {escape(entry)} [dim]({kind})[/dim]")
