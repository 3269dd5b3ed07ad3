"""Uninstall script generation and execution.

An uninstall script is a standalone Python file written into the target
directory. It embeds its operations as a YAML document and hands them to
the same executor the installer uses, so both apply identical checks.
Operation paths are relative to the directory holding the script.
"""

import ast
import logging
import os
import subprocess
import sys
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape

import calvin
from calvin.core.errors import CalvinError, UnexpectedState
from calvin.core.executor import execute
from calvin.core.log import setup_logging
from calvin.models.operation import Operation

logger = logging.getLogger(__name__)

DOCUMENT_NAME = "DOCUMENT_LINES"

SCRIPT_TEMPLATE = '''\
#!/usr/bin/env python3
# Generated by calvin {calvin_version}. Do not edit.
"""{summary}

Run this file to remove the package from this directory and restore
anything the install moved aside. Pass --dry-run to only list the steps.
"""

from calvin.core.script import run_embedded

{document_name} = (
{document_lines}
)

if __name__ == "__main__":
    run_embedded(__file__, {document_name})
'''


def summary(header: dict) -> str:
    """One-line description of what a script uninstalls."""
    return (
        f"Uninstalling {header.get('package')}--{header.get('version')} "
        f"from {header.get('target_dir')}..."
    )


def render_script(operations: list[Operation], header: dict) -> str:
    """Serialize operations and header into the script source."""
    document = dict(header)
    document["operations"] = [op.to_dict() for op in operations]
    text = yaml.safe_dump(
        document, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
    lines = "\n".join(f"    {line!r}," for line in text.splitlines())

    return SCRIPT_TEMPLATE.format(
        calvin_version=calvin.__version__,
        summary=summary(header).replace('"""', "'''").replace("\\", "/"),
        document_name=DOCUMENT_NAME,
        document_lines=lines,
    )


def emit(
    operations: list[Operation],
    destination_path: Path,
    header: dict,
    dry: bool = False,
) -> str:
    """Write the uninstall script, overwriting any previous one.

    In dry mode nothing is written. Returns the script source either way.
    """
    content = render_script(operations, header)
    if dry:
        logger.debug("Dry run: not writing %s", destination_path)
        return content

    destination_path = Path(destination_path)
    with open(destination_path, "w", encoding="utf-8") as f:
        f.write(content)
    destination_path.chmod(destination_path.stat().st_mode | 0o111)

    logger.info("Wrote uninstall script %s", destination_path)
    return content


def parse_document(lines: tuple[str, ...] | list[str]) -> dict:
    """Parse the embedded YAML document of a script."""
    try:
        data = yaml.safe_load("\n".join(lines) + "\n")
    except yaml.YAMLError as e:
        raise UnexpectedState(f"Corrupted uninstall document: {e}") from e

    if not isinstance(data, dict) or "package" not in data or "version" not in data:
        raise UnexpectedState("Uninstall document is missing its header")
    if not isinstance(data.get("operations") or [], list):
        raise UnexpectedState("Uninstall document operations must be a list")
    return data


def load_script(path: Path) -> dict:
    """Read a script's header and operations without running it."""
    path = Path(path)
    try:
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except SyntaxError as e:
        raise UnexpectedState(f"{path} is not a valid uninstall script: {e}") from e

    for node in tree.body:
        if (
            isinstance(node, ast.Assign)
            and len(node.targets) == 1
            and isinstance(node.targets[0], ast.Name)
            and node.targets[0].id == DOCUMENT_NAME
        ):
            return parse_document(ast.literal_eval(node.value))

    raise UnexpectedState(f"{path} does not contain an uninstall document")


def load_operations(data: dict) -> list[Operation]:
    """Build operations from a parsed document."""
    try:
        return [Operation.from_dict(op) for op in data.get("operations") or []]
    except (KeyError, ValueError, TypeError) as e:
        raise UnexpectedState(f"Bad operation in uninstall document: {e}") from e


def run_script(path: Path, dry: bool = False) -> list[str]:
    """Run an uninstall script in its own interpreter.

    Returns the trace lines the script printed. Raises UnexpectedState
    when the script fails.
    """
    path = Path(path)
    args = [sys.executable, str(path)]
    if dry:
        args.append("--dry-run")

    # Make sure the script can import this copy of calvin
    env = dict(os.environ)
    package_root = str(Path(calvin.__file__).resolve().parent.parent)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (package_root, env.get("PYTHONPATH")) if p
    )

    logger.info("Running uninstall script %s", path)
    result = subprocess.run(args, capture_output=True, text=True, env=env)
    if result.returncode != 0:
        output = (result.stderr or result.stdout).strip()
        raise UnexpectedState(f"Uninstall script {path} failed:\n{output}")

    return [line for line in result.stdout.splitlines() if line.strip()]


@click.command()
@click.option("--dry-run", "dry", is_flag=True, help="Only list the operations")
@click.option("--keep", is_flag=True, help="Keep this script after uninstalling")
@click.option("--verbose", "-V", is_flag=True, help="Show debug output")
@click.pass_obj
def uninstall_script_command(obj: tuple[Path, tuple[str, ...]], dry: bool, keep: bool, verbose: bool):
    """Uninstall the package recorded in this script."""
    script_path, lines = obj
    err_console = Console(stderr=True, soft_wrap=True)
    setup_logging(verbose=verbose, console=err_console)

    try:
        data = parse_document(lines)
        operations = load_operations(data)
        err_console.print(summary(data), markup=False)
        trace = execute(operations, dry=dry, base_dir=script_path.parent)
    except CalvinError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    for line in trace:
        click.echo(line)

    if not dry and not keep:
        script_path.unlink(missing_ok=True)


def run_embedded(script_file: str, lines: tuple[str, ...]) -> None:
    """Entry point of a generated uninstall script."""
    script_path = Path(script_file).resolve()
    uninstall_script_command.main(
        args=sys.argv[1:],
        prog_name=script_path.name,
        obj=(script_path, tuple(lines)),
    )
