"""CLI entry point for calvin."""

import click
from rich.console import Console

from calvin import __version__
from calvin.commands import info, install, list_cmd, uninstall
from calvin.core.log import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="calvin")
@click.option("--verbose", "-V", is_flag=True, help="Show debug output")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
def main(verbose: bool, quiet: bool):
    """Calvin - install versioned packages and undo them cleanly.

    Installs the files listed in a package's MANIFEST into a target
    directory and writes an uninstall script that restores the directory.

    Examples:

        calvin install mytools ./mytools ~/matlab

        calvin install mytools ./mytools ~/matlab --mode link --extra gui

        calvin list ~/matlab

        calvin uninstall mytools ~/matlab
    """
    setup_logging(verbose=verbose, quiet=quiet, console=Console(stderr=True))


# Register commands
main.add_command(install.install)
main.add_command(uninstall.uninstall)
main.add_command(list_cmd.list_packages)
main.add_command(info.info)


if __name__ == "__main__":
    main()
