"""Logging setup for the calvin CLI and generated scripts."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from calvin.core.config import get_config

LOGGER_NAME = "calvin"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """Route calvin's log records through rich.

    verbose forces DEBUG, quiet restricts output to warnings and errors.
    Otherwise the level comes from the config (CALVIN_LOG_LEVEL).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.getLevelName(get_config().log_level)
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger(LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(level)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)

    return root
