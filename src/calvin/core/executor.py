"""Apply operations to the filesystem, or render them for a dry run."""

import logging
import os
import shutil
from pathlib import Path

from calvin.core.errors import NotFound, TargetExists, UnsupportedOperation, UnsupportedPlatform
from calvin.core.platform import supports_symlinks
from calvin.models.operation import Action, Operation

logger = logging.getLogger(__name__)


def render(operation: Operation) -> str:
    """Human-readable description of an operation."""
    action = operation.action
    if action == Action.REMOVE:
        return f"remove {operation.source}"
    if action in (Action.COPY, Action.LINK, Action.MOVE):
        return f"{action.value} {operation.source} to {operation.destination}"
    raise UnsupportedOperation(f"Bad operation: {action}")


def _resolve(path: str | None, base_dir: Path | None) -> Path | None:
    if path is None:
        return None
    if base_dir is None:
        return Path(path)
    return Path(base_dir) / path


class _FilesystemView:
    """Existence checks over the real filesystem.

    In a dry run nothing is applied, so the view records what each
    rendered operation would have created or vacated. Later checks then
    see the state the earlier operations would have left.
    """

    def __init__(self):
        # Simulated path -> the real path its content would come from
        self.occupied: dict[Path, Path] = {}
        self.vacated: set[Path] = set()

    def exists(self, path: Path) -> bool:
        path = path.absolute()
        # The nearest recorded path decides
        for candidate in (path, *path.parents):
            if candidate in self.occupied:
                origin = self.occupied[candidate]
                # Inside a placed tree, look at the tree it was copied from
                return candidate == path or os.path.lexists(origin / path.relative_to(candidate))
            if candidate in self.vacated:
                return False
        # A dangling symlink still occupies its name
        return os.path.lexists(path)

    def record(self, operation: Operation, source: Path, destination: Path | None) -> None:
        source = source.absolute()
        if operation.action in (Action.MOVE, Action.REMOVE):
            self.vacated.add(source)
            self.occupied = {
                p: origin for p, origin in self.occupied.items()
                if p != source and source not in p.parents
            }
        if destination is not None:
            destination = destination.absolute()
            self.vacated = {
                p for p in self.vacated
                if p != destination and destination not in p.parents
            }
            self.occupied[destination] = source


def _remove_path(path: Path) -> None:
    """Remove a file, a symlink, or a whole directory tree.

    A symlink is removed itself, never its target, even when it points at
    a directory.
    """
    if path.is_symlink():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
    else:
        path.unlink()


def _remove_empty_parents(path: Path, base_dir: Path | None) -> None:
    """Remove the parent directory if the removal left it empty.

    With a base_dir, emptied parents are removed upwards until base_dir,
    which itself is kept.
    """
    parent = path.absolute().parent
    if base_dir is None:
        try:
            parent.rmdir()
        except OSError:
            pass
        return

    stop = Path(base_dir).absolute()
    while stop in parent.parents:
        try:
            parent.rmdir()
        except OSError:
            # Still holds sibling files
            break
        logger.debug("Removed empty directory %s", parent)
        parent = parent.parent


def _apply(operation: Operation, source: Path, destination: Path | None, base_dir: Path | None) -> None:
    action = operation.action

    if action in (Action.COPY, Action.LINK, Action.MOVE):
        destination.parent.mkdir(parents=True, exist_ok=True)

    if action == Action.COPY:
        if source.is_dir() and not source.is_symlink():
            shutil.copytree(source, destination, symlinks=True)
        else:
            shutil.copy2(source, destination, follow_symlinks=False)
    elif action == Action.LINK:
        os.symlink(source.absolute(), destination, target_is_directory=source.is_dir())
    elif action == Action.MOVE:
        shutil.move(str(source), str(destination))
    elif action == Action.REMOVE:
        _remove_path(source)
        _remove_empty_parents(source, base_dir)
    else:
        raise UnsupportedOperation(f"Bad operation: {action}")


def execute(
    operations: list[Operation],
    dry: bool = False,
    base_dir: Path | None = None,
    symlinks_supported: bool | None = None,
) -> list[str]:
    """Apply operations strictly in order.

    Args:
        operations: Operations to apply
        dry: If True, check and render operations without touching anything
        base_dir: Directory that relative operation paths are resolved against
        symlinks_supported: Override of the platform symlink capability

    Returns:
        The rendered trace of every operation that was (or would be) applied

    The first failing operation aborts the rest. Operations already applied
    are left in place.
    """
    if symlinks_supported is None:
        symlinks_supported = supports_symlinks()

    view = _FilesystemView()
    trace = []
    for operation in operations:
        description = render(operation)
        source = _resolve(operation.source, base_dir)
        destination = _resolve(operation.destination, base_dir)

        if operation.action == Action.LINK and not symlinks_supported:
            raise UnsupportedPlatform(
                f"Cannot {description}: symbolic links are not supported on this platform"
            )

        if not view.exists(source):
            if operation.skip_source_check:
                # Guarded operation, e.g. restoring a backup that was never made
                logger.info("Skipping %s: %s does not exist", description, source)
                continue
            raise NotFound(f"{source} does not exist")

        if (
            destination is not None
            and not operation.skip_destination_check
            and view.exists(destination)
        ):
            raise TargetExists(f"Target {destination} already exists")

        trace.append(description)
        if dry:
            logger.debug("Dry run: %s", description)
            view.record(operation, source, destination)
            continue

        logger.info(description)
        _apply(operation, source, destination, base_dir)

    return trace
