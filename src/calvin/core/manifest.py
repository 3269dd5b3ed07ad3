"""MANIFEST file reading.

A manifest lists one path per line, relative to the directory holding it.
A path may name a file or a directory; directories are installed whole.
Blank lines are ignored. There is no comment syntax.
"""

import logging
from pathlib import Path, PurePosixPath

from calvin.core.config import get_config
from calvin.core.errors import ManifestEntryMissing, NotFound, UnexpectedState

logger = logging.getLogger(__name__)


def manifest_path(source_dir: Path, tag: str | None = None) -> Path:
    """Path of the base manifest, or of the manifest for an extra tag."""
    name = get_config().manifest_filename
    if tag is not None:
        name = f"{name}.{tag}"
    return Path(source_dir) / name


def normalize_entry(entry: str) -> str:
    """Entry as a POSIX path inside the package, without trailing slashes."""
    path = PurePosixPath(entry.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts or not path.name:
        raise UnexpectedState(
            f'Manifest entry "{entry}" does not name a path inside the package'
        )
    return path.as_posix()


def read_manifest(path: Path) -> list[str]:
    """Read a manifest into an ordered list of relative paths.

    Every entry must stay inside the package and exist relative to the
    manifest's own directory, so bad entries surface before any planning
    happens.
    """
    path = Path(path)
    if not path.is_file():
        raise NotFound(f"{path.name} does not exist in {path.parent}")

    entries = [line.strip() for line in path.read_text(encoding="utf-8").split("\n")]
    entries = [entry for entry in entries if entry]
    for entry in entries:
        normalize_entry(entry)

    missing = [
        entry for entry in entries
        if not (path.parent / entry).exists()
    ]
    if missing:
        raise ManifestEntryMissing(str(path), missing)

    logger.debug("Read %d entries from %s", len(entries), path)
    return entries


def resolve_manifests(source_dir: Path, extras: list[str] | tuple[str, ...] = ()) -> list[str]:
    """Read the base manifest plus one MANIFEST.<tag> per extra, in order.

    Entries repeated across manifests are kept; each one yields its own
    install and uninstall operations.
    """
    paths = [manifest_path(source_dir)]
    paths.extend(manifest_path(source_dir, tag) for tag in extras)

    # Check all manifests exist before reading any of them
    for path in paths:
        if not path.is_file():
            raise NotFound(f"{path.name} does not exist in source dir {source_dir}")

    entries = []
    for path in paths:
        entries.extend(read_manifest(path))
    return entries
