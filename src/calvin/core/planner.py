"""Operation planning: manifest entries to install and uninstall operations."""

import logging
import os
from pathlib import Path, PurePosixPath

from calvin.core.config import get_config
from calvin.core.errors import NotFound
from calvin.core.manifest import normalize_entry
from calvin.models.operation import Backup, Operation, OperationPlan
from calvin.models.package import InstallMode, PackageDescriptor

logger = logging.getLogger(__name__)


def backup_prefix(package_name: str, version: str) -> str:
    """Prefix for backups, unique per package name and version."""
    return get_config().backup_prefix(package_name, version)


def add_prefix(relative_path: str, prefix: str) -> str:
    """Prefix the last component of a relative path: a/b.txt -> a/<prefix>b.txt."""
    path = PurePosixPath(relative_path)
    return (path.parent / f"{prefix}{path.name}").as_posix()


def plan(
    descriptor: PackageDescriptor,
    version: str,
    relative_paths: list[str],
) -> OperationPlan:
    """Plan the install of every entry, in manifest order.

    Install operations use absolute paths. Uninstall operations use paths
    relative to the target directory, where the uninstall script lives.
    An entry whose destination already exists is moved aside first, and
    restored by the uninstall script after the installed copy is removed.
    """
    source_dir = Path(descriptor.source_dir).absolute()
    target_dir = Path(descriptor.target_dir).absolute()
    prefix = backup_prefix(descriptor.name, version)

    result = OperationPlan()

    for entry in relative_paths:
        relative = normalize_entry(entry)
        source = source_dir / relative
        destination = target_dir / relative

        if not os.path.lexists(source):
            raise NotFound(f"{source} does not exist in source dir")

        backup = None
        if os.path.lexists(destination):
            backup = add_prefix(relative, prefix)
            logger.warning(
                '"%s" already exists in target directory. It will be backed up to "%s"',
                relative,
                backup,
            )
            result.install_ops.append(Operation.move(destination, target_dir / backup))
            result.backups.append(Backup(original=relative, backup=backup))

        if descriptor.mode == InstallMode.LINK:
            result.install_ops.append(Operation.link(source, destination))
        else:
            result.install_ops.append(Operation.copy(source, destination))

        # Installed item goes first, then the original comes back
        result.uninstall_ops.append(Operation.remove(relative))
        if backup is not None:
            result.uninstall_ops.append(
                Operation.move(backup, relative, skip_source_check=True)
            )

    return result
