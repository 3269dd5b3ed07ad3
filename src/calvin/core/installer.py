"""Install orchestration.

An install validates everything up front, runs the uninstall script left
by a previous install of the same package, then plans and applies the new
operations and writes a fresh uninstall script into the target directory.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from calvin.core.config import get_config
from calvin.core.errors import InvalidOption, NotFound, UnexpectedState
from calvin.core.executor import execute
from calvin.core.manifest import resolve_manifests
from calvin.core.planner import plan
from calvin.core.platform import supports_symlinks
from calvin.core.script import emit, load_script, run_script
from calvin.core.version import resolve_version, validate_package_name, versions_match
from calvin.models.operation import OperationPlan
from calvin.models.package import InstalledPackage, InstallMode, PackageDescriptor

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Outcome of an install."""

    descriptor: PackageDescriptor
    version: str
    plan: OperationPlan
    script_path: Path
    script: str
    trace: list[str] = field(default_factory=list)
    previous_trace: list[str] | None = None


def validate_inputs(
    package_name: str,
    source_dir: Path,
    target_dir: Path,
    mode: str | InstallMode = InstallMode.COPY,
    extras: list[str] | tuple[str, ...] = (),
    dry: bool = False,
    symlinks_supported: bool | None = None,
) -> PackageDescriptor:
    """Check caller inputs and build the descriptor. Touches nothing."""
    validate_package_name(package_name)

    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise NotFound(f"source_dir {source_dir} does not exist")

    try:
        mode = InstallMode(mode)
    except ValueError:
        raise InvalidOption(f'mode can either be "copy" or "link", got {mode!r}')

    if symlinks_supported is None:
        symlinks_supported = supports_symlinks()
    if mode == InstallMode.LINK and not symlinks_supported:
        raise InvalidOption("link mode is not available on this platform")

    if not isinstance(extras, (list, tuple)) or not all(isinstance(e, str) for e in extras):
        raise InvalidOption("extras must be a list of strings")

    if isinstance(dry, bool) or dry in (0, 1):
        dry = bool(dry)
    else:
        raise InvalidOption(f"dry must be either True or False, got {dry!r}")

    target_dir = Path(target_dir)
    if target_dir.exists() and not target_dir.is_dir():
        raise InvalidOption(f"target_dir {target_dir} is not a directory")

    return PackageDescriptor(
        name=package_name,
        source_dir=source_dir.absolute(),
        target_dir=target_dir.absolute(),
        mode=mode,
        extras=tuple(extras),
        dry=dry,
    )


def find_uninstall_script(package_name: str, target_dir: Path) -> Path | None:
    """Find the uninstall script of a package in a target directory.

    Package names are case-sensitive, so only the exact script name
    matches. On a case-insensitive filesystem a script of a package whose
    name differs only in case would be overwritten, so that raises
    UnexpectedState instead.
    """
    target_dir = Path(target_dir)
    if not target_dir.is_dir():
        return None

    expected = get_config().script_name(package_name)
    script_path = target_dir / expected
    names = {path.name for path in target_dir.iterdir()}
    if expected in names:
        return script_path if script_path.is_file() else None

    if script_path.exists():
        clashing = sorted(name for name in names if name.casefold() == expected.casefold())
        raise UnexpectedState(
            f"{expected} clashes with {', '.join(clashing)} in {target_dir}"
        )
    return None


def uninstall_package(package_name: str, target_dir: Path, dry: bool = False) -> list[str] | None:
    """Run the uninstall script of a package, if there is one.

    Returns the script's trace, or None when the package has no script in
    target_dir. The script is discarded once it has run.
    """
    validate_package_name(package_name)

    script_path = find_uninstall_script(package_name, target_dir)
    if script_path is None:
        logger.debug("No uninstall script for %s in %s", package_name, target_dir)
        return None

    trace = run_script(script_path, dry=dry)
    if not dry and script_path.exists():
        script_path.unlink()
    return trace


def list_installed(target_dir: Path) -> list[InstalledPackage]:
    """Packages recorded by the uninstall scripts in a target directory."""
    target_dir = Path(target_dir)
    if not target_dir.is_dir():
        raise NotFound(f"target_dir {target_dir} does not exist")

    pattern = get_config().script_name("*")
    packages = []
    for script_path in sorted(target_dir.glob(pattern)):
        try:
            data = load_script(script_path)
        except UnexpectedState as e:
            logger.warning("Skipping %s: %s", script_path.name, e)
            continue
        packages.append(InstalledPackage.from_dict(script_path, data))
    return packages


def _previous_version(package_name: str, target_dir: Path) -> str | None:
    script_path = find_uninstall_script(package_name, target_dir)
    if script_path is None:
        return None
    return str(load_script(script_path)["version"])


def install_package(
    package_name: str,
    source_dir: Path,
    target_dir: Path,
    mode: str | InstallMode | None = None,
    extras: list[str] | tuple[str, ...] = (),
    dry: bool = False,
    symlinks_supported: bool | None = None,
) -> InstallResult:
    """Install a package from source_dir into target_dir.

    Args:
        package_name: Package name, a valid identifier
        source_dir: Directory holding VERSION, MANIFEST and MANIFEST.<extra>
        target_dir: Installation directory, created if absent
        mode: "copy" or "link" (defaults to the configured mode)
        extras: Tags of extra manifests to install as well
        dry: If True, report the operations without applying them
        symlinks_supported: Override of the platform symlink capability

    Nothing is modified until the name, directories, options, version,
    every manifest entry and any previous uninstall script have been
    validated. A failure while applying operations is not rolled back.
    """
    config = get_config()
    if mode is None:
        mode = config.default_mode
    if symlinks_supported is None:
        symlinks_supported = supports_symlinks()

    descriptor = validate_inputs(
        package_name, source_dir, target_dir, mode, extras, dry, symlinks_supported
    )
    version = resolve_version(descriptor.source_dir)
    entries = resolve_manifests(descriptor.source_dir, descriptor.extras)

    previous = _previous_version(descriptor.name, descriptor.target_dir)
    if previous is not None:
        if versions_match(previous, version):
            logger.info("Reinstalling %s %s", descriptor.name, version)
        else:
            logger.info("Replacing %s %s with %s", descriptor.name, previous, version)

    if not descriptor.dry:
        descriptor.target_dir.mkdir(parents=True, exist_ok=True)

    previous_trace = uninstall_package(descriptor.name, descriptor.target_dir, dry=descriptor.dry)

    operations = plan(descriptor, version, entries)

    script_path = config.script_path(descriptor.name, descriptor.target_dir)
    header = InstalledPackage(
        name=descriptor.name,
        version=version,
        target_dir=str(descriptor.target_dir),
        script_path=script_path,
        generated_at=datetime.now().replace(microsecond=0),
    ).to_dict()

    try:
        trace = execute(
            operations.install_ops,
            dry=descriptor.dry,
            symlinks_supported=symlinks_supported,
        )
    except Exception:
        # Leave the full inverse plan behind for manual recovery
        if not descriptor.dry:
            emit(operations.uninstall_ops, script_path, header)
            logger.error(
                "Install of %s stopped part way. Uninstall script written to %s",
                descriptor.name,
                script_path,
            )
        raise

    script = emit(operations.uninstall_ops, script_path, header, dry=descriptor.dry)

    return InstallResult(
        descriptor=descriptor,
        version=version,
        plan=operations,
        script_path=script_path,
        script=script,
        trace=trace,
        previous_trace=previous_trace,
    )
