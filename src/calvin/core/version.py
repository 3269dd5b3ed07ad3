"""Package identity: version tag and package name validation."""

import keyword
import re
from pathlib import Path

from calvin.core.config import get_config
from calvin.core.errors import InvalidPackageName, InvalidVersion, NotFound


VERSION_PATTERN = re.compile(r"[A-Za-z0-9_.]+")


def parse_version(content: str) -> str:
    """Extract and validate a version tag from VERSION file content."""
    if content.endswith("\n"):
        content = content[:-1]
    version = content.strip()

    if not VERSION_PATTERN.fullmatch(version):
        raise InvalidVersion(
            f'Bad version tag "{version}". Must only contain alphanumerical '
            "characters, dot or underscore"
        )
    return version


def resolve_version(source_dir: Path) -> str:
    """Read the version tag from <source_dir>/VERSION.

    The tag is returned verbatim. Use versions_match() to compare tags.
    """
    version_file = Path(source_dir) / get_config().version_filename
    if not version_file.is_file():
        raise NotFound(f"{version_file.name} file does not exist in {source_dir}")

    return parse_version(version_file.read_text(encoding="utf-8"))


def versions_match(a: str, b: str) -> bool:
    """Version tags are case-insensitive: "stable_v1.2" == "Stable_V1.2"."""
    return a.casefold() == b.casefold()


def validate_package_name(name: str) -> bool:
    """Check that a package name is a valid, non-reserved identifier."""
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidPackageName(
            f"Package name must be a valid identifier, got {name!r}"
        )
    return True
