"""Package data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class InstallMode(str, Enum):
    """How package items are placed in the target directory."""

    COPY = "copy"
    LINK = "link"


@dataclass(frozen=True)
class PackageDescriptor:
    """Everything needed to install one package, fixed for one invocation."""

    name: str
    source_dir: Path
    target_dir: Path
    mode: InstallMode = InstallMode.COPY
    extras: tuple[str, ...] = ()
    dry: bool = False


@dataclass
class InstalledPackage:
    """A package recorded by an uninstall script in a target directory."""

    name: str
    version: str
    target_dir: str
    script_path: Path
    generated_at: datetime | None = None
    operations: int = 0
    backups: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for the script header."""
        return {
            "package": self.name,
            "version": self.version,
            "target_dir": self.target_dir,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
        }

    @classmethod
    def from_dict(cls, script_path: Path, data: dict) -> "InstalledPackage":
        """Create InstalledPackage from a parsed script document."""
        generated_at = data.get("generated_at")
        if isinstance(generated_at, str):
            generated_at = datetime.fromisoformat(generated_at)

        operations = data.get("operations") or []
        return cls(
            name=data["package"],
            version=str(data["version"]),
            target_dir=data.get("target_dir", ""),
            script_path=script_path,
            generated_at=generated_at,
            operations=len(operations),
            backups=[
                op["source"] for op in operations
                if op.get("action") == "move"
            ],
        )
