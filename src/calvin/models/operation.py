"""Filesystem operation data models."""

from dataclasses import dataclass, field
from enum import Enum


class Action(str, Enum):
    """Kind of filesystem action an operation performs."""

    COPY = "copy"
    LINK = "link"
    MOVE = "move"
    REMOVE = "remove"


@dataclass(frozen=True)
class Operation:
    """A single planned filesystem action.

    Operations are plain data. Install operations carry absolute paths,
    uninstall operations carry paths relative to the target directory.
    """

    action: Action
    source: str
    destination: str | None = None
    skip_source_check: bool = False
    skip_destination_check: bool = False

    @classmethod
    def copy(cls, source: str, destination: str) -> "Operation":
        return cls(Action.COPY, str(source), str(destination))

    @classmethod
    def link(cls, source: str, destination: str) -> "Operation":
        return cls(Action.LINK, str(source), str(destination))

    @classmethod
    def move(cls, source: str, destination: str, skip_source_check: bool = False) -> "Operation":
        return cls(
            Action.MOVE,
            str(source),
            str(destination),
            skip_source_check=skip_source_check,
        )

    @classmethod
    def remove(cls, path: str) -> "Operation":
        return cls(Action.REMOVE, str(path))

    def to_dict(self) -> dict:
        """Convert to dictionary for YAML serialization."""
        data = {"action": self.action.value, "source": self.source}
        if self.destination is not None:
            data["destination"] = self.destination
        if self.skip_source_check:
            data["skip_source_check"] = True
        if self.skip_destination_check:
            data["skip_destination_check"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Operation":
        """Create Operation from dictionary.

        Raises ValueError on an unknown action.
        """
        return cls(
            action=Action(data["action"]),
            source=data["source"],
            destination=data.get("destination"),
            skip_source_check=data.get("skip_source_check", False),
            skip_destination_check=data.get("skip_destination_check", False),
        )


@dataclass
class Backup:
    """A pre-existing target item moved aside before installing over it."""

    original: str  # relative to the target directory
    backup: str


@dataclass
class OperationPlan:
    """Install operations to apply now and their inverse for later."""

    install_ops: list[Operation] = field(default_factory=list)
    uninstall_ops: list[Operation] = field(default_factory=list)
    backups: list[Backup] = field(default_factory=list)
