"""Error types raised by calvin."""


class CalvinError(Exception):
    """Base class for all calvin errors."""

    kind = "CalvinError"


class InvalidPackageName(CalvinError):
    """Package name is not a valid identifier."""

    kind = "InvalidPackageName"


class InvalidVersion(CalvinError):
    """VERSION file content is not a valid version tag."""

    kind = "InvalidVersion"


class NotFound(CalvinError):
    """A directory, manifest, version file or listed path is missing."""

    kind = "NotFound"


class ManifestEntryMissing(NotFound):
    """One or more manifest entries do not exist in the source directory."""

    kind = "ManifestEntryMissing"

    def __init__(self, manifest: str, entries: list[str]):
        self.manifest = manifest
        self.entries = entries
        listing = "\n".join(f"  {entry}" for entry in entries)
        super().__init__(f"Non-existing files from {manifest}:\n{listing}")


class InvalidOption(CalvinError):
    """Bad mode, extras, dry flag, or mode unsupported on this platform."""

    kind = "InvalidOption"


class TargetExists(CalvinError):
    """Destination of an operation already exists."""

    kind = "TargetExists"


class UnsupportedOperation(CalvinError):
    """Unknown action, or an action this platform cannot perform."""

    kind = "UnsupportedOperation"


class UnsupportedPlatform(UnsupportedOperation):
    """Symbolic links are not available on this platform."""


class UnexpectedState(CalvinError):
    """An internal invariant was violated."""

    kind = "UnexpectedState"
