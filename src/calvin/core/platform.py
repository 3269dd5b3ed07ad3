"""Platform detection and filesystem capabilities."""

import os
import platform
from dataclasses import dataclass


@dataclass
class PlatformInfo:
    """Current platform information."""

    os: str  # darwin, linux, windows
    symlinks: bool

    @classmethod
    def detect(cls) -> "PlatformInfo":
        """Detect current platform."""
        system = platform.system().lower()

        # Normalize OS
        if system == "darwin":
            os_name = "darwin"
        elif system == "linux":
            os_name = "linux"
        elif system == "windows" or system.startswith(("cygwin", "msys")):
            os_name = "windows"
        else:
            os_name = system

        # Windows only grants symlinks to privileged or developer-mode
        # accounts, so it is treated as unsupported.
        symlinks = os_name != "windows" and hasattr(os, "symlink")

        return cls(os=os_name, symlinks=symlinks)


def get_platform_info() -> PlatformInfo:
    """Get current platform information."""
    return PlatformInfo.detect()


def supports_symlinks() -> bool:
    """Whether link-mode installs can run on this platform."""
    return get_platform_info().symlinks
