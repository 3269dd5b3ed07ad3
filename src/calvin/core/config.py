"""Configuration and naming conventions for calvin."""

from dataclasses import dataclass
from pathlib import Path
import os


@dataclass
class CalvinConfig:
    """Configuration for calvin installs."""

    version_filename: str
    manifest_filename: str
    script_template: str
    backup_template: str
    default_mode: str
    log_level: str

    @classmethod
    def default(cls) -> "CalvinConfig":
        """Create config with default names, honoring environment overrides."""
        return cls(
            version_filename="VERSION",
            manifest_filename="MANIFEST",
            script_template="uninstall_{name}.py",
            backup_template="_backuped_by_{name}_{version}_",
            default_mode=os.environ.get("CALVIN_MODE", "copy"),
            log_level=os.environ.get("CALVIN_LOG_LEVEL", "INFO").upper(),
        )

    def script_name(self, package_name: str) -> str:
        """File name of the uninstall script for a package."""
        return self.script_template.format(name=package_name)

    def script_path(self, package_name: str, target_dir: Path) -> Path:
        """Path of the uninstall script for a package in a target directory."""
        return Path(target_dir) / self.script_name(package_name)

    def backup_prefix(self, package_name: str, version: str) -> str:
        """Prefix given to items moved aside by an install."""
        return self.backup_template.format(name=package_name, version=version)


# Global config instance
_config: CalvinConfig | None = None


def get_config() -> CalvinConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CalvinConfig.default()
    return _config


def set_config(config: CalvinConfig | None) -> None:
    """Set a custom configuration (useful for testing).

    Passing None resets to the defaults on next access.
    """
    global _config
    _config = config
