"""calvin - versioned package installs with generated uninstall scripts."""

__version__ = "0.1.0"
