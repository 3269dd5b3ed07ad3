"""Data models for calvin."""

from calvin.models.operation import Action, Backup, Operation, OperationPlan
from calvin.models.package import InstalledPackage, InstallMode, PackageDescriptor

__all__ = [
    "Action",
    "Backup",
    "Operation",
    "OperationPlan",
    "InstalledPackage",
    "InstallMode",
    "PackageDescriptor",
]
