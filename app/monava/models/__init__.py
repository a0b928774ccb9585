"""Data models for monava.

This module exports the value objects shared between detection,
enumeration and the cache.
"""

from monava.models.detection import DetectionResult, Ecosystem, MonorepoInfo, WorkspaceKind
from monava.models.package import (
    Dependency,
    DependencyKind,
    Package,
    is_valid_package_name,
)
from monava.models.workspace import GlobMatch, WorkspaceDeclaration

__all__ = [
    "Dependency",
    "DependencyKind",
    "DetectionResult",
    "Ecosystem",
    "GlobMatch",
    "MonorepoInfo",
    "Package",
    "WorkspaceDeclaration",
    "WorkspaceKind",
    "is_valid_package_name",
]
