"""Package models for workspace enumeration.

This module defines the value objects produced by the enumerators:
member packages of a monorepo and the dependencies they declare.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

# Accepted shape for ecosystem-declared package names (npm scopes, crates, dists)
PACKAGE_NAME_PATTERN = re.compile(r"^[\w@][\w@\-./]*$")
MAX_PACKAGE_NAME_LENGTH = 255


def is_valid_package_name(name: object) -> bool:
    """Check whether a declared package name is usable.

    Args:
        name: Value read from a manifest's name field.

    Returns:
        True if the value is a non-empty string of accepted characters
        no longer than MAX_PACKAGE_NAME_LENGTH.
    """
    if not isinstance(name, str) or not name:
        return False
    if len(name) > MAX_PACKAGE_NAME_LENGTH:
        return False
    return PACKAGE_NAME_PATTERN.match(name) is not None


@dataclass(frozen=True, slots=True)
class Package:
    """A member package of a monorepo.

    Instances are read-only snapshots; enumeration results are never
    mutated after construction.

    Attributes:
        name: Ecosystem-declared identifier (npm name, crate name, ...).
        path: Absolute path to the package root directory.
        manifest_path: Absolute path to the manifest that named the package.
        ecosystem_tag: Kind of package, e.g. 'npm-package' or 'cargo-package'.
    """

    name: str
    path: Path
    manifest_path: Path
    ecosystem_tag: str

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not self.path.is_absolute():
            msg = f"Package path must be absolute, got {self.path}"
            raise ValueError(msg)
        if not self.manifest_path.is_absolute():
            msg = f"Manifest path must be absolute, got {self.manifest_path}"
            raise ValueError(msg)

    def contains(self, path: Path) -> bool:
        """Check if a path lies inside this package's directory."""
        return path == self.path or self.path in path.parents

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "path": str(self.path),
            "manifest_path": str(self.manifest_path),
            "ecosystem_tag": self.ecosystem_tag,
        }


class DependencyKind(str, Enum):
    """Section a dependency was declared in."""

    RUNTIME = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"
    OPTIONAL = "optionalDependencies"
    BUILD = "buildDependencies"


@dataclass(frozen=True, slots=True)
class Dependency:
    """A dependency declared by a package manifest.

    Attributes:
        name: Name of the depended-on package.
        version: Version requirement as written (or a path/git marker).
        kind: Section the dependency was declared in.
    """

    name: str
    version: str
    kind: DependencyKind

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "version": self.version, "kind": self.kind.value}
