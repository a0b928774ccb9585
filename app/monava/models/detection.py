"""Detection models.

A DetectionResult is the explicit context value returned by detection and
passed to every later call (enumeration, lookups, dependency queries).
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from monava.models.package import Package


class Ecosystem(str, Enum):
    """Language ecosystem a workspace belongs to."""

    JAVASCRIPT = "javascript"
    RUST = "rust"
    PYTHON = "python"


class WorkspaceKind(str, Enum):
    """Specific workspace-declaration convention (the detection subtype).

    Each member maps to exactly one enumerator implementation.
    """

    NPM = "npm-workspaces"
    YARN = "yarn-workspaces"
    NX = "nx"
    LERNA = "lerna"
    PNPM = "pnpm-workspaces"
    CARGO = "cargo-workspace"
    POETRY = "poetry"

    @property
    def ecosystem(self) -> Ecosystem:
        """Return the ecosystem family this convention belongs to."""
        if self is WorkspaceKind.CARGO:
            return Ecosystem.RUST
        if self is WorkspaceKind.POETRY:
            return Ecosystem.PYTHON
        return Ecosystem.JAVASCRIPT


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Outcome of classifying a directory as a monorepo root.

    Attributes:
        ecosystem: Ecosystem family (javascript, rust, python).
        subtype: Workspace convention selecting the enumerator.
        root: Absolute path of the detected workspace root.
    """

    ecosystem: Ecosystem
    subtype: WorkspaceKind
    root: Path

    def __post_init__(self) -> None:
        """Validate detection data after initialization."""
        if self.subtype.ecosystem is not self.ecosystem:
            msg = f"Subtype {self.subtype.value} does not belong to {self.ecosystem.value}"
            raise ValueError(msg)
        if not self.root.is_absolute():
            msg = f"Workspace root must be absolute, got {self.root}"
            raise ValueError(msg)

    @classmethod
    def for_kind(cls, kind: WorkspaceKind, root: Path) -> "DetectionResult":
        """Build a result whose ecosystem is derived from the subtype."""
        return cls(ecosystem=kind.ecosystem, subtype=kind, root=root)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "ecosystem": self.ecosystem.value,
            "subtype": self.subtype.value,
            "root": str(self.root),
        }


@dataclass(frozen=True, slots=True)
class MonorepoInfo:
    """Summary of a detected monorepo and its packages.

    Attributes:
        detection: The detection context the summary was built from.
        packages: Enumerated member packages (immutable).
    """

    detection: DetectionResult
    packages: tuple[Package, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.detection.to_dict(),
            "packages": [pkg.to_dict() for pkg in self.packages],
            "package_count": len(self.packages),
        }
