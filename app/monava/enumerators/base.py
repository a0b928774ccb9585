"""Abstract base class for package enumerators.

This module defines the Enumerator interface that every workspace
convention implements, plus the include/exclude resolution shared by
the glob-driven conventions.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path

from monava.core.glob import GlobLimits, expand, matches_any
from monava.models.detection import WorkspaceKind
from monava.models.package import Package, is_valid_package_name
from monava.models.workspace import GlobMatch, WorkspaceDeclaration

logger = logging.getLogger(__name__)


def dedupe_packages(packages: Iterable[Package]) -> list[Package]:
    """Drop packages whose path was already seen, keeping the first."""
    seen: set[Path] = set()
    unique: list[Package] = []
    for pkg in packages:
        if pkg.path in seen:
            continue
        seen.add(pkg.path)
        unique.append(pkg)
    return unique


class Enumerator(ABC):
    """Abstract base class for all package enumerators.

    Enumerators list the member packages of an already-detected workspace
    root. Malformed members are skipped, never raised.

    Example:
        >>> enumerator = PnpmEnumerator()
        >>> for pkg in enumerator.enumerate(Path("/repo")):
        ...     print(f"{pkg.name}: {pkg.path}")
    """

    def __init__(self, limits: GlobLimits | None = None) -> None:
        self._limits = limits or GlobLimits()

    @property
    @abstractmethod
    def kind(self) -> WorkspaceKind:
        """Return the workspace convention this enumerator handles."""

    @property
    @abstractmethod
    def package_tag(self) -> str:
        """Return the ecosystem tag stamped on produced packages."""

    @abstractmethod
    def enumerate(self, root: Path) -> list[Package]:
        """List member packages under a workspace root.

        Args:
            root: Absolute path of the detected workspace root.

        Returns:
            Packages with unique paths, possibly empty.

        Raises:
            ParseError: If the root's own workspace declaration cannot be
                read (per-member failures are skipped instead).
            OSError: If the root itself cannot be accessed.
        """

    def resolve(
        self,
        root: Path,
        declaration: WorkspaceDeclaration,
        manifest_names: Sequence[str],
    ) -> list[GlobMatch]:
        """Expand include patterns and drop matches vetoed by exclusions.

        Args:
            root: Workspace root the patterns are relative to.
            declaration: Parsed include/exclude patterns.
            manifest_names: Manifest files that make a directory a package.

        Returns:
            Matches deduplicated by absolute path, in declaration order.
        """
        seen: set[Path] = set()
        resolved: list[GlobMatch] = []

        for pattern in declaration.include_patterns:
            matches, is_exclusion = expand(root, pattern, manifest_names, self._limits)
            if is_exclusion:
                continue
            for match in matches:
                if match.absolute_path in seen:
                    continue
                seen.add(match.absolute_path)
                if matches_any(declaration.exclude_patterns, match.relative_path):
                    logger.debug("Excluded %s by workspace declaration", match.relative_path)
                    continue
                resolved.append(match)

        return resolved

    def make_package(self, name: str | None, path: Path, manifest_path: Path) -> Package | None:
        """Build a package, or None if the declared name is unusable.

        Args:
            name: Name read from the manifest.
            path: Package root directory.
            manifest_path: Manifest the name was read from.

        Returns:
            Package stamped with this enumerator's tag, or None.
        """
        if name is None:
            return None
        if not is_valid_package_name(name):
            logger.warning("Skipping package at %s with invalid name %r", path, name)
            return None
        return Package(
            name=name,
            path=path,
            manifest_path=manifest_path,
            ecosystem_tag=self.package_tag,
        )
