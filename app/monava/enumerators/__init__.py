"""Package enumerators, one per workspace convention.

This module provides the single dispatch from a detected WorkspaceKind to
its enumerator, and the never-raising entry point used by the service.
"""

import logging
from pathlib import Path

from monava.core.glob import GlobLimits
from monava.enumerators.base import Enumerator, dedupe_packages
from monava.enumerators.cargo import CargoEnumerator
from monava.enumerators.lerna import LernaEnumerator
from monava.enumerators.nx import NxEnumerator
from monava.enumerators.pnpm import PnpmEnumerator
from monava.enumerators.poetry import PoetryEnumerator
from monava.enumerators.workspaces import WorkspacesEnumerator
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.parsers.errors import ParseError

logger = logging.getLogger(__name__)


def get_enumerator(kind: WorkspaceKind, limits: GlobLimits | None = None) -> Enumerator:
    """Get the enumerator for a workspace convention.

    Args:
        kind: Detected workspace convention.
        limits: Optional glob expansion bounds.

    Returns:
        Enumerator instance for the convention.

    Raises:
        ValueError: If kind is not a known convention.
    """
    if kind in (WorkspaceKind.NPM, WorkspaceKind.YARN):
        return WorkspacesEnumerator(kind, limits)
    if kind == WorkspaceKind.NX:
        return NxEnumerator(limits)
    if kind == WorkspaceKind.LERNA:
        return LernaEnumerator(limits)
    if kind == WorkspaceKind.PNPM:
        return PnpmEnumerator(limits)
    if kind == WorkspaceKind.CARGO:
        return CargoEnumerator(limits)
    if kind == WorkspaceKind.POETRY:
        return PoetryEnumerator(limits)

    msg = f"Unknown workspace kind: {kind}"
    raise ValueError(msg)


def enumerate_packages(
    root: Path,
    kind: WorkspaceKind,
    limits: GlobLimits | None = None,
) -> list[Package]:
    """Enumerate the member packages of a detected workspace root.

    Never raises for filesystem or format problems: an unreadable root or
    workspace declaration yields an empty list and an ERROR log entry.

    Args:
        root: Path of the workspace root; relative paths are resolved
            against the working directory.
        kind: Detected workspace convention.
        limits: Optional glob expansion bounds.

    Returns:
        Packages with unique paths, possibly empty.
    """
    enumerator = get_enumerator(kind, limits)
    try:
        root = root.resolve()
        packages = enumerator.enumerate(root)
    except (OSError, ParseError) as e:
        logger.error("Failed to enumerate %s workspace at %s: %s", kind.value, root, e)
        return []

    packages = dedupe_packages(packages)
    logger.debug("Enumerated %d %s packages at %s", len(packages), kind.value, root)
    return packages


__all__ = [
    "CargoEnumerator",
    "Enumerator",
    "LernaEnumerator",
    "NxEnumerator",
    "PnpmEnumerator",
    "PoetryEnumerator",
    "WorkspacesEnumerator",
    "enumerate_packages",
    "get_enumerator",
]
