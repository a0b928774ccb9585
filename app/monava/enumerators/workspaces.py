"""Enumerator for workspaces declared in package.json (npm and Yarn).

Reads the root manifest's ``workspaces`` field, in either form::

    "workspaces": ["packages/*", "apps/*"]
    "workspaces": {"packages": ["packages/*"], "nohoist": ["**/react"]}

expands each pattern and reads every match's package.json for its name.
"""

import logging
from pathlib import Path
from typing import Any

from monava.core.glob import GlobLimits
from monava.enumerators.base import Enumerator
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.models.workspace import WorkspaceDeclaration
from monava.parsers.manifest import read_manifest, read_manifest_name

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
NPM_PACKAGE_TAG = "npm-package"


def workspace_patterns(manifest: dict[str, Any]) -> list[str]:
    """Extract workspace patterns from a decoded root package.json.

    Args:
        manifest: Decoded package.json object.

    Returns:
        String patterns from the array form or the {packages: [...]} form;
        empty when the field is absent or has another shape.
    """
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if not isinstance(workspaces, list):
        return []

    patterns: list[str] = []
    for entry in workspaces:
        if isinstance(entry, str):
            patterns.append(entry)
        else:
            logger.debug("Ignoring non-string workspace entry: %r", entry)
    return patterns


class WorkspacesEnumerator(Enumerator):
    """Enumerator for the package.json workspaces field."""

    def __init__(
        self,
        kind: WorkspaceKind = WorkspaceKind.NPM,
        limits: GlobLimits | None = None,
    ) -> None:
        super().__init__(limits)
        if kind not in (WorkspaceKind.NPM, WorkspaceKind.YARN):
            msg = f"Workspaces field enumeration does not apply to {kind.value}"
            raise ValueError(msg)
        self._kind = kind

    @property
    def kind(self) -> WorkspaceKind:
        """Return npm or Yarn workspaces."""
        return self._kind

    @property
    def package_tag(self) -> str:
        """Return the npm package tag."""
        return NPM_PACKAGE_TAG

    def enumerate(self, root: Path) -> list[Package]:
        """List packages matched by the root workspaces field."""
        manifest = read_manifest(root / PACKAGE_JSON)
        declaration = WorkspaceDeclaration.from_patterns(workspace_patterns(manifest))
        if declaration.is_empty:
            logger.debug("No workspace patterns declared in %s", root / PACKAGE_JSON)
            return []
        return self.packages_for(root, declaration)

    def packages_for(self, root: Path, declaration: WorkspaceDeclaration) -> list[Package]:
        """Resolve a declaration into packages named by their package.json.

        Matches whose manifest is malformed or unnamed are skipped.
        """
        packages: list[Package] = []
        for match in self.resolve(root, declaration, (PACKAGE_JSON,)):
            manifest_path = match.absolute_path / PACKAGE_JSON
            pkg = self.make_package(
                read_manifest_name(manifest_path),
                match.absolute_path,
                manifest_path,
            )
            if pkg is not None:
                packages.append(pkg)
        return packages
