"""Enumerator for Lerna monorepos.

Package locations come from lerna.json's own ``packages`` list. When that
list is absent, or lerna.json sets ``useWorkspaces: true``, the root
package.json ``workspaces`` field is used instead, and when neither
declares anything Lerna's default ``packages/*`` applies.
"""

import logging
from pathlib import Path
from typing import Any

from monava.core.glob import GlobLimits
from monava.enumerators.workspaces import PACKAGE_JSON, WorkspacesEnumerator, workspace_patterns
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.models.workspace import WorkspaceDeclaration
from monava.parsers.errors import ParseError
from monava.parsers.manifest import read_manifest

logger = logging.getLogger(__name__)

LERNA_JSON = "lerna.json"
DEFAULT_LERNA_PATTERNS = ("packages/*",)


def lerna_patterns(lerna: dict[str, Any]) -> list[str] | None:
    """Return lerna.json's package patterns, or None to defer to workspaces."""
    if lerna.get("useWorkspaces") is True:
        return None
    packages = lerna.get("packages")
    if not isinstance(packages, list):
        return None
    patterns = [entry for entry in packages if isinstance(entry, str)]
    return patterns or None


class LernaEnumerator(WorkspacesEnumerator):
    """Enumerator for packages declared by lerna.json."""

    def __init__(self, limits: GlobLimits | None = None) -> None:
        super().__init__(WorkspaceKind.NPM, limits)

    @property
    def kind(self) -> WorkspaceKind:
        """Return Lerna."""
        return WorkspaceKind.LERNA

    def enumerate(self, root: Path) -> list[Package]:
        """List packages from lerna.json, the workspaces field, or the default."""
        patterns = lerna_patterns(read_manifest(root / LERNA_JSON))

        if patterns is None:
            patterns = self._workspace_fallback(root)

        if not patterns:
            logger.debug("No Lerna package patterns in %s, using defaults", root)
            patterns = list(DEFAULT_LERNA_PATTERNS)

        return self.packages_for(root, WorkspaceDeclaration.from_patterns(patterns))

    def _workspace_fallback(self, root: Path) -> list[str]:
        manifest_path = root / PACKAGE_JSON
        if not manifest_path.is_file():
            return []
        try:
            return workspace_patterns(read_manifest(manifest_path))
        except ParseError as e:
            logger.warning("Ignoring unreadable %s: %s", manifest_path, e)
            return []
