"""Enumerator for PNPM workspaces (pnpm-workspace.yaml)."""

from pathlib import Path

from monava.core.glob import GlobLimits
from monava.enumerators.workspaces import WorkspacesEnumerator
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.parsers.workspace_yaml import read_pnpm_workspace


class PnpmEnumerator(WorkspacesEnumerator):
    """Enumerator for packages listed in pnpm-workspace.yaml.

    Include patterns are expanded and deduplicated by path; any match whose
    root-relative path satisfies a '!' exclusion is dropped before its
    manifest is read.
    """

    def __init__(self, limits: GlobLimits | None = None) -> None:
        super().__init__(WorkspaceKind.NPM, limits)

    @property
    def kind(self) -> WorkspaceKind:
        """Return PNPM workspaces."""
        return WorkspaceKind.PNPM

    def enumerate(self, root: Path) -> list[Package]:
        """List packages matched by the PNPM workspace file."""
        return self.packages_for(root, read_pnpm_workspace(root))
