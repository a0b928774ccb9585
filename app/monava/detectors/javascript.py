"""JavaScript workspace detector.

Several JavaScript conventions can coexist in one directory (most show a
package.json). They are resolved in a fixed order:

    Nx > Lerna > PNPM workspace > workspaces field

and a workspaces-field repository is reported as Yarn only when yarn.lock
is present without package-lock.json; otherwise it is npm.
"""

import logging
from pathlib import Path

from monava.detectors.base import Detector
from monava.models.detection import Ecosystem, WorkspaceKind
from monava.parsers.errors import ParseError
from monava.parsers.manifest import read_manifest
from monava.parsers.workspace_yaml import PNPM_WORKSPACE_FILE, read_pnpm_workspace

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
NX_JSON = "nx.json"
LERNA_JSON = "lerna.json"
YARN_LOCK = "yarn.lock"
NPM_LOCK = "package-lock.json"


class JavaScriptDetector(Detector):
    """Detector for Nx, Lerna, PNPM, Yarn and npm workspaces."""

    @property
    def ecosystem(self) -> Ecosystem:
        """Return JavaScript as the ecosystem."""
        return Ecosystem.JAVASCRIPT

    @property
    def signature_files(self) -> tuple[str, ...]:
        """Return the JavaScript workspace marker files."""
        return (NX_JSON, LERNA_JSON, PNPM_WORKSPACE_FILE, PACKAGE_JSON)

    def validate(self, directory: Path) -> WorkspaceKind | None:
        """Resolve which JavaScript convention the directory uses."""
        if self._is_valid_json(directory / NX_JSON):
            return WorkspaceKind.NX

        if self._is_valid_json(directory / LERNA_JSON):
            return WorkspaceKind.LERNA

        if self._has_pnpm_workspace(directory):
            return WorkspaceKind.PNPM

        if self._has_workspaces_field(directory):
            return self._lockfile_flavor(directory)

        return None

    def _is_valid_json(self, path: Path) -> bool:
        if not path.is_file():
            return False
        try:
            read_manifest(path)
        except ParseError as e:
            logger.warning("Ignoring invalid %s: %s", path, e)
            return False
        return True

    def _has_pnpm_workspace(self, directory: Path) -> bool:
        if not (directory / PNPM_WORKSPACE_FILE).is_file():
            return False
        try:
            read_pnpm_workspace(directory)
        except ParseError as e:
            logger.warning("Ignoring invalid %s in %s: %s", PNPM_WORKSPACE_FILE, directory, e)
            return False
        return True

    def _has_workspaces_field(self, directory: Path) -> bool:
        manifest = directory / PACKAGE_JSON
        if not manifest.is_file():
            return False
        try:
            data = read_manifest(manifest)
        except ParseError as e:
            logger.warning("Ignoring invalid %s: %s", manifest, e)
            return False
        return bool(data.get("workspaces")) or data.get("private") is True

    def _lockfile_flavor(self, directory: Path) -> WorkspaceKind:
        has_yarn = (directory / YARN_LOCK).is_file()
        has_npm = (directory / NPM_LOCK).is_file()
        if has_yarn and not has_npm:
            return WorkspaceKind.YARN
        return WorkspaceKind.NPM
