"""Enumerator for Nx workspaces.

Nx projects live one level below a fixed set of directories. A project is
named by its project.json, then its package.json, then its directory.
"""

import logging
from pathlib import Path

from monava.core.glob import safe_is_dir, safe_is_file
from monava.enumerators.base import Enumerator
from monava.enumerators.workspaces import PACKAGE_JSON
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.parsers.manifest import read_manifest_name

logger = logging.getLogger(__name__)

PROJECT_JSON = "project.json"
NX_PROJECT_DIRS = ("apps", "libs", "packages")
NX_PROJECT_TAG = "nx-project"


class NxEnumerator(Enumerator):
    """Enumerator for Nx projects under apps/, libs/ and packages/."""

    @property
    def kind(self) -> WorkspaceKind:
        """Return Nx."""
        return WorkspaceKind.NX

    @property
    def package_tag(self) -> str:
        """Return the Nx project tag."""
        return NX_PROJECT_TAG

    def enumerate(self, root: Path) -> list[Package]:
        """List project directories holding a project.json or package.json."""
        packages: list[Package] = []

        for dirname in NX_PROJECT_DIRS:
            base = root / dirname
            if not safe_is_dir(base):
                continue
            try:
                children = sorted(base.iterdir())
            except OSError as e:
                logger.warning("Cannot scan %s: %s", base, e)
                continue

            for child in children:
                if not safe_is_dir(child, follow_symlinks=False):
                    continue
                pkg = self._project(child)
                if pkg is not None:
                    packages.append(pkg)
                    if len(packages) >= self._limits.max_matches:
                        logger.warning("Nx project limit reached at %s", child)
                        return packages

        return packages

    def _project(self, directory: Path) -> Package | None:
        """Build the package for one candidate project directory."""
        project_json = directory / PROJECT_JSON
        package_json = directory / PACKAGE_JSON

        candidates = [path for path in (project_json, package_json) if safe_is_file(path)]
        if not candidates:
            return None

        for manifest_path in candidates:
            name = read_manifest_name(manifest_path)
            if name is not None:
                return self.make_package(name, directory, manifest_path)

        return self.make_package(directory.name, directory, candidates[0])
