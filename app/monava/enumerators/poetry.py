"""Enumerator for Poetry monorepos.

Poetry has no workspace declaration of its own. Members are the local path
dependencies of the root project::

    [tool.poetry.dependencies]
    shared = { path = "libs/shared", develop = true }

plus any conventional project directory (``packages/*``, ``libs/*``,
``apps/*``, ``services/*``) holding a named pyproject.toml.
"""

import logging
from pathlib import Path
from typing import Any

from monava.core.glob import safe_is_file
from monava.enumerators.base import Enumerator, dedupe_packages
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.models.workspace import GlobMatch, WorkspaceDeclaration
from monava.parsers.errors import ManifestError
from monava.parsers.toml_manifest import (
    poetry_dependency_tables,
    python_package_name,
    read_toml_manifest,
)

logger = logging.getLogger(__name__)

PYPROJECT_TOML = "pyproject.toml"
POETRY_PACKAGE_TAG = "poetry-package"
POETRY_PROJECT_PATTERNS = ("packages/*", "libs/*", "apps/*", "services/*")


def path_dependencies(data: dict[str, Any]) -> list[str]:
    """Return the ``path`` of every path dependency in all Poetry groups."""
    paths: list[str] = []
    for _group, table in poetry_dependency_tables(data):
        for spec in table.values():
            if isinstance(spec, dict) and isinstance(spec.get("path"), str):
                paths.append(spec["path"])
    return paths


class PoetryEnumerator(Enumerator):
    """Enumerator for Poetry path dependencies and conventional project dirs."""

    @property
    def kind(self) -> WorkspaceKind:
        """Return Poetry."""
        return WorkspaceKind.POETRY

    @property
    def package_tag(self) -> str:
        """Return the Poetry package tag."""
        return POETRY_PACKAGE_TAG

    def enumerate(self, root: Path) -> list[Package]:
        """List path-dependency projects, then conventional project dirs."""
        data = read_toml_manifest(root / PYPROJECT_TOML)

        packages = [
            pkg
            for pkg in (self._from_path(root, entry) for entry in path_dependencies(data))
            if pkg is not None
        ]

        declaration = WorkspaceDeclaration(include_patterns=POETRY_PROJECT_PATTERNS)
        for match in self.resolve(root, declaration, (PYPROJECT_TOML,)):
            pkg = self._from_match(match)
            if pkg is not None:
                packages.append(pkg)

        return dedupe_packages(packages)

    def _from_path(self, root: Path, entry: str) -> Package | None:
        """Build a package for one declared path dependency."""
        directory = (root / entry).resolve()
        try:
            relative = directory.relative_to(root.resolve())
        except ValueError:
            logger.debug("Ignoring path dependency outside the workspace: %s", entry)
            return None

        if not relative.parts or not safe_is_file(directory / PYPROJECT_TOML):
            return None

        return self._from_match(
            GlobMatch(
                name=directory.name,
                absolute_path=root / relative,
                relative_path=relative.as_posix(),
            )
        )

    def _from_match(self, match: GlobMatch) -> Package | None:
        manifest_path = match.absolute_path / PYPROJECT_TOML
        try:
            data = read_toml_manifest(manifest_path)
        except ManifestError as e:
            logger.warning("Skipping project manifest %s: %s", manifest_path, e)
            return None
        return self.make_package(python_package_name(data), match.absolute_path, manifest_path)
