"""Enumerator for Cargo workspaces.

Members come from the root Cargo.toml::

    [workspace]
    members = ["crates/*", "tools/cli"]
    exclude = ["crates/experimental"]

Each member's own Cargo.toml supplies the crate name. Members without a
readable manifest or a ``[package] name`` (virtual manifests) are skipped.
"""

import logging
from pathlib import Path

from monava.enumerators.base import Enumerator
from monava.models.detection import WorkspaceKind
from monava.models.package import Package
from monava.parsers.errors import ManifestError
from monava.parsers.manifest import read_text
from monava.parsers.toml_manifest import cargo_package_name, read_toml_manifest
from monava.parsers.workspace_toml import parse_workspace_members

logger = logging.getLogger(__name__)

CARGO_TOML = "Cargo.toml"
CARGO_PACKAGE_TAG = "cargo-package"


class CargoEnumerator(Enumerator):
    """Enumerator for crates listed in [workspace] members."""

    @property
    def kind(self) -> WorkspaceKind:
        """Return Cargo workspace."""
        return WorkspaceKind.CARGO

    @property
    def package_tag(self) -> str:
        """Return the Cargo package tag."""
        return CARGO_PACKAGE_TAG

    def enumerate(self, root: Path) -> list[Package]:
        """List member crates named by their own Cargo.toml."""
        declaration = parse_workspace_members(read_text(root / CARGO_TOML))
        if declaration.is_empty:
            logger.debug("No workspace members declared in %s", root / CARGO_TOML)
            return []

        packages: list[Package] = []
        for match in self.resolve(root, declaration, (CARGO_TOML,)):
            manifest_path = match.absolute_path / CARGO_TOML
            try:
                data = read_toml_manifest(manifest_path)
            except ManifestError as e:
                logger.warning("Skipping crate manifest %s: %s", manifest_path, e)
                continue

            pkg = self.make_package(cargo_package_name(data), match.absolute_path, manifest_path)
            if pkg is not None:
                packages.append(pkg)

        return packages
