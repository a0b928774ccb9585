"""Cargo workspace detector."""

import logging
from pathlib import Path

from monava.detectors.base import Detector
from monava.models.detection import Ecosystem, WorkspaceKind
from monava.parsers.errors import ParseError
from monava.parsers.manifest import read_text
from monava.parsers.workspace_toml import WORKSPACE_SECTION, has_section

logger = logging.getLogger(__name__)

CARGO_TOML = "Cargo.toml"


class CargoDetector(Detector):
    """Detector for Cargo workspaces (a Cargo.toml with [workspace])."""

    @property
    def ecosystem(self) -> Ecosystem:
        """Return Rust as the ecosystem."""
        return Ecosystem.RUST

    @property
    def signature_files(self) -> tuple[str, ...]:
        """Return the Cargo manifest name."""
        return (CARGO_TOML,)

    def validate(self, directory: Path) -> WorkspaceKind | None:
        """Confirm the Cargo manifest declares a workspace section."""
        try:
            content = read_text(directory / CARGO_TOML)
        except ParseError as e:
            logger.warning("Cannot read %s: %s", directory / CARGO_TOML, e)
            return None

        if has_section(content, WORKSPACE_SECTION):
            return WorkspaceKind.CARGO
        return None
