"""Poetry project detector."""

import logging
from pathlib import Path

from monava.detectors.base import Detector
from monava.models.detection import Ecosystem, WorkspaceKind
from monava.parsers.errors import ParseError
from monava.parsers.manifest import read_text
from monava.parsers.workspace_toml import has_section

logger = logging.getLogger(__name__)

PYPROJECT_TOML = "pyproject.toml"
POETRY_LOCK = "poetry.lock"
POETRY_SECTION = "tool.poetry"


class PoetryDetector(Detector):
    """Detector for Poetry-managed repositories ([tool.poetry] in pyproject)."""

    @property
    def ecosystem(self) -> Ecosystem:
        """Return Python as the ecosystem."""
        return Ecosystem.PYTHON

    @property
    def signature_files(self) -> tuple[str, ...]:
        """Return the Poetry marker files."""
        return (PYPROJECT_TOML, POETRY_LOCK)

    def validate(self, directory: Path) -> WorkspaceKind | None:
        """Confirm pyproject.toml carries a [tool.poetry] section."""
        pyproject = directory / PYPROJECT_TOML
        if not pyproject.is_file():
            return None

        try:
            content = read_text(pyproject)
        except ParseError as e:
            logger.warning("Cannot read %s: %s", pyproject, e)
            return None

        if has_section(content, POETRY_SECTION):
            return WorkspaceKind.POETRY
        return None
