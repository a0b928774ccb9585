"""Abstract base class for workspace detectors.

This module defines the Detector interface that every ecosystem
detector implements.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from monava.models.detection import DetectionResult, Ecosystem, WorkspaceKind


class Detector(ABC):
    """Abstract base class for all ecosystem detectors.

    Detectors classify a single directory: a cheap file-presence check
    first, then content validation that names the workspace convention.

    Example:
        >>> detector = CargoDetector()
        >>> result = detector.detect(Path("/repo"))
        >>> if result is not None:
        ...     print(result.subtype.value)
    """

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        """Return the ecosystem this detector recognizes."""

    @property
    @abstractmethod
    def signature_files(self) -> tuple[str, ...]:
        """Return file names whose presence makes a directory a candidate."""

    @abstractmethod
    def validate(self, directory: Path) -> WorkspaceKind | None:
        """Inspect file contents to confirm the workspace convention.

        Args:
            directory: Candidate directory that passed the presence check.

        Returns:
            The workspace convention, or None if validation fails.
        """

    def matches_signature(self, directory: Path) -> bool:
        """Check whether any signature file exists in the directory."""
        return any((directory / name).is_file() for name in self.signature_files)

    def detect(self, directory: Path) -> DetectionResult | None:
        """Classify a directory as a workspace root of this ecosystem.

        Args:
            directory: Absolute directory to test.

        Returns:
            DetectionResult if both the presence and content checks pass,
            None otherwise.
        """
        if not self.matches_signature(directory):
            return None

        kind = self.validate(directory)
        if kind is None:
            return None
        return DetectionResult(ecosystem=self.ecosystem, subtype=kind, root=directory)
