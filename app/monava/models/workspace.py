"""Workspace declaration models.

Intermediate values passed between the format parsers, the pattern
matcher and the enumerators.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

EXCLUSION_PREFIX = "!"


@dataclass(frozen=True, slots=True)
class GlobMatch:
    """A directory matched by a workspace glob pattern.

    Attributes:
        name: Directory basename.
        absolute_path: Absolute path to the matched directory.
        relative_path: POSIX path relative to the workspace root, used for
            exclusion testing.
    """

    name: str
    absolute_path: Path
    relative_path: str


@dataclass(frozen=True, slots=True)
class WorkspaceDeclaration:
    """Member patterns declared by a workspace file.

    Exclusion patterns are stored without their leading '!'.

    Attributes:
        include_patterns: Patterns that produce member packages.
        exclude_patterns: Patterns that veto matches of include patterns.
    """

    include_patterns: tuple[str, ...] = field(default_factory=tuple)
    exclude_patterns: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "WorkspaceDeclaration":
        """Partition raw patterns into includes and '!'-prefixed excludes.

        Args:
            patterns: Patterns as written in the workspace file.

        Returns:
            WorkspaceDeclaration with blank entries dropped.
        """
        includes: list[str] = []
        excludes: list[str] = []
        for raw in patterns:
            pattern = raw.strip()
            if pattern.startswith(EXCLUSION_PREFIX):
                stripped = pattern[len(EXCLUSION_PREFIX) :].strip()
                if stripped:
                    excludes.append(stripped)
            elif pattern:
                includes.append(pattern)
        return cls(include_patterns=tuple(includes), exclude_patterns=tuple(excludes))

    @property
    def is_empty(self) -> bool:
        """Check if the declaration has no include patterns."""
        return not self.include_patterns
