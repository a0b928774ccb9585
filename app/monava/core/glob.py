"""Workspace glob pattern matching.

Expands ecosystem-declared membership patterns into concrete package
directories. A pattern is split on '/' into segments:

- a literal name (``packages``), matched exactly and case-sensitively;
- a wildcard segment (``*``, ``pkg-*``, ``v?``), matching one path component;
- ``**``, matching zero or more path components.

A directory is yielded only if, after all segments are consumed, it holds
one of the manifest files for the ecosystem. Directories without a
manifest are traversed but never yielded. Patterns prefixed with '!' are
exclusions: they never produce matches and are only used through
:func:`match_path` to veto matches of include patterns.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

from monava.models.workspace import EXCLUSION_PREFIX, GlobMatch

logger = logging.getLogger(__name__)

RECURSIVE_WILDCARD = "**"
_WILDCARD_CHARS = frozenset("*?[")

# Hard cap on recursion regardless of configuration
MAX_SCAN_DEPTH = 20

DEFAULT_SKIP_DIRS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "target",
    "dist",
    "build",
    "__pycache__",
    ".venv",
    "venv",
)


@dataclass(frozen=True, slots=True)
class GlobLimits:
    """Bounds for a single pattern expansion.

    Attributes:
        max_matches: Stop after this many matches.
        max_depth: Maximum directory depth below the root to descend.
        include_hidden: Whether wildcards may enter dot-directories.
        skip_dirs: Directory names wildcards never descend into.
    """

    max_matches: int = 1000
    max_depth: int = 10
    include_hidden: bool = False
    skip_dirs: tuple[str, ...] = field(default=DEFAULT_SKIP_DIRS)

    def __post_init__(self) -> None:
        """Validate limits after initialization."""
        if self.max_matches < 1:
            msg = f"max_matches must be at least 1, got {self.max_matches}"
            raise ValueError(msg)
        if not (0 <= self.max_depth <= MAX_SCAN_DEPTH):
            msg = f"max_depth must be between 0 and {MAX_SCAN_DEPTH}, got {self.max_depth}"
            raise ValueError(msg)


def is_exclusion(pattern: str) -> bool:
    """Check if a pattern is an exclusion ('!'-prefixed) pattern."""
    return pattern.strip().startswith(EXCLUSION_PREFIX)


def split_pattern(pattern: str) -> list[str]:
    """Split a pattern into normalized path segments.

    Leading './', empty segments and '.' segments are dropped, and runs of
    consecutive '**' collapse into one.
    """
    segments: list[str] = []
    for segment in pattern.strip().split("/"):
        if segment in ("", "."):
            continue
        if segment == RECURSIVE_WILDCARD and segments and segments[-1] == RECURSIVE_WILDCARD:
            continue
        segments.append(segment)
    return segments


def _has_wildcard(segment: str) -> bool:
    return any(char in _WILDCARD_CHARS for char in segment)


def _match_segment(segment: str, name: str) -> bool:
    """Match one path component against one non-recursive pattern segment."""
    if _has_wildcard(segment):
        return fnmatchcase(name, segment)
    return name == segment


def match_path(pattern: str, relative_path: str) -> bool:
    """Test a root-relative path against a glob pattern.

    Uses the same segment rules as :func:`expand`: ``*`` and ``?`` never
    cross a '/', and ``**`` spans zero or more components. A leading '!'
    on the pattern is ignored so exclusion patterns can be passed as-is.

    Args:
        pattern: Glob pattern, optionally '!'-prefixed.
        relative_path: POSIX path relative to the workspace root.

    Returns:
        True if the whole path matches the whole pattern.
    """
    stripped = pattern.strip()
    if stripped.startswith(EXCLUSION_PREFIX):
        stripped = stripped[len(EXCLUSION_PREFIX) :]

    segments = split_pattern(stripped)
    parts = [part for part in relative_path.split("/") if part not in ("", ".")]
    if not segments:
        return False

    def _match(seg_index: int, part_index: int) -> bool:
        if seg_index == len(segments):
            return part_index == len(parts)

        segment = segments[seg_index]
        if segment == RECURSIVE_WILDCARD:
            # Zero components, or consume one and stay on '**'
            if _match(seg_index + 1, part_index):
                return True
            return part_index < len(parts) and _match(seg_index, part_index + 1)

        if part_index == len(parts):
            return False
        if not _match_segment(segment, parts[part_index]):
            return False
        return _match(seg_index + 1, part_index + 1)

    return _match(0, 0)


def matches_any(patterns: Sequence[str], relative_path: str) -> bool:
    """Check if a root-relative path matches any of the given patterns."""
    return any(match_path(pattern, relative_path) for pattern in patterns)


def safe_is_file(path: Path) -> bool:
    """Check for a regular file, treating stat failures as absence."""
    try:
        return path.is_file()
    except OSError as e:
        logger.debug("Cannot stat %s: %s", path, e)
        return False


def safe_is_dir(path: Path, follow_symlinks: bool = True) -> bool:
    """Check for a directory, treating stat failures as absence.

    With follow_symlinks=False a symlink to a directory is not a directory.
    """
    try:
        if not follow_symlinks and path.is_symlink():
            return False
        return path.is_dir()
    except OSError as e:
        logger.debug("Cannot stat %s: %s", path, e)
        return False


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root)
    except (OSError, ValueError):
        return False
    return True


class _Expansion:
    """State for expanding one include pattern under one root."""

    def __init__(
        self,
        root: Path,
        segments: list[str],
        manifest_names: Sequence[str],
        limits: GlobLimits,
    ) -> None:
        self._root = root
        self._resolved_root = root.resolve()
        self._segments = segments
        self._manifest_names = tuple(manifest_names)
        self._limits = limits
        self._seen: set[Path] = set()
        self._visited: set[tuple[Path, int]] = set()
        self.matches: list[GlobMatch] = []
        self.truncated = False

    @property
    def _full(self) -> bool:
        return len(self.matches) >= self._limits.max_matches

    def _has_manifest(self, directory: Path) -> bool:
        return any(safe_is_file(directory / name) for name in self._manifest_names)

    def _subdirectories(self, directory: Path) -> list[Path]:
        """List directories a wildcard may descend into, sorted by name."""
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Cannot scan directory %s: %s", directory, e)
            return []

        children: list[Path] = []
        for entry in entries:
            if entry.name in self._limits.skip_dirs:
                continue
            if entry.name.startswith(".") and not self._limits.include_hidden:
                continue
            # Symlinked directories are never followed by wildcards
            if not safe_is_dir(entry, follow_symlinks=False):
                continue
            children.append(entry)
        return children

    def _add(self, directory: Path, relative: list[str]) -> None:
        # The workspace root is never a member of itself
        if not relative or directory in self._seen:
            return
        if not _is_within(directory, self._resolved_root):
            logger.warning("Skipping match outside workspace root: %s", directory)
            return
        if not self._has_manifest(directory):
            return

        self._seen.add(directory)
        self.matches.append(
            GlobMatch(
                name=directory.name,
                absolute_path=directory,
                relative_path="/".join(relative),
            )
        )

    def walk(self, directory: Path, relative: list[str], index: int) -> None:
        if self._full:
            self.truncated = True
            return

        depth = len(relative)
        if depth > self._limits.max_depth:
            logger.debug("Depth limit reached at %s", directory)
            return

        # '**' can reach the same (directory, segment) state along several routes
        state = (directory, index)
        if state in self._visited:
            return
        self._visited.add(state)

        if index == len(self._segments):
            self._add(directory, relative)
            return

        segment = self._segments[index]

        if segment == RECURSIVE_WILDCARD:
            self.walk(directory, relative, index + 1)
            for child in self._subdirectories(directory):
                self.walk(child, [*relative, child.name], index)
            return

        if not _has_wildcard(segment):
            child = directory / segment
            if safe_is_dir(child):
                self.walk(child, [*relative, segment], index + 1)
            return

        for child in self._subdirectories(directory):
            if _match_segment(segment, child.name):
                self.walk(child, [*relative, child.name], index + 1)


def expand(
    root: Path,
    pattern: str,
    manifest_names: Sequence[str] = ("package.json",),
    limits: GlobLimits | None = None,
) -> tuple[list[GlobMatch], bool]:
    """Expand a workspace pattern into matching package directories.

    Args:
        root: Workspace root the pattern is relative to.
        pattern: Glob pattern as declared (e.g. 'packages/*', 'libs/**').
        manifest_names: Files of which at least one must exist in a
            directory for it to count as a match.
        limits: Result count and depth bounds.

    Returns:
        Tuple of (matches, is_exclusion). Exclusion patterns return no
        matches and is_exclusion=True.
    """
    if is_exclusion(pattern):
        return [], True

    segments = split_pattern(pattern)
    if not segments:
        return [], False

    limits = limits or GlobLimits()
    expansion = _Expansion(root, segments, manifest_names, limits)
    expansion.walk(root, [], 0)

    if expansion.truncated:
        logger.warning(
            "Pattern %r reached the %d match limit under %s; results truncated",
            pattern,
            limits.max_matches,
            root,
        )

    return expansion.matches, False
