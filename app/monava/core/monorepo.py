"""Monorepo service: cached detection and enumeration.

The service is the single entry point a front end talks to. Detection
returns an explicit DetectionResult context which is passed back into
every later call; the service keeps no "current workspace" state.

Example:
    >>> service = MonorepoService()
    >>> context = service.detect(Path.cwd())
    >>> if context is not None:
    ...     for pkg in service.enumerate(context.root, context.subtype):
    ...         print(pkg.name)
"""

import logging
from pathlib import Path

from monava.core import dependencies
from monava.core.cache import Cache, CacheNamespace
from monava.core.config import MonavaConfig, load_config_or_default
from monava.detectors import detect_workspace
from monava.enumerators import enumerate_packages
from monava.models.detection import DetectionResult, MonorepoInfo, WorkspaceKind
from monava.models.package import Dependency, Package

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "monava:core"
DETECTION_TTL = 300
PACKAGES_TTL = 300
# Entries watching the root config file can live longer; edits invalidate them
PACKAGES_FILE_TTL = 600

# Checked in order; the first existing file invalidates cached enumerations
MAIN_CONFIG_FILES = (
    "package.json",
    "nx.json",
    "lerna.json",
    "pnpm-workspace.yaml",
    "Cargo.toml",
    "pyproject.toml",
)


def find_main_config_file(root: Path) -> Path | None:
    """Return the first existing main config file under a workspace root."""
    for name in MAIN_CONFIG_FILES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


class MonorepoService:
    """Detect monorepos and enumerate their packages with caching.

    Attributes:
        config: Active configuration.
        cache: Cache backing detection and enumeration results.
    """

    def __init__(self, config: MonavaConfig | None = None, cache: Cache | None = None) -> None:
        """Initialize the service.

        Args:
            config: Configuration to use. Loaded from disk (or defaults)
                when None.
            cache: Cache to store results in. Built from the cache section
                of the configuration when None.
        """
        self.config = config or load_config_or_default()
        self.cache = cache or Cache(
            enabled=self.config.cache.enabled,
            ttl=self.config.cache.ttl,
            max_entries=self.config.cache.max_entries,
            sweep_interval=self.config.cache.sweep_interval,
        )
        self._store: CacheNamespace = self.cache.namespace(CACHE_NAMESPACE)

    def detect(self, start: Path, max_depth: int | None = None) -> DetectionResult | None:
        """Find the workspace root governing a directory.

        Args:
            start: Directory (or file) to start the upward walk from.
            max_depth: Directories to test; configuration default when None.

        Returns:
            DetectionResult for the nearest workspace root, or None.
        """
        depth = max_depth if max_depth is not None else self.config.detection.max_depth
        key = f"detection:{start.resolve()}:{depth}"

        cached = self._store.get(key)
        if cached is not None:
            logger.debug("Detection cache hit for %s", start)
            return cached

        result = detect_workspace(start, depth)
        if result is not None:
            self._store.set(key, result, DETECTION_TTL)
        return result

    def _packages(self, root: Path, subtype: WorkspaceKind) -> tuple[Package, ...]:
        """Return all packages of a workspace, served from cache when fresh."""
        key = f"packages:{root}:{subtype.value}"
        config_file = find_main_config_file(root)

        cached = self._store.get_with_file(key, config_file)
        if cached is not None:
            logger.debug("Package cache hit for %s", root)
            return cached

        packages = tuple(enumerate_packages(root, subtype, self.config.scan.to_limits()))

        if config_file is not None:
            stored = self._store.set_with_file(key, packages, config_file, PACKAGES_FILE_TTL)
        else:
            stored = self._store.set(key, packages, PACKAGES_TTL)
        if not stored:
            logger.debug("Package list for %s was not cached", root)

        return packages

    def enumerate(
        self,
        root: Path,
        subtype: WorkspaceKind,
        type_filter: str | None = None,
        limit: int | None = None,
    ) -> list[Package]:
        """List the member packages of a workspace.

        Args:
            root: Workspace root from a DetectionResult.
            subtype: Workspace convention from a DetectionResult.
            type_filter: Keep only packages with this ecosystem tag.
            limit: Return at most this many packages, after sorting by name.

        Returns:
            Fresh list of packages; never raises for malformed input.
        """
        # One cache entry per workspace, however the root was spelled
        root = root.resolve()
        packages = list(self._packages(root, subtype))

        if type_filter is not None:
            packages = [pkg for pkg in packages if pkg.ecosystem_tag == type_filter]

        if limit is not None:
            packages = sorted(packages, key=lambda pkg: pkg.name)[: max(limit, 0)]

        return packages

    def list_packages(self, context: DetectionResult) -> list[Package]:
        """List every package of a detected workspace."""
        return self.enumerate(context.root, context.subtype)

    def get_package(self, context: DetectionResult, name: str) -> Package | None:
        """Find a package by its declared name."""
        for pkg in self.list_packages(context):
            if pkg.name == name:
                return pkg
        return None

    def get_dependencies(self, package: Package) -> list[Dependency]:
        """List the dependencies declared by a package's manifest."""
        return dependencies.get_dependencies(package)

    def get_current_package(self, context: DetectionResult, file_path: Path) -> Package | None:
        """Find the package containing a file.

        Nested packages resolve to the innermost one.

        Args:
            context: Detected workspace.
            file_path: File or directory inside the workspace.

        Returns:
            Package whose directory is the deepest ancestor of file_path.
        """
        target = file_path.resolve()
        owners = [pkg for pkg in self.list_packages(context) if pkg.contains(target)]
        if not owners:
            return None
        return max(owners, key=lambda pkg: len(pkg.path.parts))

    def describe(self, context: DetectionResult) -> MonorepoInfo:
        """Summarize a detected workspace with its packages."""
        packages = sorted(self.list_packages(context), key=lambda pkg: pkg.name)
        return MonorepoInfo(detection=context, packages=tuple(packages))

    def reset(self) -> int:
        """Drop every cached detection and enumeration result.

        Returns:
            Number of cache entries removed.
        """
        removed = self._store.clear()
        logger.debug("Cleared %d cached monorepo entries", removed)
        return removed
