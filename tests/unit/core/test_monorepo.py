"""Unit tests for MonorepoService."""

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from monava.core import monorepo
from monava.core.cache import Cache
from monava.core.config import MonavaConfig
from monava.core.monorepo import MonorepoService, find_main_config_file
from monava.models.detection import DetectionResult, Ecosystem, WorkspaceKind
from monava.models.package import DependencyKind

TreeBuilder = Callable[[dict[str, Any]], Path]


@pytest.fixture
def service() -> MonorepoService:
    """Service with default config and a private cache."""
    return MonorepoService(MonavaConfig(), Cache(ttl=300))


def _add_package(root: Path, name: str) -> None:
    directory = root / "packages" / name
    directory.mkdir(parents=True)
    (directory / "package.json").write_text(json.dumps({"name": name}))


def _touch_later(path: Path, seconds: float = 10.0) -> None:
    mtime = path.stat().st_mtime + seconds
    os.utime(path, (mtime, mtime))


class TestFindMainConfigFile:
    """Tests for find_main_config_file function."""

    def test_first_existing(self, tmp_path: Path) -> None:
        """package.json is preferred over the other config files."""
        (tmp_path / "nx.json").write_text("{}")
        (tmp_path / "package.json").write_text("{}")
        assert find_main_config_file(tmp_path) == tmp_path / "package.json"

    def test_none(self, tmp_path: Path) -> None:
        """Directories without a config file yield None."""
        assert find_main_config_file(tmp_path) is None


class TestDetect:
    """Tests for MonorepoService.detect."""

    def test_detects_npm(self, service: MonorepoService, npm_workspace: Path) -> None:
        """An npm workspace is detected from a package directory."""
        context = service.detect(npm_workspace / "packages" / "ui")
        assert context is not None
        assert context.ecosystem is Ecosystem.JAVASCRIPT
        assert context.subtype is WorkspaceKind.NPM
        assert context.root == npm_workspace

    def test_result_is_cached(self, service: MonorepoService, npm_workspace: Path) -> None:
        """A second detection for the same start is served from cache."""
        with patch.object(
            monorepo, "detect_workspace", wraps=monorepo.detect_workspace
        ) as mock_detect:
            first = service.detect(npm_workspace)
            second = service.detect(npm_workspace)

        assert first == second
        assert mock_detect.call_count == 1

    def test_negative_result_not_cached(self, service: MonorepoService, tmp_path: Path) -> None:
        """A failed detection is retried on the next call."""
        assert service.detect(tmp_path, max_depth=1) is None
        (tmp_path / "Cargo.toml").write_text("[workspace]\nmembers = []\n")

        context = service.detect(tmp_path, max_depth=1)
        assert context is not None
        assert context.subtype is WorkspaceKind.CARGO

    def test_depth_from_config(self, tmp_path: Path) -> None:
        """The configured detection depth applies when none is given."""
        root = tmp_path.resolve()
        (root / "package.json").write_text(json.dumps({"private": True}))
        start = root / "a" / "b"
        start.mkdir(parents=True)

        shallow = MonorepoService(
            MonavaConfig.model_validate({"detection": {"max_depth": 2}}), Cache()
        )
        assert shallow.detect(start) is None
        assert MonorepoService(MonavaConfig(), Cache()).detect(start) is not None


class TestEnumerate:
    """Tests for MonorepoService.enumerate."""

    def test_lists_packages(self, service: MonorepoService, npm_workspace: Path) -> None:
        """All member packages are returned."""
        packages = service.enumerate(npm_workspace, WorkspaceKind.NPM)
        assert {pkg.name for pkg in packages} == {"@x/ui", "@x/api"}

    def test_cached_until_config_changes(
        self, service: MonorepoService, npm_workspace: Path
    ) -> None:
        """New members appear only once the root config file changes."""
        first = service.enumerate(npm_workspace, WorkspaceKind.NPM)
        _add_package(npm_workspace, "cli")

        assert service.enumerate(npm_workspace, WorkspaceKind.NPM) == first

        _touch_later(npm_workspace / "package.json")
        names = {pkg.name for pkg in service.enumerate(npm_workspace, WorkspaceKind.NPM)}
        assert names == {"@x/ui", "@x/api", "cli"}

    def test_returns_fresh_lists(self, service: MonorepoService, npm_workspace: Path) -> None:
        """Mutating a returned list does not affect the cached result."""
        packages = service.enumerate(npm_workspace, WorkspaceKind.NPM)
        packages.clear()
        assert len(service.enumerate(npm_workspace, WorkspaceKind.NPM)) == 2

    def test_type_filter(self, service: MonorepoService, npm_workspace: Path) -> None:
        """Only packages with the requested tag are returned."""
        assert len(service.enumerate(npm_workspace, WorkspaceKind.NPM, "npm-package")) == 2
        assert service.enumerate(npm_workspace, WorkspaceKind.NPM, "cargo-package") == []

    def test_limit_sorted_by_name(self, service: MonorepoService, npm_workspace: Path) -> None:
        """The limit keeps the first packages by name."""
        packages = service.enumerate(npm_workspace, WorkspaceKind.NPM, limit=1)
        assert [pkg.name for pkg in packages] == ["@x/api"]

    def test_malformed_root_returns_empty(
        self, service: MonorepoService, make_tree: TreeBuilder
    ) -> None:
        """A broken root manifest yields an empty list instead of an error."""
        root = make_tree({"package.json": "{ broken"})
        assert service.enumerate(root, WorkspaceKind.NPM) == []

    def test_relative_root(
        self, service: MonorepoService, npm_workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A relative root lists absolute packages and shares the absolute root's entry."""
        monkeypatch.chdir(npm_workspace)
        packages = service.enumerate(Path("."), WorkspaceKind.NPM)

        assert {pkg.name for pkg in packages} == {"@x/ui", "@x/api"}
        assert all(pkg.path.is_absolute() for pkg in packages)

        _add_package(npm_workspace, "cli")
        assert service.enumerate(npm_workspace, WorkspaceKind.NPM) == packages

    def test_disabled_cache_still_enumerates(self, npm_workspace: Path) -> None:
        """A disabled cache only costs repeated work."""
        service = MonorepoService(MonavaConfig(), Cache(enabled=False))
        assert len(service.enumerate(npm_workspace, WorkspaceKind.NPM)) == 2
        assert len(service.enumerate(npm_workspace, WorkspaceKind.NPM)) == 2


class TestLookups:
    """Tests for package lookups and summaries."""

    @pytest.fixture
    def context(self, npm_workspace: Path) -> DetectionResult:
        return DetectionResult.for_kind(WorkspaceKind.NPM, npm_workspace)

    def test_get_package(self, service: MonorepoService, context: DetectionResult) -> None:
        """Packages are found by declared name."""
        pkg = service.get_package(context, "@x/ui")
        assert pkg is not None
        assert pkg.path == context.root / "packages" / "ui"
        assert service.get_package(context, "@x/missing") is None

    def test_get_current_package(
        self, service: MonorepoService, context: DetectionResult
    ) -> None:
        """A file resolves to the package containing it."""
        target = context.root / "packages" / "api" / "src" / "index.ts"
        pkg = service.get_current_package(context, target)
        assert pkg is not None
        assert pkg.name == "@x/api"

    def test_get_current_package_outside(
        self, service: MonorepoService, context: DetectionResult
    ) -> None:
        """Files outside every package resolve to None."""
        assert service.get_current_package(context, context.root / "README.md") is None

    def test_innermost_package_wins(self, make_tree: TreeBuilder) -> None:
        """Nested packages resolve to the deepest one."""
        root = make_tree(
            {
                "package.json": {"workspaces": ["packages/**"]},
                "packages/outer/package.json": {"name": "outer"},
                "packages/outer/inner/package.json": {"name": "inner"},
            }
        )
        service = MonorepoService(MonavaConfig(), Cache())
        context = DetectionResult.for_kind(WorkspaceKind.NPM, root)
        pkg = service.get_current_package(context, root / "packages" / "outer" / "inner" / "x.js")
        assert pkg is not None
        assert pkg.name == "inner"

    def test_get_dependencies(self, service: MonorepoService, context: DetectionResult) -> None:
        """Dependencies are read from the package manifest."""
        pkg = service.get_package(context, "@x/ui")
        assert pkg is not None
        deps = {dep.name: dep.kind for dep in service.get_dependencies(pkg)}
        assert deps == {"react": DependencyKind.RUNTIME, "vitest": DependencyKind.DEV}

    def test_describe(self, service: MonorepoService, context: DetectionResult) -> None:
        """describe summarizes the workspace with sorted packages."""
        info = service.describe(context)
        assert info.detection == context
        assert [pkg.name for pkg in info.packages] == ["@x/api", "@x/ui"]
        assert info.to_dict()["package_count"] == 2


class TestReset:
    """Tests for MonorepoService.reset."""

    def test_clears_cached_results(self, service: MonorepoService, npm_workspace: Path) -> None:
        """reset drops detection and package entries."""
        service.detect(npm_workspace)
        service.enumerate(npm_workspace, WorkspaceKind.NPM)

        assert service.reset() == 2
        assert service.reset() == 0

    def test_leaves_other_namespaces(self, npm_workspace: Path) -> None:
        """Entries outside the service namespace survive a reset."""
        cache = Cache()
        cache.set("other:key", 1)
        service = MonorepoService(MonavaConfig(), cache)
        service.detect(npm_workspace)

        service.reset()
        assert cache.get("other:key") == 1
