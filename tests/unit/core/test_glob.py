"""Unit tests for workspace glob expansion and matching."""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from monava.core.glob import (
    MAX_SCAN_DEPTH,
    GlobLimits,
    expand,
    match_path,
    matches_any,
    split_pattern,
)

PKG: dict[str, str] = {"name": "pkg"}


def _relative(matches: list[Any]) -> set[str]:
    return {m.relative_path for m in matches}


class TestSplitPattern:
    """Tests for split_pattern function."""

    def test_normalizes_segments(self) -> None:
        """Leading './', empty and '.' segments are dropped."""
        assert split_pattern("./packages//*/") == ["packages", "*"]

    def test_collapses_recursive_wildcards(self) -> None:
        """Consecutive '**' segments collapse into one."""
        assert split_pattern("libs/**/**/x") == ["libs", "**", "x"]


class TestMatchPath:
    """Tests for match_path function."""

    @pytest.mark.parametrize(
        ("pattern", "path", "expected"),
        [
            ("packages/*", "packages/core", True),
            ("packages/*", "packages/core/test", False),
            ("packages/*/test", "packages/core/test", True),
            ("packages/test*", "packages/test-utils", True),
            ("packages/test*", "packages/core", False),
            ("libs/**", "libs/a/b", True),
            ("libs/**", "libs", True),
            ("**/test", "packages/core/test", True),
            ("**/test", "test", True),
            ("pkg-?", "pkg-a", True),
            ("pkg-?", "pkg-ab", False),
            ("Packages/*", "packages/core", False),
        ],
    )
    def test_segment_rules(self, pattern: str, path: str, expected: bool) -> None:
        """'*' and '?' stay within a segment; '**' spans zero or more."""
        assert match_path(pattern, path) is expected

    def test_ignores_exclusion_prefix(self) -> None:
        """A leading '!' is stripped before matching."""
        assert match_path("!packages/*/test", "packages/core/test")

    def test_empty_pattern_matches_nothing(self) -> None:
        """An empty pattern never matches."""
        assert not match_path("", "packages/core")

    def test_matches_any(self) -> None:
        """matches_any is true when one pattern matches."""
        assert matches_any(["apps/*", "packages/test*"], "packages/test-utils")
        assert not matches_any([], "packages/core")


class TestExpand:
    """Tests for expand function."""

    def test_single_wildcard(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """'packages/*' yields direct children holding a manifest."""
        root = make_tree(
            {
                "packages/a/package.json": PKG,
                "packages/b/package.json": PKG,
                "packages/b/nested/package.json": PKG,
            }
        )
        matches, is_exclusion = expand(root, "packages/*")
        assert not is_exclusion
        assert _relative(matches) == {"packages/a", "packages/b"}
        assert all(m.absolute_path == root / m.relative_path for m in matches)

    def test_recursive_wildcard(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """'libs/**' yields packages at any depth below libs."""
        root = make_tree({"libs/a/pkg/package.json": PKG, "libs/pkg/package.json": PKG})
        matches, _ = expand(root, "libs/**")
        assert _relative(matches) == {"libs/a/pkg", "libs/pkg"}

    def test_no_manifest_filtered(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """Directories without a manifest are never returned."""
        root = make_tree({"packages/docs/README.md": "# docs", "packages/ui/package.json": PKG})
        matches, _ = expand(root, "packages/*")
        assert _relative(matches) == {"packages/ui"}

    def test_exclusion_pattern(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """Exclusion patterns never produce matches."""
        root = make_tree({"packages/test/package.json": PKG})
        matches, is_exclusion = expand(root, "!packages/*")
        assert matches == []
        assert is_exclusion

    def test_literal_path(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """A literal pattern names one directory."""
        root = make_tree({"tools/cli/Cargo.toml": "[package]\n"})
        matches, _ = expand(root, "tools/cli", ("Cargo.toml",))
        assert [m.name for m in matches] == ["cli"]

    def test_root_is_never_a_match(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """The workspace root is not its own member, even under '**'."""
        root = make_tree({"package.json": PKG, "pkg/package.json": PKG})
        matches, _ = expand(root, "**")
        assert _relative(matches) == {"pkg"}

    def test_skips_excluded_dirs(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """Wildcards do not descend into node_modules or hidden directories."""
        root = make_tree(
            {
                "packages/ui/package.json": PKG,
                "packages/node_modules/dep/package.json": PKG,
                "packages/.cache/package.json": PKG,
            }
        )
        matches, _ = expand(root, "packages/**")
        assert _relative(matches) == {"packages/ui"}

    def test_include_hidden(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """include_hidden lets wildcards enter dot-directories."""
        root = make_tree({"packages/.internal/package.json": PKG})
        matches, _ = expand(root, "packages/*", limits=GlobLimits(include_hidden=True))
        assert _relative(matches) == {"packages/.internal"}

    def test_max_matches(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """Expansion stops at the match ceiling."""
        root = make_tree({f"packages/p{i}/package.json": PKG for i in range(5)})
        matches, _ = expand(root, "packages/*", limits=GlobLimits(max_matches=2))
        assert len(matches) == 2

    def test_max_depth(self, make_tree: Callable[[dict[str, Any]], Path]) -> None:
        """Matches deeper than max_depth are not found."""
        root = make_tree({"libs/a/b/c/package.json": PKG, "libs/x/package.json": PKG})
        matches, _ = expand(root, "libs/**", limits=GlobLimits(max_depth=2))
        assert _relative(matches) == {"libs/x"}

    def test_missing_base_directory(self, tmp_path: Path) -> None:
        """A pattern under a missing directory yields nothing."""
        matches, _ = expand(tmp_path, "packages/*")
        assert matches == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinked_dirs_not_followed(
        self, make_tree: Callable[[dict[str, Any]], Path], tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        """Wildcards do not follow symlinks out of the workspace."""
        outside = tmp_path_factory.mktemp("outside")
        (outside / "package.json").write_text('{"name": "outside"}')
        root = make_tree({"packages/ui/package.json": PKG})
        (root / "packages" / "link").symlink_to(outside, target_is_directory=True)

        matches, _ = expand(root, "packages/*")
        assert _relative(matches) == {"packages/ui"}


class TestGlobLimits:
    """Tests for GlobLimits validation."""

    def test_defaults(self) -> None:
        """Defaults match the configuration defaults."""
        limits = GlobLimits()
        assert limits.max_matches == 1000
        assert limits.max_depth == 10
        assert "node_modules" in limits.skip_dirs

    def test_rejects_depth_above_cap(self) -> None:
        """max_depth is capped."""
        with pytest.raises(ValueError, match="max_depth"):
            GlobLimits(max_depth=MAX_SCAN_DEPTH + 1)

    def test_rejects_zero_matches(self) -> None:
        """max_matches must be positive."""
        with pytest.raises(ValueError, match="max_matches"):
            GlobLimits(max_matches=0)
