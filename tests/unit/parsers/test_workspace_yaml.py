"""Unit tests for the pnpm-workspace.yaml reader."""

from pathlib import Path

import pytest
from monava.parsers.errors import ManifestError, WorkspaceFileError
from monava.parsers.workspace_yaml import parse_pnpm_workspace, read_pnpm_workspace


class TestParsePnpmWorkspace:
    """Tests for parse_pnpm_workspace function."""

    def test_quoting_styles(self) -> None:
        """Double-quoted, single-quoted and bare entries are all read."""
        content = "packages:\n  - \"packages/*\"\n  - 'apps/*'\n  - tools/cli\n"
        declaration = parse_pnpm_workspace(content)
        assert declaration.include_patterns == ("packages/*", "apps/*", "tools/cli")

    def test_exclusions(self) -> None:
        """'!'-prefixed entries become exclusions."""
        content = 'packages:\n  - "packages/*"\n  - "!packages/*/test"\n'
        declaration = parse_pnpm_workspace(content)
        assert declaration.include_patterns == ("packages/*",)
        assert declaration.exclude_patterns == ("packages/*/test",)

    def test_comments_and_blank_lines(self) -> None:
        """Comments and blank lines inside the list are skipped."""
        content = (
            "# workspace\n"
            "packages:\n"
            "  # libraries\n"
            "  - libs/*  # trailing comment\n"
            "\n"
            "  - apps/*\n"
        )
        declaration = parse_pnpm_workspace(content)
        assert declaration.include_patterns == ("libs/*", "apps/*")

    def test_content_outside_list_ignored(self) -> None:
        """Other top-level keys do not contribute entries."""
        content = (
            "catalog:\n"
            "  - not-a-package\n"
            "packages:\n"
            "  - packages/*\n"
            "onlyBuiltDependencies:\n"
            "  - esbuild\n"
        )
        declaration = parse_pnpm_workspace(content)
        assert declaration.include_patterns == ("packages/*",)

    def test_missing_key(self) -> None:
        """A file without 'packages:' is a WorkspaceFileError."""
        with pytest.raises(WorkspaceFileError, match="Missing 'packages:'"):
            parse_pnpm_workspace("catalog:\n  react: ^18\n")

    def test_empty_list(self) -> None:
        """A 'packages:' key with no entries is a WorkspaceFileError."""
        with pytest.raises(WorkspaceFileError, match="No packages"):
            parse_pnpm_workspace("packages:\n\n# nothing\n")


class TestReadPnpmWorkspace:
    """Tests for read_pnpm_workspace function."""

    def test_reads_from_root(self, tmp_path: Path) -> None:
        """The workspace file is read from the given root."""
        (tmp_path / "pnpm-workspace.yaml").write_text("packages:\n  - packages/*\n")
        assert read_pnpm_workspace(tmp_path).include_patterns == ("packages/*",)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing workspace file is a ManifestError."""
        with pytest.raises(ManifestError):
            read_pnpm_workspace(tmp_path)
