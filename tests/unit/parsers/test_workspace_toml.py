"""Unit tests for the TOML workspace readers."""

from pathlib import Path

import pytest
from monava.parsers.errors import ManifestError
from monava.parsers.toml_manifest import (
    cargo_package_name,
    poetry_dependency_tables,
    python_package_name,
    read_toml_manifest,
)
from monava.parsers.workspace_toml import (
    has_section,
    iter_section_headers,
    parse_workspace_members,
)


class TestParseWorkspaceMembers:
    """Tests for parse_workspace_members function."""

    def test_single_line_members(self) -> None:
        """Members on one line are read in order."""
        content = '[workspace]\nmembers = ["crates/core", "crates/cli"]\n'
        declaration = parse_workspace_members(content)
        assert declaration.include_patterns == ("crates/core", "crates/cli")
        assert declaration.exclude_patterns == ()

    def test_multi_line_members_and_exclude(self) -> None:
        """Arrays may span lines and carry comments."""
        content = (
            "[workspace]\n"
            'resolver = "2"\n'
            "members = [\n"
            '    "crates/*",  # all crates\n'
            '    "tools/cli",\n'
            "]\n"
            'exclude = ["crates/experimental"]\n'
        )
        declaration = parse_workspace_members(content)
        assert declaration.include_patterns == ("crates/*", "tools/cli")
        assert declaration.exclude_patterns == ("crates/experimental",)

    def test_section_ends_at_next_header(self) -> None:
        """Arrays in other sections are not members."""
        content = (
            '[package]\nname = "root"\n'
            "[workspace]\n"
            'members = ["a"]\n'
            "[workspace.dependencies]\n"
            'members = ["not-a-member"]\n'
        )
        assert parse_workspace_members(content).include_patterns == ("a",)

    def test_no_workspace_section(self) -> None:
        """A document without [workspace] yields an empty declaration."""
        declaration = parse_workspace_members('[package]\nname = "solo"\n')
        assert declaration.is_empty

    def test_bracket_inside_string(self) -> None:
        """A ']' inside a quoted entry does not close the array."""
        content = '[workspace]\nmembers = [\n  "odd]name",\n  "b",\n]\n'
        assert parse_workspace_members(content).include_patterns == ("odd]name", "b")


class TestSectionHeaders:
    """Tests for iter_section_headers and has_section."""

    def test_headers(self) -> None:
        """Table and array-of-table headers are listed without brackets."""
        content = "[tool.poetry]\n[[tool.poetry.source]]\n# [commented]\n"
        assert iter_section_headers(content) == ["tool.poetry", "tool.poetry.source"]

    def test_has_section(self) -> None:
        """has_section matches whole header names only."""
        content = "[workspace.dependencies]\n"
        assert has_section(content, "workspace.dependencies")
        assert not has_section(content, "workspace")


class TestTomlManifest:
    """Tests for member TOML manifest helpers."""

    def test_read_invalid_toml(self, tmp_path: Path) -> None:
        """Invalid TOML is a ManifestError."""
        path = tmp_path / "Cargo.toml"
        path.write_text("[package\nname = ")
        with pytest.raises(ManifestError, match="Invalid TOML"):
            read_toml_manifest(path)

    def test_cargo_package_name(self) -> None:
        """The crate name comes from [package]."""
        assert cargo_package_name({"package": {"name": "core"}}) == "core"
        assert cargo_package_name({"workspace": {"members": []}}) is None
        assert cargo_package_name({"package": {"name": ""}}) is None

    def test_python_package_name_precedence(self) -> None:
        """[tool.poetry] name wins over [project] name."""
        data = {"tool": {"poetry": {"name": "poetry-name"}}, "project": {"name": "pep621"}}
        assert python_package_name(data) == "poetry-name"
        assert python_package_name({"project": {"name": "pep621"}}) == "pep621"
        assert python_package_name({}) is None

    def test_poetry_dependency_tables(self) -> None:
        """Main deps come first, then groups, then legacy dev-dependencies."""
        data = {
            "tool": {
                "poetry": {
                    "dependencies": {"python": "^3.11"},
                    "group": {"docs": {"dependencies": {"mkdocs": "*"}}},
                    "dev-dependencies": {"pytest": "*"},
                }
            }
        }
        groups = [group for group, _table in poetry_dependency_tables(data)]
        assert groups == ["main", "docs", "dev"]
