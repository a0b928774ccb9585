"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

TreeBuilder = Callable[[dict[str, Any]], Path]


def write_tree(root: Path, files: dict[str, Any]) -> Path:
    """Create files under root.

    Values that are dicts or lists are written as JSON, strings as-is.
    A key ending in '/' creates an empty directory.
    """
    for relative, content in files.items():
        path = root / relative
        if relative.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, (dict, list)):
            path.write_text(json.dumps(content))
        else:
            path.write_text(content)
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeBuilder:
    """Build a directory tree under a resolved tmp_path."""
    root = tmp_path.resolve()

    def _build(files: dict[str, Any]) -> Path:
        return write_tree(root, files)

    return _build


@pytest.fixture
def npm_workspace(make_tree: TreeBuilder) -> Path:
    """npm workspace with two packages and one non-package directory."""
    return make_tree(
        {
            "package.json": {"name": "root", "private": True, "workspaces": ["packages/*"]},
            "packages/ui/package.json": {
                "name": "@x/ui",
                "dependencies": {"react": "^18.2.0"},
                "devDependencies": {"vitest": "^1.0.0"},
            },
            "packages/api/package.json": {"name": "@x/api"},
            "packages/docs/README.md": "# not a package",
        }
    )


@pytest.fixture
def pnpm_workspace(make_tree: TreeBuilder) -> Path:
    """PNPM workspace whose nested test package is excluded."""
    return make_tree(
        {
            "package.json": {"name": "root", "private": True},
            "pnpm-workspace.yaml": 'packages:\n  - "packages/*"\n  - "!packages/*/test"\n',
            "packages/core/package.json": {"name": "core"},
            "packages/core/test/package.json": {"name": "core-test"},
        }
    )


@pytest.fixture
def cargo_workspace(make_tree: TreeBuilder) -> Path:
    """Cargo workspace with a glob member, a literal member and an exclusion."""
    return make_tree(
        {
            "Cargo.toml": (
                "[workspace]\n"
                "members = [\n"
                '    "crates/*",\n'
                '    "tools/cli",\n'
                "]\n"
                'exclude = ["crates/experimental"]\n'
            ),
            "crates/core/Cargo.toml": (
                '[package]\nname = "core"\nversion = "0.1.0"\n\n'
                "[dependencies]\n"
                'serde = { version = "1.0", features = ["derive"] }\n'
                'util = { path = "../util" }\n\n'
                "[dev-dependencies]\n"
                'proptest = "1"\n'
            ),
            "crates/util/Cargo.toml": '[package]\nname = "util"\nversion = "0.1.0"\n',
            "crates/experimental/Cargo.toml": '[package]\nname = "experimental"\n',
            "tools/cli/Cargo.toml": '[package]\nname = "cli"\nversion = "0.1.0"\n',
        }
    )


@pytest.fixture
def poetry_workspace(make_tree: TreeBuilder) -> Path:
    """Poetry monorepo with path dependencies and conventional project dirs."""
    return make_tree(
        {
            "pyproject.toml": (
                "[tool.poetry]\n"
                'name = "platform"\n'
                'version = "0.1.0"\n\n'
                "[tool.poetry.dependencies]\n"
                'python = "^3.11"\n'
                'shared = { path = "libs/shared", develop = true }\n\n'
                "[tool.poetry.group.dev.dependencies]\n"
                'pytest = "^8.0"\n'
                'tools = { path = "tooling/tools" }\n'
            ),
            "libs/shared/pyproject.toml": '[tool.poetry]\nname = "shared"\n',
            "tooling/tools/pyproject.toml": '[project]\nname = "tools"\n',
            "services/api/pyproject.toml": '[project]\nname = "api"\n',
            "services/empty/README.md": "no project here",
        }
    )
