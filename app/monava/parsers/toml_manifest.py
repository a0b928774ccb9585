"""Reader for member TOML manifests (Cargo.toml, pyproject.toml).

Only used on individual member manifests to read a package name or its
dependency tables; workspace membership itself goes through the
line-oriented reader in :mod:`monava.parsers.workspace_toml`.
"""

import tomllib
from pathlib import Path
from typing import Any

from monava.parsers.errors import ManifestError
from monava.parsers.manifest import MAX_MANIFEST_SIZE, read_text


def read_toml_manifest(path: Path, max_size: int = MAX_MANIFEST_SIZE) -> dict[str, Any]:
    """Read and decode a TOML manifest.

    Raises:
        ManifestError: If the file is unreadable, too large or not valid TOML.
    """
    content = read_text(path, max_size)
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ManifestError(msg) from e


def get_table(data: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Walk nested tables, returning an empty dict if any level is missing."""
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return {}
        current = current.get(key, {})
    return current if isinstance(current, dict) else {}


def cargo_package_name(data: dict[str, Any]) -> str | None:
    """Return ``[package] name`` from a decoded Cargo.toml."""
    name = get_table(data, "package").get("name")
    return name if isinstance(name, str) and name else None


def python_package_name(data: dict[str, Any]) -> str | None:
    """Return the project name from a decoded pyproject.toml.

    ``[tool.poetry] name`` takes precedence over ``[project] name``.
    """
    for table in (get_table(data, "tool", "poetry"), get_table(data, "project")):
        name = table.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def poetry_dependency_tables(data: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return Poetry dependency tables with their group names.

    Returns:
        List of (group, table) pairs: ('main', [tool.poetry.dependencies])
        first, then each [tool.poetry.group.<name>.dependencies], plus the
        legacy [tool.poetry.dev-dependencies] as group 'dev'.
    """
    poetry = get_table(data, "tool", "poetry")
    tables: list[tuple[str, dict[str, Any]]] = [("main", get_table(poetry, "dependencies"))]

    for group, body in get_table(poetry, "group").items():
        if isinstance(body, dict):
            tables.append((group, get_table(body, "dependencies")))

    legacy_dev = get_table(poetry, "dev-dependencies")
    if legacy_dev:
        tables.append(("dev", legacy_dev))

    return tables
