"""Dependency extraction from package manifests.

Reads the dependency sections of a package's own manifest. The manifest
format is chosen by file name (package.json, Cargo.toml, pyproject.toml);
unreadable or malformed manifests yield no dependencies.
"""

import logging
from typing import Any

from monava.core.glob import safe_is_file
from monava.models.package import Dependency, DependencyKind, Package
from monava.parsers.errors import ManifestError
from monava.parsers.manifest import read_manifest
from monava.parsers.toml_manifest import get_table, poetry_dependency_tables, read_toml_manifest

logger = logging.getLogger(__name__)

JS_DEPENDENCY_SECTIONS = (
    DependencyKind.RUNTIME,
    DependencyKind.DEV,
    DependencyKind.PEER,
    DependencyKind.OPTIONAL,
)

CARGO_DEPENDENCY_SECTIONS = {
    "dependencies": DependencyKind.RUNTIME,
    "dev-dependencies": DependencyKind.DEV,
    "build-dependencies": DependencyKind.BUILD,
}

# Poetry lists the interpreter constraint among the main dependencies
POETRY_PYTHON_KEY = "python"


def describe_requirement(spec: object) -> str:
    """Render a TOML dependency value as a version string.

    Plain strings are returned as-is. Tables report their ``version``, or
    a marker for workspace-inherited, path and git sources.

    Args:
        spec: Value of a dependency entry.

    Returns:
        Version requirement or source marker, '*' when unspecified.
    """
    if isinstance(spec, str):
        return spec
    if isinstance(spec, list):
        return "multiple"
    if not isinstance(spec, dict):
        return "*"

    version = spec.get("version")
    if isinstance(version, str):
        return version
    if spec.get("workspace") is True:
        return "workspace"
    if isinstance(spec.get("path"), str):
        return f"path:{spec['path']}"
    if isinstance(spec.get("git"), str):
        return f"git:{spec['git']}"
    return "*"


def _js_dependencies(manifest: dict[str, Any]) -> list[Dependency]:
    dependencies: list[Dependency] = []
    for kind in JS_DEPENDENCY_SECTIONS:
        section = manifest.get(kind.value)
        if not isinstance(section, dict):
            continue
        for name, version in section.items():
            version_str = version if isinstance(version, str) else "*"
            dependencies.append(Dependency(name=name, version=version_str, kind=kind))
    return dependencies


def _cargo_dependencies(manifest: dict[str, Any]) -> list[Dependency]:
    dependencies: list[Dependency] = []
    for section, kind in CARGO_DEPENDENCY_SECTIONS.items():
        for name, spec in get_table(manifest, section).items():
            dependencies.append(
                Dependency(name=name, version=describe_requirement(spec), kind=kind)
            )
    return dependencies


def _poetry_dependencies(manifest: dict[str, Any]) -> list[Dependency]:
    dependencies: list[Dependency] = []
    for group, table in poetry_dependency_tables(manifest):
        kind = DependencyKind.RUNTIME if group == "main" else DependencyKind.DEV
        for name, spec in table.items():
            if group == "main" and name == POETRY_PYTHON_KEY:
                continue
            dependencies.append(
                Dependency(name=name, version=describe_requirement(spec), kind=kind)
            )
    return dependencies


def get_dependencies(package: Package) -> list[Dependency]:
    """List the dependencies declared by a package's manifest.

    Nx projects named by project.json read the sibling package.json, since
    project.json carries no dependency sections.

    Args:
        package: Package whose manifest to read.

    Returns:
        Dependencies in manifest section order, empty if the manifest is
        missing, unreadable or of an unknown format.
    """
    manifest_name = package.manifest_path.name

    try:
        if manifest_name in ("package.json", "project.json"):
            manifest_path = package.path / "package.json"
            if not safe_is_file(manifest_path):
                return []
            return _js_dependencies(read_manifest(manifest_path))
        if manifest_name == "Cargo.toml":
            return _cargo_dependencies(read_toml_manifest(package.manifest_path))
        if manifest_name == "pyproject.toml":
            return _poetry_dependencies(read_toml_manifest(package.manifest_path))
    except ManifestError as e:
        logger.warning("Cannot read dependencies of %s: %s", package.name, e)
        return []

    logger.debug("No dependency reader for manifest %s", package.manifest_path)
    return []
