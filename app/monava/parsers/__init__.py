"""Minimal format readers for workspace and manifest files.

Each reader extracts one fixed shape of data and rejects anything else.
"""

from monava.parsers.errors import ManifestError, ParseError, WorkspaceFileError
from monava.parsers.manifest import (
    MAX_MANIFEST_SIZE,
    parse_json,
    read_manifest,
    read_manifest_name,
    read_text,
)
from monava.parsers.toml_manifest import (
    cargo_package_name,
    python_package_name,
    read_toml_manifest,
)
from monava.parsers.workspace_toml import has_section, parse_workspace_members
from monava.parsers.workspace_yaml import parse_pnpm_workspace, read_pnpm_workspace

__all__ = [
    "MAX_MANIFEST_SIZE",
    "ManifestError",
    "ParseError",
    "WorkspaceFileError",
    "cargo_package_name",
    "has_section",
    "parse_json",
    "parse_pnpm_workspace",
    "parse_workspace_members",
    "python_package_name",
    "read_manifest",
    "read_manifest_name",
    "read_pnpm_workspace",
    "read_text",
    "read_toml_manifest",
]
