"""Reader for the pnpm-workspace.yaml subset.

Recognizes exactly one shape::

    packages:
      - "packages/*"
      - 'apps/*'
      - tools/cli
      - "!**/test/**"

Blank lines and '#' comments are skipped. Anything outside the
``packages:`` list is ignored. Nested structures, anchors and
multi-document streams are not interpreted.
"""

import re
from pathlib import Path

from monava.models.workspace import WorkspaceDeclaration
from monava.parsers.errors import WorkspaceFileError
from monava.parsers.manifest import read_text

PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"

_PACKAGES_KEY = re.compile(r"^packages\s*:")


def _parse_entry(item: str) -> str:
    """Extract the glob from a list item body (text after the dash)."""
    if item[:1] in ('"', "'"):
        quote = item[0]
        end = item.find(quote, 1)
        if end == -1:
            return item[1:].strip()
        return item[1:end].strip()

    # Bare scalar; drop a trailing comment
    return item.split(" #", 1)[0].strip()


def parse_pnpm_workspace(content: str) -> WorkspaceDeclaration:
    """Parse pnpm-workspace.yaml content into a workspace declaration.

    Args:
        content: Raw YAML text.

    Returns:
        WorkspaceDeclaration with '!'-prefixed entries as exclusions.

    Raises:
        WorkspaceFileError: If the 'packages:' key is absent or its list
            is empty.
    """
    entries: list[str] = []
    found_key = False
    in_packages = False

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if in_packages:
            if stripped.startswith("-"):
                entry = _parse_entry(stripped[1:].strip())
                if entry:
                    entries.append(entry)
                continue
            # First non-item line closes the list
            in_packages = False

        if not found_key and _PACKAGES_KEY.match(stripped):
            found_key = True
            in_packages = True

    if not found_key:
        msg = "Missing 'packages:' key in workspace file"
        raise WorkspaceFileError(msg)
    if not entries:
        msg = "No packages found in workspace file"
        raise WorkspaceFileError(msg)

    return WorkspaceDeclaration.from_patterns(entries)


def read_pnpm_workspace(root: Path) -> WorkspaceDeclaration:
    """Read and parse the pnpm workspace file under a workspace root.

    Raises:
        ManifestError: If the file is missing, unreadable or too large.
        WorkspaceFileError: If the file lacks a non-empty packages list.
    """
    return parse_pnpm_workspace(read_text(root / PNPM_WORKSPACE_FILE))
