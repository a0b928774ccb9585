"""Line-oriented reader for TOML workspace member declarations.

Scans for a ``[workspace]`` section header and, inside it, for
``members = [...]`` and ``exclude = [...]`` arrays of double-quoted
paths. Arrays may span several lines. The section ends at the next
``[section]`` header. This is not a general TOML parser.
"""

import re

from monava.models.workspace import WorkspaceDeclaration

WORKSPACE_SECTION = "workspace"

_SECTION_HEADER = re.compile(r"^\[\[?\s*([^\]]+?)\s*\]\]?$")
_ARRAY_ASSIGNMENT = re.compile(r"^(members|exclude)\s*=\s*(.*)$")
_QUOTED = re.compile(r'"((?:[^"\\]|\\.)*)"')


def _strip_comment(line: str) -> str:
    """Remove a '#' comment that is not inside a double-quoted string."""
    in_quote = False
    for index, char in enumerate(line):
        if char == '"':
            in_quote = not in_quote
        elif char == "#" and not in_quote:
            return line[:index]
    return line


def _closes_array(text: str) -> bool:
    """Check if an array closing bracket appears outside quoted strings."""
    return "]" in _QUOTED.sub("", text)


def iter_section_headers(content: str) -> list[str]:
    """Return the names of all section headers, in order of appearance.

    Args:
        content: Raw TOML text.

    Returns:
        Header names with brackets removed (e.g. 'workspace', 'tool.poetry').
    """
    headers: list[str] = []
    for raw in content.splitlines():
        match = _SECTION_HEADER.match(_strip_comment(raw).strip())
        if match:
            headers.append(match.group(1))
    return headers


def has_section(content: str, name: str) -> bool:
    """Check whether a TOML document declares the given section header."""
    return name in iter_section_headers(content)


def parse_workspace_members(content: str) -> WorkspaceDeclaration:
    """Extract workspace member and exclude paths from TOML content.

    Args:
        content: Raw TOML text (e.g. a Cargo.toml).

    Returns:
        WorkspaceDeclaration of members and excludes. Empty when the
        document has no workspace section, which means "not a workspace"
        rather than an error.
    """
    members: list[str] = []
    excludes: list[str] = []
    section: str | None = None
    collecting: list[str] | None = None

    for raw in content.splitlines():
        line = _strip_comment(raw).strip()
        if not line:
            continue

        if collecting is not None:
            collecting.extend(_QUOTED.findall(line))
            if _closes_array(line):
                collecting = None
            continue

        header = _SECTION_HEADER.match(line)
        if header:
            section = header.group(1)
            continue

        if section != WORKSPACE_SECTION:
            continue

        assignment = _ARRAY_ASSIGNMENT.match(line)
        if assignment is None:
            continue

        key, value = assignment.groups()
        if not value.startswith("["):
            continue

        target = members if key == "members" else excludes
        target.extend(_QUOTED.findall(value))
        if not _closes_array(value[1:]):
            collecting = target

    return WorkspaceDeclaration(
        include_patterns=tuple(m.strip() for m in members if m.strip()),
        exclude_patterns=tuple(e.strip() for e in excludes if e.strip()),
    )
