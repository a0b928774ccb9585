"""Manifest (package.json, project.json, nx.json, lerna.json) reader.

Decodes structural JSON documents with a size ceiling. Content that is
too large, does not start with an object or array, or does not decode is
rejected as a whole; no partial result is ever returned.
"""

import json
import logging
from pathlib import Path
from typing import Any

from monava.parsers.errors import ManifestError

logger = logging.getLogger(__name__)

# Ceiling for any single parsed manifest (1 MiB)
MAX_MANIFEST_SIZE = 1024 * 1024


def parse_json(content: str, max_size: int = MAX_MANIFEST_SIZE) -> Any:
    """Decode JSON manifest content.

    Args:
        content: Raw document text.
        max_size: Maximum accepted size in bytes of the encoded content.

    Returns:
        The decoded object or array.

    Raises:
        ManifestError: If the content is too large, does not begin with
            '{' or '[', or is not valid JSON.
    """
    size = len(content.encode("utf-8"))
    if size > max_size:
        msg = f"JSON content too large: {size} bytes (max: {max_size})"
        raise ManifestError(msg)

    if not content.lstrip().startswith(("{", "[")):
        msg = "Invalid JSON: must start with { or ["
        raise ManifestError(msg)

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        msg = f"JSON parse error: {e}"
        raise ManifestError(msg) from e


def read_text(path: Path, max_size: int = MAX_MANIFEST_SIZE) -> str:
    """Read a workspace or manifest file with a size ceiling.

    The size is checked before reading so oversize files are never loaded.

    Args:
        path: File to read.
        max_size: Maximum accepted file size in bytes.

    Returns:
        File content decoded as UTF-8.

    Raises:
        ManifestError: If the file is missing, unreadable or too large.
    """
    try:
        size = path.stat().st_size
    except OSError as e:
        msg = f"Failed to stat {path}: {e}"
        raise ManifestError(msg) from e

    if size > max_size:
        msg = f"File too large: {path} is {size} bytes (max: {max_size})"
        raise ManifestError(msg)

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read {path}: {e}"
        raise ManifestError(msg) from e


def read_manifest(path: Path, max_size: int = MAX_MANIFEST_SIZE) -> dict[str, Any]:
    """Read and decode a JSON manifest that must hold an object.

    Args:
        path: Manifest file to read.
        max_size: Maximum accepted file size in bytes.

    Returns:
        The decoded top-level object.

    Raises:
        ManifestError: If the file cannot be read, decoded, or is not an object.
    """
    data = parse_json(read_text(path, max_size), max_size)
    if not isinstance(data, dict):
        msg = f"Manifest {path} must contain a JSON object"
        raise ManifestError(msg)
    return data


def read_manifest_name(path: Path) -> str | None:
    """Return the 'name' field of a JSON manifest, or None when unusable.

    Read failures are logged and reported as None so callers can skip the
    manifest and continue with the remaining candidates.

    Args:
        path: Manifest file to read.

    Returns:
        The declared name, or None if the manifest is unreadable, malformed,
        or has no string name.
    """
    try:
        data = read_manifest(path)
    except ManifestError as e:
        logger.warning("Skipping manifest %s: %s", path, e)
        return None

    name = data.get("name")
    if not isinstance(name, str) or not name:
        logger.debug("Manifest %s declares no name", path)
        return None
    return name
