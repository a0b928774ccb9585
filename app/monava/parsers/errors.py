"""Exceptions raised by the format parsers."""


class ParseError(Exception):
    """Base exception for workspace and manifest parsing errors."""


class ManifestError(ParseError):
    """Raised when a manifest cannot be read or decoded."""


class WorkspaceFileError(ParseError):
    """Raised when a workspace file lacks its required declaration."""
