"""Filesystem capability errors."""


class InvalidPathError(ValueError):
    """Raised when a capability check is given a path that cannot name a directory."""
