"""Unpacking errors."""


class UnpackError(Exception):
    """Base exception for unpack operations; unpackers report it as a failed outcome."""


class CommitError(UnpackError):
    """Raised when a scratch file cannot replace its target."""
