"""Filesystem capability values."""

from __future__ import annotations

from enum import Enum


class FilesystemCapability(str, Enum):
    """Whether a filesystem rejects FAT32-invalid file names."""

    RESTRICTED_NAMING = "restricted_naming"
    NOT_RESTRICTED = "not_restricted"
    PROBE_FAILED = "probe_failed"


__all__ = ["FilesystemCapability"]
