"""Value types shared by the sniffer, unpackers, and driver."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class FileTypeTag(str, Enum):
    """Container format detected from a file's leading bytes."""

    UNKNOWN = "unknown"
    ZIP = "zip"
    GZIP = "gzip"
    LEGACY_METADATA = "legacy_metadata"
    TEXT = "text"

    @property
    def is_archive(self) -> bool:
        return self in (FileTypeTag.ZIP, FileTypeTag.GZIP)


class UnpackOutcome(NamedTuple):
    """Whether unpacking succeeded and the type the file was last identified as."""

    succeeded: bool
    file_type: FileTypeTag


__all__ = ["FileTypeTag", "UnpackOutcome"]
