"""File type detection from leading bytes."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from .models import FileTypeTag

LOGGER = logging.getLogger(__name__)

HEADER_SIZE = 10

_ZIP_MAGIC = b"PK"
_GZIP_MAGIC = b"\x1f\x8b"
_LEGACY_METADATA_MARKERS = frozenset({0xE0, 0x0E})
# C-locale isprint() plus isspace().
_TEXT_BYTES = frozenset(range(0x20, 0x7F)) | frozenset(b" \t\n\v\f\r")


def classify_header(head: bytes) -> FileTypeTag:
    """Classify up to the first ten bytes of a file.

    Args:
        head: Leading bytes of the file; anything past the tenth byte is ignored.

    Returns:
        FileTypeTag: Detected type. Fewer than two bytes is never enough to decide.
    """
    head = head[:HEADER_SIZE]
    if len(head) < 2:
        return FileTypeTag.UNKNOWN
    if head.startswith(_ZIP_MAGIC):
        return FileTypeTag.ZIP
    if head.startswith(_GZIP_MAGIC):
        return FileTypeTag.GZIP
    if head[0] in _LEGACY_METADATA_MARKERS:
        return FileTypeTag.LEGACY_METADATA
    if all(byte in _TEXT_BYTES for byte in head):
        return FileTypeTag.TEXT
    return FileTypeTag.UNKNOWN


class FormatSniffer:
    """Identify archive and text files without reading past their header."""

    def sniff(self, path: Union[str, os.PathLike]) -> FileTypeTag:
        """Return the detected type of the file at `path`; unreadable files are UNKNOWN."""
        try:
            with Path(path).open("rb") as fh:
                head = fh.read(HEADER_SIZE)
        except OSError as exc:
            LOGGER.debug("Unable to read header of %s: %s", path, exc)
            return FileTypeTag.UNKNOWN
        return classify_header(head)


def sniff(path: Union[str, os.PathLike]) -> FileTypeTag:
    """Shortcut for `FormatSniffer().sniff(path)`."""
    return FormatSniffer().sniff(path)


__all__ = ["HEADER_SIZE", "FormatSniffer", "classify_header", "sniff"]
