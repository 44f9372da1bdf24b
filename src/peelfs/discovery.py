"""Directory enumeration helpers."""

from __future__ import annotations

import fnmatch
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Iterator

LOGGER = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Which directory children a scan yields."""

    FILES = "files"
    DIRS = "dirs"
    ALL = "all"


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


class DirectoryScanner:
    """List the immediate children of a directory, filtered by kind and glob pattern."""

    def __init__(self, *, include_hidden: bool = False, follow_symlinks: bool = True) -> None:
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks

    def scan(
        self,
        directory: Path,
        kind: EntryKind = EntryKind.FILES,
        pattern: str = "*",
    ) -> Iterator[Path]:
        """Yield children of `directory` in name order.

        Unreadable or missing directories yield nothing.
        """
        directory = Path(directory).expanduser()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            LOGGER.debug("Cannot list %s: %s", directory, exc)
            return

        for entry in entries:
            if not self.include_hidden and _is_hidden(entry.name):
                continue
            if not fnmatch.fnmatch(entry.name, pattern):
                continue
            if self._matches_kind(entry, kind):
                yield Path(entry.path)

    def first(
        self,
        directory: Path,
        kind: EntryKind = EntryKind.FILES,
        pattern: str = "*",
    ) -> Path | None:
        """Return the first matching child, or None when there is none."""
        return next(self.scan(directory, kind, pattern), None)

    def has_subdirectories(self, directory: Path, pattern: str = "*") -> bool:
        """Return True if `directory` has a subdirectory matching `pattern`."""
        return self.first(directory, EntryKind.DIRS, pattern) is not None

    def _matches_kind(self, entry: os.DirEntry, kind: EntryKind) -> bool:
        try:
            if kind is EntryKind.FILES:
                return entry.is_file(follow_symlinks=self.follow_symlinks)
            if kind is EntryKind.DIRS:
                return entry.is_dir(follow_symlinks=self.follow_symlinks)
        except OSError:
            return False
        return True


__all__ = ["DirectoryScanner", "EntryKind"]
