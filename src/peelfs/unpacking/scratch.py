"""Scratch files that atomically replace their target on commit."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Optional, Type

from .errors import CommitError

LOGGER = logging.getLogger(__name__)


class ScratchFile:
    """Temporary file beside `target` whose contents replace it only on commit.

    The scratch file lives in the target's directory so the final `os.replace`
    never crosses a filesystem boundary. Readers of `target` observe either the
    old bytes or the new bytes. Leaving the context without committing removes
    the scratch file and leaves `target` untouched.
    """

    def __init__(self, target: Path) -> None:
        self.target = Path(target)
        self._handle: Optional[BinaryIO] = None
        self._path: Optional[Path] = None
        self.committed = False

    @property
    def path(self) -> Optional[Path]:
        """Return the location of the scratch file while it exists."""
        return self._path

    def __enter__(self) -> "ScratchFile":
        fd, name = tempfile.mkstemp(
            prefix=f".{self.target.name}.", suffix=".tmp", dir=self.target.parent
        )
        self._path = Path(name)
        self._handle = os.fdopen(fd, "wb")
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self.committed:
            self.discard()

    def write(self, data: bytes) -> int:
        if self._handle is None:
            raise CommitError(f"Scratch file for {self.target} is not open.")
        return self._handle.write(data)

    def commit(self) -> None:
        """Flush the scratch file and move it over the target.

        Raises:
            CommitError: If the data cannot be flushed or the replace fails.
        """
        if self._handle is None or self._path is None:
            raise CommitError(f"Scratch file for {self.target} is not open.")
        try:
            self._handle.flush()
            os.fsync(self._handle.fileno())
            self._handle.close()
            self._handle = None
            if self.target.exists():
                shutil.copymode(self.target, self._path)
            os.replace(self._path, self.target)
        except OSError as exc:
            self.discard()
            raise CommitError(f"Could not replace {self.target}: {exc}") from exc
        self.committed = True
        self._path = None
        LOGGER.debug("Committed new contents to %s", self.target)

    def discard(self) -> None:
        """Close and delete the scratch file if it still exists."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        if self._path is not None:
            self._path.unlink(missing_ok=True)
            self._path = None


__all__ = ["ScratchFile"]
