"""In-place unpackers for zip and gzip files."""

from __future__ import annotations

import gzip
import logging
import lzma
import zipfile
import zlib
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .errors import UnpackError
from .scratch import ScratchFile

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10_240

# Errors the stdlib decoders raise for truncated, corrupt, or unsupported input.
# ValueError covers undecodable member names and malformed headers.
_ZIP_READ_ERRORS = (
    OSError,
    EOFError,
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    ValueError,
    NotImplementedError,
    RuntimeError,
    UnpackError,
)
_GZIP_READ_ERRORS = (OSError, EOFError, zlib.error, UnpackError)


class ZipUnpacker:
    """Replace a zip archive with the first of its members that matches a candidate name."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    def unpack(self, path: Path, candidates: Iterable[str]) -> bool:
        """Extract one candidate member over the archive at `path`.

        Args:
            path: Zip archive to replace.
            candidates: Member names of interest, compared case-insensitively.

        Returns:
            bool: True when a member was extracted and committed, False when no
            candidate exists or the archive could not be read. The archive is
            left unmodified whenever False is returned.
        """
        path = Path(path)
        wanted = {name.lower() for name in candidates}
        try:
            name = self._first_candidate(path, wanted)
            if name is not None and self._extract(path, name):
                LOGGER.info("Extracted %s from %s", name, path)
                return True
        except _ZIP_READ_ERRORS as exc:
            LOGGER.warning("Failed to unpack zip archive %s: %s", path, exc)
            return False

        LOGGER.debug("No candidate member found in %s", path)
        return False

    def _first_candidate(self, path: Path, wanted: set[str]) -> Optional[str]:
        """Return the lowercase name of the first root-level file listed in `wanted`."""
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or "/" in info.filename.strip("/"):
                    continue
                name = info.filename.lower()
                if name in wanted:
                    return name
        return None

    def _extract(self, path: Path, name: str) -> bool:
        with ScratchFile(path) as target:
            with zipfile.ZipFile(path) as archive:
                member = self._find_member(archive, name)
                if member is None:
                    return False
                with archive.open(member) as source:
                    for chunk in _iter_chunks(source, self.chunk_size):
                        target.write(chunk)
            target.commit()
        return True

    def _find_member(self, archive: zipfile.ZipFile, name: str) -> Optional[zipfile.ZipInfo]:
        for info in archive.infolist():
            if info.filename.lower() == name:
                return info
        return None


class GZipUnpacker:
    """Replace a gzip file with its decompressed contents."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    def unpack(self, path: Path) -> bool:
        """Decompress the whole stream at `path` and commit it in place.

        Returns:
            bool: True when the stream decoded to its end and was committed.
            A decode error anywhere discards the partial output.
        """
        path = Path(path)
        try:
            with ScratchFile(path) as target:
                written = 0
                with gzip.open(path, "rb") as source:
                    for chunk in _iter_chunks(source, self.chunk_size):
                        written += target.write(chunk)
                target.commit()
        except _GZIP_READ_ERRORS as exc:
            LOGGER.warning("Failed to unpack gzip file %s: %s", path, exc)
            return False

        LOGGER.info("Decompressed %s (%d bytes)", path, written)
        return True


def _iter_chunks(stream, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield chunk


__all__ = ["DEFAULT_CHUNK_SIZE", "ZipUnpacker", "GZipUnpacker"]
