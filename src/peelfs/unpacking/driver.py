"""Peel nested archives off a file, one layer per step."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from peelfs.config.models import DEFAULT_CANDIDATE_MEMBERS, UnpackingSettings

from .detectors import FormatSniffer
from .models import FileTypeTag, UnpackOutcome
from .unpackers import GZipUnpacker, ZipUnpacker

LOGGER = logging.getLogger(__name__)


class UnpackDriver:
    """Classify a file and unpack it in place until no archive layer remains."""

    def __init__(
        self,
        sniffer: FormatSniffer | None = None,
        zip_unpacker: ZipUnpacker | None = None,
        gzip_unpacker: GZipUnpacker | None = None,
        candidates: Sequence[str] = DEFAULT_CANDIDATE_MEMBERS,
        max_layers: Optional[int] = None,
    ) -> None:
        self.sniffer = sniffer or FormatSniffer()
        self.zip_unpacker = zip_unpacker or ZipUnpacker()
        self.gzip_unpacker = gzip_unpacker or GZipUnpacker()
        self.candidates = list(candidates)
        self.max_layers = max_layers

    @classmethod
    def from_settings(cls, settings: UnpackingSettings) -> "UnpackDriver":
        """Build a driver from the `unpacking` configuration section."""
        return cls(
            zip_unpacker=ZipUnpacker(chunk_size=settings.chunk_size),
            gzip_unpacker=GZipUnpacker(chunk_size=settings.chunk_size),
            candidates=settings.candidate_members,
            max_layers=settings.max_layers,
        )

    def step(self, path: Path, candidates: Iterable[str] | None = None) -> UnpackOutcome:
        """Classify `path` and unpack a single archive layer.

        Returns:
            UnpackOutcome: `(True, tag)` when an archive layer was removed,
            `(False, tag)` when the unpacker failed or the file is not an archive.
        """
        path = Path(path)
        file_type = self.sniffer.sniff(path)
        if file_type is FileTypeTag.ZIP:
            wanted = self.candidates if candidates is None else list(candidates)
            return UnpackOutcome(self.zip_unpacker.unpack(path, wanted), file_type)
        if file_type is FileTypeTag.GZIP:
            return UnpackOutcome(self.gzip_unpacker.unpack(path), file_type)
        return UnpackOutcome(False, file_type)

    def unpack(self, path: Path, candidates: Iterable[str] | None = None) -> UnpackOutcome:
        """Unpack `path` in place, layer after layer.

        Args:
            path: File to unpack; replaced atomically at every successful layer.
            candidates: Zip member names of interest; defaults to the driver's list.

        Returns:
            UnpackOutcome: `succeeded` is True once at least one layer was
            removed; `file_type` is the type detected at the last step taken.
        """
        path = Path(path)
        wanted = self.candidates if candidates is None else list(candidates)
        layers = 0
        while True:
            outcome = self.step(path, wanted)
            if not outcome.succeeded:
                if layers and outcome.file_type.is_archive:
                    LOGGER.warning(
                        "Stopped unpacking %s after %d layer(s): inner %s layer failed",
                        path,
                        layers,
                        outcome.file_type.value,
                    )
                return UnpackOutcome(layers > 0, outcome.file_type)
            layers += 1
            LOGGER.debug("Removed %s layer %d from %s", outcome.file_type.value, layers, path)
            if self.max_layers is not None and layers >= self.max_layers:
                LOGGER.info("Reached layer limit (%d) for %s", self.max_layers, path)
                return UnpackOutcome(True, self.sniffer.sniff(path))


def unpack_archive(path: Path, candidates: Iterable[str] | None = None) -> UnpackOutcome:
    """Unpack `path` with a default driver."""
    return UnpackDriver().unpack(path, candidates)


__all__ = ["UnpackDriver", "unpack_archive"]
