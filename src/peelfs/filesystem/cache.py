"""Per-directory cache of filesystem capabilities."""

from __future__ import annotations

import logging
import os
import threading
import unicodedata
from pathlib import Path
from typing import Dict, Optional, Union

from peelfs.config.models import FilesystemSettings

from .errors import InvalidPathError
from .models import FilesystemCapability
from .providers import CapabilityProvider, select_provider

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def canonical_key(directory: PathLike) -> str:
    """Return the cache key for `directory`.

    Raises:
        InvalidPathError: If `directory` is empty or contains a NUL byte.
    """
    raw = os.fspath(directory)
    if not isinstance(raw, str) or not raw or "\x00" in raw:
        raise InvalidPathError(f"Invalid path for capability check: {directory!r}")
    normalized = os.path.normcase(os.path.normpath(os.path.abspath(os.path.expanduser(raw))))
    return unicodedata.normalize("NFC", normalized)


class CapabilityCache:
    """Memoize filesystem capabilities by directory.

    One lock guards the mapping and the probe itself, so each directory is
    probed at most once for the lifetime of the cache, including probes that
    ended in PROBE_FAILED. Probes for unrelated directories run one at a time.
    """

    def __init__(self, provider: CapabilityProvider | None = None) -> None:
        self.provider: CapabilityProvider = provider or select_provider()
        self._entries: Dict[str, FilesystemCapability] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: FilesystemSettings) -> "CapabilityCache":
        return cls(select_provider(settings.capability_provider))

    def check(self, directory: PathLike) -> FilesystemCapability:
        """Return the capability of the filesystem holding `directory`, probing on first use."""
        key = canonical_key(directory)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached
            capability = self.provider.check(Path(key))
            self._entries[key] = capability
        LOGGER.debug("Filesystem capability for %s: %s", key, capability.value)
        return capability

    def cached(self, directory: PathLike) -> Optional[FilesystemCapability]:
        """Return the stored capability for `directory` without probing."""
        key = canonical_key(directory)
        with self._lock:
            return self._entries.get(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, directory: object) -> bool:
        try:
            key = canonical_key(directory)  # type: ignore[arg-type]
        except (InvalidPathError, TypeError):
            return False
        with self._lock:
            return key in self._entries


__all__ = ["CapabilityCache", "canonical_key"]
