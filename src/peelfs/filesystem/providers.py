"""Strategies that determine a directory's filename restrictions."""

from __future__ import annotations

import errno
import logging
import os
import sys
from pathlib import Path
from typing import Protocol

from .models import FilesystemCapability

LOGGER = logging.getLogger(__name__)

# Valid on POSIX filesystems, rejected by FAT32 and NTFS.
PROBE_FILENAME = ":"


class CapabilityProvider(Protocol):
    """Anything able to report the capability of a directory's filesystem."""

    def check(self, directory: Path) -> FilesystemCapability:
        ...


class RestrictedCapabilityProvider:
    """Report restricted naming without touching the disk.

    Used where the platform's filesystem layer always enforces FAT32-style names.
    """

    def check(self, directory: Path) -> FilesystemCapability:
        return FilesystemCapability.RESTRICTED_NAMING


class ProbeCapabilityProvider:
    """Detect restricted naming by creating a file with an invalid FAT32 name."""

    def __init__(self, probe_name: str = PROBE_FILENAME) -> None:
        self.probe_name = probe_name

    def check(self, directory: Path) -> FilesystemCapability:
        """Create and remove a probe file inside `directory`.

        Returns:
            FilesystemCapability: NOT_RESTRICTED if the name was accepted or is
            already taken, RESTRICTED_NAMING if the filesystem rejected it as
            invalid, PROBE_FAILED for any other error.
        """
        probe_path = os.path.join(os.fspath(directory), self.probe_name)
        try:
            fd = os.open(probe_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except OSError as exc:
            return self._classify_error(probe_path, exc)

        os.close(fd)
        try:
            os.unlink(probe_path)
        except OSError as exc:
            LOGGER.warning("Could not remove capability probe %s: %s", probe_path, exc)
        return FilesystemCapability.NOT_RESTRICTED

    def _classify_error(self, probe_path: str, exc: OSError) -> FilesystemCapability:
        if exc.errno == errno.EINVAL:
            return FilesystemCapability.RESTRICTED_NAMING
        if exc.errno == errno.EEXIST:
            return FilesystemCapability.NOT_RESTRICTED
        LOGGER.warning("Filesystem probe at %s failed: %s", probe_path, exc)
        return FilesystemCapability.PROBE_FAILED


def select_provider(mode: str = "auto", platform: str | None = None) -> CapabilityProvider:
    """Return the provider for a `filesystem.capability_provider` setting.

    Args:
        mode: One of `auto`, `probe`, or `restricted`.
        platform: Platform identifier; defaults to `sys.platform`.

    Raises:
        ValueError: If `mode` is not recognised.
    """
    if mode == "auto":
        mode = "restricted" if (platform or sys.platform) == "win32" else "probe"
    if mode == "probe":
        return ProbeCapabilityProvider()
    if mode == "restricted":
        return RestrictedCapabilityProvider()
    raise ValueError(f"Unknown capability provider '{mode}'.")


__all__ = [
    "PROBE_FILENAME",
    "CapabilityProvider",
    "ProbeCapabilityProvider",
    "RestrictedCapabilityProvider",
    "select_provider",
]
