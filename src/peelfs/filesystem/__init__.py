"""Filesystem capability probing and caching."""

from .cache import CapabilityCache, canonical_key
from .errors import InvalidPathError
from .models import FilesystemCapability
from .providers import (
    PROBE_FILENAME,
    CapabilityProvider,
    ProbeCapabilityProvider,
    RestrictedCapabilityProvider,
    select_provider,
)

__all__ = [
    "PROBE_FILENAME",
    "CapabilityCache",
    "CapabilityProvider",
    "FilesystemCapability",
    "InvalidPathError",
    "ProbeCapabilityProvider",
    "RestrictedCapabilityProvider",
    "canonical_key",
    "select_provider",
]
